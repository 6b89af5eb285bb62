"""Key vocabulary: modifier names, named keys, and printable characters.

The tables map human-readable tokens (English and Chinese) to abstract
key identifiers.  Platform backends translate identifiers to native codes.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping


class Modifier(enum.Enum):
    CTRL = "ctrl"
    SHIFT = "shift"
    ALT = "alt"
    SUPER = "super"


class KeyId(enum.Enum):
    """One physical key, independent of any OS key code."""

    ENTER = "enter"
    ESC = "esc"
    TAB = "tab"
    SPACE = "space"
    BACKSPACE = "backspace"
    DELETE = "delete"
    INSERT = "insert"
    PRINT_SCREEN = "printscreen"

    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    HOME = "home"
    END = "end"
    PAGE_UP = "pageup"
    PAGE_DOWN = "pagedown"

    F1 = "f1"
    F2 = "f2"
    F3 = "f3"
    F4 = "f4"
    F5 = "f5"
    F6 = "f6"
    F7 = "f7"
    F8 = "f8"
    F9 = "f9"
    F10 = "f10"
    F11 = "f11"
    F12 = "f12"

    A = "a"
    B = "b"
    C = "c"
    D = "d"
    E = "e"
    F = "f"
    G = "g"
    H = "h"
    I = "i"  # noqa: E741
    J = "j"
    K = "k"
    L = "l"
    M = "m"
    N = "n"
    O = "o"  # noqa: E741
    P = "p"
    Q = "q"
    R = "r"
    S = "s"
    T = "t"
    U = "u"
    V = "v"
    W = "w"
    X = "x"
    Y = "y"
    Z = "z"

    DIGIT_0 = "0"
    DIGIT_1 = "1"
    DIGIT_2 = "2"
    DIGIT_3 = "3"
    DIGIT_4 = "4"
    DIGIT_5 = "5"
    DIGIT_6 = "6"
    DIGIT_7 = "7"
    DIGIT_8 = "8"
    DIGIT_9 = "9"

    # "=" and "+" share one physical key
    PLUS = "plus"
    EQUAL = "plus"
    MINUS = "minus"
    COMMA = "comma"
    PERIOD = "period"
    SLASH = "slash"
    SEMICOLON = "semicolon"
    QUOTE = "quote"
    LEFT_BRACKET = "leftbracket"
    RIGHT_BRACKET = "rightbracket"
    BACKSLASH = "backslash"
    BACKTICK = "backtick"


# ---------------------------------------------------------------------------
# Tables
# ---------------------------------------------------------------------------

# Order matters: the tokenizer takes the first declared prefix match.
MODIFIER_NAMES: tuple[tuple[str, Modifier], ...] = (
    ("control", Modifier.CTRL),
    ("ctrl", Modifier.CTRL),
    ("shift", Modifier.SHIFT),
    ("alt", Modifier.ALT),
    ("windows", Modifier.SUPER),
    ("win", Modifier.SUPER),
    ("command", Modifier.SUPER),
    ("cmd", Modifier.SUPER),
    ("meta", Modifier.SUPER),
    ("super", Modifier.SUPER),
)

NAMED_KEYS: dict[str, KeyId] = {
    "enter": KeyId.ENTER,
    "回车": KeyId.ENTER,
    "确认": KeyId.ENTER,
    "esc": KeyId.ESC,
    "escape": KeyId.ESC,
    "退出": KeyId.ESC,
    "tab": KeyId.TAB,
    "制表": KeyId.TAB,
    "space": KeyId.SPACE,
    "空格": KeyId.SPACE,
    "backspace": KeyId.BACKSPACE,
    "退格": KeyId.BACKSPACE,
    "del": KeyId.DELETE,
    "delete": KeyId.DELETE,
    "删除": KeyId.DELETE,
    "ins": KeyId.INSERT,
    "insert": KeyId.INSERT,
    "插入": KeyId.INSERT,
    "prtsc": KeyId.PRINT_SCREEN,
    "printscreen": KeyId.PRINT_SCREEN,
    "截屏": KeyId.PRINT_SCREEN,
    # Arrows
    "up": KeyId.UP,
    "down": KeyId.DOWN,
    "left": KeyId.LEFT,
    "right": KeyId.RIGHT,
    "上": KeyId.UP,
    "下": KeyId.DOWN,
    "左": KeyId.LEFT,
    "右": KeyId.RIGHT,
    # Navigation
    "home": KeyId.HOME,
    "end": KeyId.END,
    "pgup": KeyId.PAGE_UP,
    "pgdn": KeyId.PAGE_DOWN,
    "pageup": KeyId.PAGE_UP,
    "pagedown": KeyId.PAGE_DOWN,
    "向上翻页": KeyId.PAGE_UP,
    "向下翻页": KeyId.PAGE_DOWN,
    # Function keys
    **{f"f{n}": KeyId[f"F{n}"] for n in range(1, 13)},
    # Punctuation
    "+": KeyId.PLUS,
    "加号": KeyId.PLUS,
    "-": KeyId.MINUS,
    "减号": KeyId.MINUS,
    "=": KeyId.EQUAL,
    "等于": KeyId.EQUAL,
    ",": KeyId.COMMA,
    "逗号": KeyId.COMMA,
    ".": KeyId.PERIOD,
    "句号": KeyId.PERIOD,
    "/": KeyId.SLASH,
    "斜杠": KeyId.SLASH,
    ";": KeyId.SEMICOLON,
    "分号": KeyId.SEMICOLON,
    "'": KeyId.QUOTE,
    "引号": KeyId.QUOTE,
    "[": KeyId.LEFT_BRACKET,
    "左括号": KeyId.LEFT_BRACKET,
    "]": KeyId.RIGHT_BRACKET,
    "右括号": KeyId.RIGHT_BRACKET,
    "\\": KeyId.BACKSLASH,
    "反斜杠": KeyId.BACKSLASH,
    "`": KeyId.BACKTICK,
    "波浪号": KeyId.BACKTICK,
}

PRINTABLE_CHARS: dict[str, KeyId] = {
    **{chr(c): KeyId[chr(c).upper()] for c in range(ord("a"), ord("z") + 1)},
    **{str(d): KeyId[f"DIGIT_{d}"] for d in range(10)},
    "+": KeyId.PLUS,
    "-": KeyId.MINUS,
    "=": KeyId.EQUAL,
    ",": KeyId.COMMA,
    ".": KeyId.PERIOD,
    "/": KeyId.SLASH,
    ";": KeyId.SEMICOLON,
    "'": KeyId.QUOTE,
    "[": KeyId.LEFT_BRACKET,
    "]": KeyId.RIGHT_BRACKET,
    "\\": KeyId.BACKSLASH,
    "`": KeyId.BACKTICK,
}

# Characters that join parts of a chord ("ctrl+s") when met inside a segment.
CHORD_JOINERS = frozenset({"+"})


@dataclass(frozen=True, eq=False)
class Vocabulary:
    """Immutable token tables handed to the tokenizer.

    Build once at start-up and share; nothing here changes afterwards.
    """

    modifiers: tuple[tuple[str, Modifier], ...] = MODIFIER_NAMES
    named_keys: Mapping[str, KeyId] = field(default_factory=lambda: NAMED_KEYS)
    printable: Mapping[str, KeyId] = field(default_factory=lambda: PRINTABLE_CHARS)
    joiners: frozenset[str] = CHORD_JOINERS

    def __post_init__(self) -> None:
        for name, _ in self.modifiers:
            if not name:
                raise ValueError("modifier names must be non-empty")
        for ch in self.printable:
            if len(ch) != 1 or not ch.isascii() or ch == " ":
                raise ValueError(f"printable entry must be one non-space ASCII char: {ch!r}")
        object.__setattr__(self, "named_keys", MappingProxyType(dict(self.named_keys)))
        object.__setattr__(self, "printable", MappingProxyType(dict(self.printable)))

    def lookup_key(self, name: str) -> KeyId | None:
        """Resolve a single key name (named key or printable character)."""
        name = name.strip().lower()
        key = self.named_keys.get(name)
        if key is None:
            key = self.printable.get(name)
        return key


DEFAULT_VOCABULARY = Vocabulary()
