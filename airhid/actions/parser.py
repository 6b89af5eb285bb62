"""Command parsing: tokenizer plus the segment state machine.

A command such as ``"ctrl+shift+esc"``, ``"ctrl s"`` or ``"向上翻页"`` is
scanned left to right.  Each position either starts a vocabulary token or
is a separator.  Within a run of adjacent tokens (a *segment*) only the
first token is recorded, so ``"aaa"`` means a single ``A``.

Examples::

    >>> parse_command("ctrl+shift+esc").main_keys
    (<KeyId.ESC: 'esc'>,)
    >>> parse_command("aaa").main_keys
    (<KeyId.A: 'a'>,)
    >>> parse_command("up down").main_keys
    (<KeyId.UP: 'up'>, <KeyId.DOWN: 'down'>)
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Iterator

from airhid.actions._keys import DEFAULT_VOCABULARY, KeyId, Modifier, Vocabulary
from airhid.errors import EmptyCommand, NoRecognizedKeys


class TokenKind(enum.Enum):
    MODIFIER = "modifier"
    MAIN_KEY = "main_key"


@dataclass(frozen=True)
class Token:
    """One vocabulary match.

    ``length`` counts characters of the command, not encoded bytes.
    """

    kind: TokenKind
    text: str
    value: Modifier | KeyId
    length: int


@dataclass(frozen=True)
class ParseResult:
    modifiers: frozenset[Modifier]
    main_keys: tuple[KeyId, ...]

    @property
    def is_empty(self) -> bool:
        return not self.modifiers and not self.main_keys


def normalize_command(command: str) -> str:
    return command.strip().lower()


# ---------------------------------------------------------------------------
# Tokenizer
# ---------------------------------------------------------------------------


def match_token(text: str, pos: int, vocab: Vocabulary = DEFAULT_VOCABULARY) -> Token | None:
    """Return the token starting at ``text[pos]``, or None for a separator.

    Modifiers are tried first and the first declared name that prefixes the
    remaining text wins.  Named keys come next, longest match first.  A
    single printable ASCII character is the last resort.
    """
    for name, modifier in vocab.modifiers:
        if text.startswith(name, pos):
            return Token(TokenKind.MODIFIER, name, modifier, len(name))

    best: str | None = None
    for name in vocab.named_keys:
        if text.startswith(name, pos) and (best is None or len(name) > len(best)):
            best = name
    if best is not None:
        return Token(TokenKind.MAIN_KEY, best, vocab.named_keys[best], len(best))

    ch = text[pos]
    if ch != " " and ch.isascii() and ch in vocab.printable:
        return Token(TokenKind.MAIN_KEY, ch, vocab.printable[ch], 1)
    return None


def tokenize(text: str, vocab: Vocabulary = DEFAULT_VOCABULARY) -> Iterator[Token | None]:
    """Yield a token per match and None per separator character."""
    pos = 0
    while pos < len(text):
        token = match_token(text, pos, vocab)
        yield token
        pos += token.length if token is not None else 1


# ---------------------------------------------------------------------------
# Segmenter
# ---------------------------------------------------------------------------


def build_chord(text: str, vocab: Vocabulary = DEFAULT_VOCABULARY) -> ParseResult:
    """Run the segment state machine over already-normalized text."""
    modifiers: set[Modifier] = set()
    main_keys: list[KeyId] = []
    in_segment = False

    for token in tokenize(text, vocab):
        if token is None:
            in_segment = False
            continue
        if in_segment:
            # "ctrl+s": a joiner inside a run splits the chord parts
            if token.text in vocab.joiners:
                in_segment = False
            continue
        if token.kind is TokenKind.MODIFIER:
            modifiers.add(token.value)  # type: ignore[arg-type]
        else:
            main_keys.append(token.value)  # type: ignore[arg-type]
        in_segment = True

    return ParseResult(modifiers=frozenset(modifiers), main_keys=tuple(main_keys))


def parse_command(command: str, vocab: Vocabulary = DEFAULT_VOCABULARY) -> ParseResult:
    """Parse a free-form key command into modifiers and main keys.

    Args:
        command: Raw command text, e.g. ``"ctrl+s"``, ``"alt f4"``, ``"回车"``.
        vocab: Token tables to match against.

    Raises:
        EmptyCommand: The command is empty after trimming.
        NoRecognizedKeys: Nothing in the command matched the vocabulary.
    """
    text = normalize_command(command)
    if not text:
        raise EmptyCommand()
    result = build_chord(text, vocab)
    if result.is_empty:
        raise NoRecognizedKeys(text)
    return result
