"""Tokenization for k/simple source lines."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from .errors import TokenizeError

# Index 0 is the "not a verb"/"not an adverb" slot; a space can never reach
# lookup because whitespace is skipped.
VERB_TOKENS: Final[str] = " +-!#,@=~&|*"
ADVERB_TOKENS: Final[str] = " /\\"

_INT64_MAX: Final[int] = 2**63 - 1
_WHITESPACE: Final[frozenset[str]] = frozenset(" \t\n\r\f\v")
_DIGITS: Final[frozenset[str]] = frozenset("0123456789")


@dataclass(frozen=True)
class Token:
    kind: str
    value: int | str | tuple[int, ...] | None
    pos: int
    end: int

    def can_start_negative(self) -> bool:
        """True when a ``-`` directly after this token begins a negative literal."""
        if self.kind == "COLON":
            return True
        if self.kind == "SYMBOL":
            return self.value in VERB_TOKENS or self.value in ADVERB_TOKENS
        return False


def verb_index(symbol: str) -> int:
    index = VERB_TOKENS.find(symbol)
    return index if index > 0 else 0


def adverb_index(symbol: str) -> int:
    index = ADVERB_TOKENS.find(symbol)
    return index if index > 0 else 0


def _scan_integer(line: str, start: int) -> tuple[int, int]:
    i = start
    sign = 1
    if line[i] == "-":
        sign = -1
        i += 1

    digits_start = i
    magnitude = 0
    while i < len(line) and line[i] in _DIGITS:
        magnitude = magnitude * 10 + (ord(line[i]) - ord("0"))
        if magnitude > _INT64_MAX:
            raise TokenizeError("Integer literal overflows 64 bits", start)
        i += 1

    if i == digits_start:
        raise TokenizeError(f"Invalid numeric literal {line[start:i]!r}", start)
    return sign * magnitude, i


def _fold_strands(tokens: list[Token]) -> list[Token]:
    out: list[Token] = []
    run: list[Token] = []

    def flush() -> None:
        if len(run) > 1:
            items = tuple(int(tok.value) for tok in run)
            out.append(Token("VECTOR", items, run[0].pos, run[-1].end))
        else:
            out.extend(run)
        run.clear()

    for tok in tokens:
        if tok.kind == "NUMBER":
            run.append(tok)
            continue
        flush()
        out.append(tok)
    flush()
    return out


def tokenize_line(line: str) -> list[Token]:
    """Byte-level tokenization; every integer literal is its own NUMBER token."""
    tokens: list[Token] = []
    i = 0

    while i < len(line):
        ch = line[i]

        if ch in _WHITESPACE:
            i += 1
            continue

        if ch == ":":
            tokens.append(Token("COLON", None, i, i + 1))
            i += 1
            continue

        can_start_negative = not tokens or tokens[-1].can_start_negative()
        starts_negative = ch == "-" and can_start_negative and i + 1 < len(line) and line[i + 1] in _DIGITS
        if starts_negative or ch in _DIGITS:
            value, end = _scan_integer(line, i)
            tokens.append(Token("NUMBER", value, i, end))
            i = end
            continue

        if "a" <= ch <= "z":
            tokens.append(Token("GLOBAL", ch, i, i + 1))
            i += 1
            continue

        tokens.append(Token("SYMBOL", ch, i, i + 1))
        i += 1

    return tokens


def tokenize(line: str) -> list[Token]:
    """Tokenize one line, folding runs of adjacent integers into VECTOR literals."""
    return _fold_strands(tokenize_line(line))
