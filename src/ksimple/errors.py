"""Error categories, diagnostics and exception types for the k/simple core."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ErrorKind(str, Enum):
    DOMAIN = "domain"
    RANK = "rank"
    LENGTH = "length"
    PARSE = "parse"
    NYI = "nyi"


@dataclass(frozen=True)
class Diagnostic:
    """One reported failure: the detecting operation and a short message."""

    where: str
    message: str

    def __str__(self) -> str:
        return f"{self.where}: {self.message}"


class KError(Exception):
    """Base class for structured k/simple errors."""


@dataclass(frozen=True)
class TokenizeError(KError):
    """Raised by the tokenizer for malformed input."""

    message: str
    pos: int

    def __str__(self) -> str:
        return f"{self.message} at index {self.pos}"


class KOperandError(KError):
    """Operand shape misuse detected by a value helper.

    Verb implementations catch this and report the category they own.
    """


class KRankError(KOperandError):
    """Operand has the wrong shape: an atom where a vector is needed or vice versa."""


class KLengthError(KOperandError):
    """Vector operands whose lengths do not agree."""
