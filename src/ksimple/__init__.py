"""k/simple public API."""

from .environment import Environment, GlobalInfo
from .errors import Diagnostic, ErrorKind, KError, KLengthError, KOperandError, KRankError, TokenizeError
from .evaluator import StatefulEvaluate, evaluate, is_assignment
from .lexer import Token, tokenize, tokenize_line
from .values import ERROR, Atom, Error, Value, Vector, format_value
from .repl import process_line, run_batch, run_repl

__all__ = [
    "tokenize",
    "tokenize_line",
    "Token",
    "evaluate",
    "is_assignment",
    "StatefulEvaluate",
    "Environment",
    "GlobalInfo",
    "Atom",
    "Vector",
    "Error",
    "ERROR",
    "Value",
    "format_value",
    "process_line",
    "run_repl",
    "run_batch",
    "Diagnostic",
    "ErrorKind",
    "KError",
    "KOperandError",
    "KRankError",
    "KLengthError",
    "TokenizeError",
]
