"""Global bindings, workspace accounting and error reporting."""

from __future__ import annotations

import sys
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Final, TextIO

from .errors import Diagnostic, ErrorKind
from .lexer import Token
from .values import ERROR, Atom, Value, Vector

GLOBAL_NAMES: Final[str] = "abcdefghijklmnopqrstuvwxyz"


@dataclass(frozen=True)
class GlobalInfo:
    name: str
    length: int
    share_count: int


def global_slot(name: str) -> int:
    slot = GLOBAL_NAMES.find(name)
    if len(name) != 1 or slot < 0:
        raise KeyError(name)
    return slot


class Environment(Mapping[str, Value]):
    """The 26 global slots ``a``..``z`` plus diagnostics for one interpreter session.

    Vectors are stored by reference: reading a global hands out the same
    ``Vector`` instance that the slot holds, and assignment stores the instance
    it is given. Nothing ever mutates a vector, so aliasing is safe.
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        self._globals: list[Value] = [Atom(0) for _ in GLOBAL_NAMES]
        self._stream = stream
        self.diagnostics: list[Diagnostic] = []

    def __getitem__(self, key: str) -> Value:
        return self._globals[global_slot(key)]

    def __iter__(self):
        return iter(GLOBAL_NAMES)

    def __len__(self) -> int:
        return len(GLOBAL_NAMES)

    def noun_from_token(self, token: Token) -> Value:
        if token.kind == "NUMBER":
            return Atom(int(token.value))
        if token.kind == "VECTOR":
            return Vector.of(token.value)
        if token.kind == "GLOBAL":
            return self._globals[global_slot(str(token.value))]
        return ERROR

    def assign_global(self, slot: int, value: Value) -> Value:
        self._globals[slot] = value
        return value

    def _vector_slots(self) -> list[tuple[str, Vector]]:
        return [(name, value) for name, value in zip(GLOBAL_NAMES, self._globals) if isinstance(value, Vector)]

    def workspace_bytes(self) -> int:
        seen: set[int] = set()
        total = 0
        for _, vector in self._vector_slots():
            if id(vector.items) in seen:
                continue
            seen.add(id(vector.items))
            total += len(vector) * vector.items.dtype.itemsize
        return total

    def list_globals(self) -> list[GlobalInfo]:
        slots = self._vector_slots()
        out: list[GlobalInfo] = []
        for name, vector in slots:
            share_count = sum(1 for _, other in slots if other.items is vector.items)
            out.append(GlobalInfo(name=name, length=len(vector), share_count=share_count))
        return out

    def format_globals(self) -> str:
        return "".join(f"{info.name}[{info.length}] {info.share_count}\n" for info in self.list_globals())

    def report_error(self, where: str, message: str) -> Value:
        diagnostic = Diagnostic(where=where, message=message)
        self.diagnostics.append(diagnostic)
        print(diagnostic, file=self._stream if self._stream is not None else sys.stdout)
        return ERROR

    def drain_diagnostics(self) -> list[Diagnostic]:
        drained, self.diagnostics = self.diagnostics, []
        return drained

    def domain_error(self, where: str) -> Value:
        return self.report_error(where, ErrorKind.DOMAIN.value)

    def rank_error(self, where: str) -> Value:
        return self.report_error(where, ErrorKind.RANK.value)

    def length_error(self, where: str) -> Value:
        return self.report_error(where, ErrorKind.LENGTH.value)

    def parse_error(self, where: str) -> Value:
        return self.report_error(where, ErrorKind.PARSE.value)

    def not_implemented_error(self, where: str) -> Value:
        return self.report_error(where, ErrorKind.NYI.value)
