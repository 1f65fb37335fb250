"""Runtime error taxonomy raised by the execution engine."""

from __future__ import annotations

from . import constants


class VMError(Exception):
    """Base class for every fatal execution error; carries the process id."""

    description: str = "vm error"

    def __init__(self, pid: int):
        self.pid = pid
        super().__init__(self._message())

    def _message(self) -> str:
        return f"{constants.PROCESS_TAG_TEMPLATE.format(pid=self.pid)} {self.description}"


class TypeMismatch(VMError):
    description = "type mismatch"


class DivisionByZero(VMError):
    description = "division by zero"


class BadAddress(VMError):
    description = "bad address"


class UndefinedVariable(VMError):
    def __init__(self, pid: int, name: str):
        self.name = name
        super().__init__(pid)

    def _message(self) -> str:
        tag = constants.PROCESS_TAG_TEMPLATE.format(pid=self.pid)
        return f"{tag} undefined variable `{self.name}`"
