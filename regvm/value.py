"""Runtime value model: the tagged union held by registers and variables."""

from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Union

from . import constants


class ValueKind(str, Enum):
    EMPTY = "EMPTY"
    NUMBER = "NUMBER"
    BOOLEAN = "BOOLEAN"
    TEXT = "TEXT"


@dataclass(frozen=True)
class Value:
    """A single runtime datum.

    ``payload`` is ``None`` for EMPTY, a ``float`` for NUMBER, a ``bool``
    for BOOLEAN and a ``str`` for TEXT. Build instances through the
    classmethod constructors so the payload always matches the kind.
    """

    kind: ValueKind
    payload: Union[float, bool, str, None] = None

    @classmethod
    def empty(cls) -> Value:
        return EMPTY

    @classmethod
    def number(cls, n: float) -> Value:
        return cls(kind=ValueKind.NUMBER, payload=float(n))

    @classmethod
    def boolean(cls, b: bool) -> Value:
        return cls(kind=ValueKind.BOOLEAN, payload=bool(b))

    @classmethod
    def text(cls, s: str) -> Value:
        return cls(kind=ValueKind.TEXT, payload=str(s))

    @property
    def is_empty(self) -> bool:
        return self.kind == ValueKind.EMPTY

    @property
    def is_number(self) -> bool:
        return self.kind == ValueKind.NUMBER

    @property
    def is_text(self) -> bool:
        return self.kind == ValueKind.TEXT

    def is_truthy(self) -> bool:
        """Truthiness as seen by a conditional jump.

        Numbers are true only when strictly positive; every kind other
        than NUMBER and BOOLEAN is false.
        """
        if self.kind == ValueKind.NUMBER:
            return self.payload > 0.0
        if self.kind == ValueKind.BOOLEAN:
            return self.payload
        return False

    def to_python(self) -> Union[float, bool, str, None]:
        return self.payload

    def __str__(self) -> str:
        if self.kind == ValueKind.EMPTY:
            return constants.EMPTY_DISPLAY
        if self.kind == ValueKind.BOOLEAN:
            return constants.TRUE_DISPLAY if self.payload else constants.FALSE_DISPLAY
        if self.kind == ValueKind.NUMBER:
            return format_number(self.payload)
        return self.payload


EMPTY = Value(kind=ValueKind.EMPTY)


def format_number(n: float) -> str:
    """Render a float the way it is appended during text coercion.

    Integral values drop the fractional part (``3.0`` → ``"3"``); other
    finite values use the shortest round-tripping digits in positional
    notation, never an exponent (``1e-07`` → ``"0.0000001"``).
    """
    if math.isnan(n):
        return constants.NAN_DISPLAY
    if math.isinf(n):
        return constants.INF_DISPLAY if n > 0 else f"-{constants.INF_DISPLAY}"
    if n.is_integer():
        return str(int(n))
    return format(Decimal(repr(n)), "f")
