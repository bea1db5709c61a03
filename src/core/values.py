"""Field validators used in table definitions.

Validators only check the shape of a value. They are deliberately small: the
document store uses them on insert and to convert stored columns back into
Python values.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Tuple


@dataclass(frozen=True)
class Validator(ABC):
    """Base validator. ``kind`` doubles as the storage affinity hint."""

    kind: str

    @abstractmethod
    def check(self, value: Any) -> bool:
        """Return True when ``value`` has the declared shape."""

    def describe(self) -> str:
        return self.kind

    def from_storage(self, value: Any) -> Any:
        return value

    def to_storage(self, value: Any) -> Any:
        return value


@dataclass(frozen=True)
class StringValidator(Validator):
    kind: str = "string"

    def check(self, value: Any) -> bool:
        return isinstance(value, str)


@dataclass(frozen=True)
class BooleanValidator(Validator):
    kind: str = "boolean"

    def check(self, value: Any) -> bool:
        return isinstance(value, bool)

    def from_storage(self, value: Any) -> Any:
        return bool(value)

    def to_storage(self, value: Any) -> Any:
        return int(value)


@dataclass(frozen=True)
class LiteralValidator(Validator):
    value: Any = None
    kind: str = "literal"

    def check(self, value: Any) -> bool:
        # bool is an int subclass, so compare types as well
        return type(value) is type(self.value) and value == self.value

    def describe(self) -> str:
        return repr(self.value)


@dataclass(frozen=True)
class UnionValidator(Validator):
    members: Tuple[Validator, ...] = ()
    kind: str = "union"

    def check(self, value: Any) -> bool:
        return any(member.check(value) for member in self.members)

    def describe(self) -> str:
        return " | ".join(member.describe() for member in self.members)


def string() -> Validator:
    return StringValidator()


def boolean() -> Validator:
    return BooleanValidator()


def literal(value: Any) -> Validator:
    return LiteralValidator(value=value)


def union(*members: Validator) -> Validator:
    if not members:
        raise ValueError("union() needs at least one member")
    return UnionValidator(members=tuple(members))
