"""
Leaf arguments: flags, values and early-exit flags. A leaf knows how to turn
a matched name (and, for values, the associated raw text) into a
:py:data:`BindOutcome`.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Generic, Optional, Tuple, TypeVar, Union

from combinargs.description import Description
from combinargs.errors import (
    ArgumentError,
    InvalidValue,
    MissingArgument,
    MissingValue,
    UnknownVariant,
)
from combinargs.language import Language

A = TypeVar("A")


@dataclass(frozen=True)
class Bound(Generic[A]):
    value: A


@dataclass(frozen=True)
class Rejected:
    error: ArgumentError


@dataclass(frozen=True)
class Exit:
    message: str


BindOutcome = Union[Bound, Rejected, Exit]


def display_value(value: Any) -> str:
    """
    How values appear in help text.

    >>> display_value(False), display_value(3)
    ('false', '3')
    """
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, Enum):
        return value.name
    return str(value)


def _identity(on: bool) -> Any:
    return on


@dataclass(frozen=True)
class Leaf(Generic[A]):
    description: Description[A]

    negatable = False

    @property
    def meta_var(self) -> Optional[str]:
        return None

    @property
    def names(self) -> Tuple[str, ...]:
        d = self.description
        return tuple(n.string for n in d.long + d.short)

    def usage(self) -> str:
        return self.description.usage(negatable=self.negatable, meta_var=self.meta_var)

    def long_usage(self) -> str:
        return self.description.long_usage(
            negatable=self.negatable, meta_var=self.meta_var
        )

    def short_usage(self) -> Optional[str]:
        return self.description.short_usage(meta_var=self.meta_var)

    def missing(self) -> ArgumentError:
        return MissingArgument(self.usage(), names=self.names)

    def absent(self) -> BindOutcome:
        """
        The outcome when no token named this leaf.
        """
        if self.description.required:
            return Rejected(self.missing())
        return Bound(self.description.default)

    def allowed_display(self) -> Optional[Tuple[str, ...]]:
        return None

    def annotation(self, language: Language) -> Optional[str]:
        """
        The bracketed default/allowed-values note shown in help text.
        """
        parts = []
        allowed = self.allowed_display()
        if allowed:
            parts.append(f"{language.allowed_values}: {', '.join(allowed)}")
        if not self.description.required:
            parts.append(f"{language.default}: {self.display(self.description.default)}")
        if not parts:
            return None
        return "[" + " | ".join(parts) + "]"

    def display(self, value: Any) -> str:
        return display_value(value)


@dataclass(frozen=True)
class FlagArgument(Leaf[A]):
    """
    Binds ``convert(True)`` for ``--name`` and ``convert(False)`` for
    ``--no-name``.

    >>> from combinargs.description import Description
    >>> leaf = FlagArgument(Description.make("verbose", short="v", default=False))
    >>> leaf.bind(negated=True)
    Bound(value=False)
    >>> leaf.usage()
    '--[no-]verbose | -v'
    """

    convert: Callable[[bool], A] = _identity
    negatable: bool = True

    def bind(self, negated: bool = False) -> BindOutcome:
        on = not negated
        try:
            return Bound(self.convert(on))
        except Exception as e:
            return Rejected(
                InvalidValue(
                    self.usage(), name=self.description.primary, raw=str(on), cause=e
                )
            )


@dataclass(frozen=True)
class ValueArgument(Leaf[A]):
    """
    Converts the raw text following its name.

    >>> from combinargs.description import Description
    >>> leaf = ValueArgument(Description.make("count", default=0), convert=int, metavar="N")
    >>> leaf.bind("3")
    Bound(value=3)
    >>> type(leaf.bind("three").error).__name__
    'InvalidValue'
    >>> type(leaf.bind(None).error).__name__
    'MissingValue'
    """

    convert: Callable[[str], A]
    metavar: str
    allowed: Optional[Tuple[A, ...]] = None
    show: Callable[[A], str] = display_value

    @property
    def meta_var(self) -> Optional[str]:
        return self.metavar

    def missing(self) -> ArgumentError:
        return MissingValue(self.usage(), names=self.names)

    def allowed_display(self) -> Optional[Tuple[str, ...]]:
        if self.allowed is None:
            return None
        return tuple(self.show(a) for a in self.allowed)

    def display(self, value: Any) -> str:
        return self.show(value)

    def unknown(self, raw: str) -> Rejected:
        return Rejected(
            UnknownVariant(
                self.usage(),
                name=self.description.primary,
                raw=raw,
                allowed=self.allowed_display() or (),
            )
        )

    def bind(self, raw: Optional[str]) -> BindOutcome:
        if raw is None:
            return Rejected(self.missing())
        try:
            value = self.convert(raw)
        except LookupError as e:
            if self.allowed is not None:
                return self.unknown(raw)
            return Rejected(self.invalid(raw, e))
        except Exception as e:
            return Rejected(self.invalid(raw, e))
        if self.allowed is not None and value not in self.allowed:
            return self.unknown(raw)
        return Bound(value)

    def invalid(self, raw: str, cause: Exception) -> ArgumentError:
        return InvalidValue(
            self.usage(), name=self.description.primary, raw=raw, cause=cause
        )


@dataclass(frozen=True)
class EarlyExitArgument(Leaf[None]):
    """
    Ends parsing with ``message`` as soon as its name is seen.
    """

    message: str

    def bind(self) -> BindOutcome:
        return Exit(self.message)

    def absent(self) -> BindOutcome:
        return Bound(None)

    def annotation(self, language: Language) -> Optional[str]:
        return None
