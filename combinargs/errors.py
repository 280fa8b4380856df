"""
Defines errors which can be produced by parsers.

Every error carries ``usage``, a synopsis of the argument it concerns (for
example ``--[no-]verbose | -v``), and renders a localized one-line message with
:py:meth:`ArgumentError.message`.
"""
from dataclasses import dataclass
from typing import Optional, Tuple

from combinargs.language import Language, default_language


@dataclass
class ArgumentError(Exception):
    usage: str

    def label(self, language: Language) -> str:
        raise NotImplementedError

    def message(self, language: Optional[Language] = None) -> str:
        if language is None:
            language = default_language()
        return f"{self.label(language)}: {self.usage}"

    def __str__(self) -> str:
        return self.message()


@dataclass
class MissingArgument(ArgumentError):
    """
    A required argument was not given.

    >>> from combinargs.language import GERMAN
    >>> MissingArgument("--[no-]verbose | -v", names=("verbose", "v")).message(GERMAN)
    'Fehlende Flag: --[no-]verbose | -v'
    """

    names: Tuple[str, ...]

    def label(self, language: Language) -> str:
        return language.missing_flag


@dataclass
class MissingValue(MissingArgument):
    """
    A value argument was not given, or its name was the last token.
    """

    def label(self, language: Language) -> str:
        return language.missing_value


@dataclass
class UnrecognizedArgument(ArgumentError):
    token: str

    def label(self, language: Language) -> str:
        return language.unrecognized_argument


@dataclass
class InvalidValue(ArgumentError):
    """
    The conversion function raised while converting ``raw``.
    """

    name: str
    raw: str
    cause: Exception

    def label(self, language: Language) -> str:
        return language.invalid_value

    def message(self, language: Optional[Language] = None) -> str:
        return f"{super().message(language)}\n{self.raw!r}: {self.cause}"


@dataclass
class UnknownVariant(ArgumentError):
    name: str
    raw: str
    allowed: Tuple[str, ...]

    def label(self, language: Language) -> str:
        return language.unknown_variant

    def message(self, language: Optional[Language] = None) -> str:
        if language is None:
            language = default_language()
        allowed = ", ".join(self.allowed)
        return (
            f"{super().message(language)}\n"
            f"{self.raw!r} [{language.allowed_values}: {allowed}]"
        )


@dataclass
class ExtraArguments(ArgumentError):
    """
    >>> ExtraArguments("", tokens=("a", "b")).message()
    "Unused argument(s): 'a', 'b'"
    """

    tokens: Tuple[str, ...]

    def label(self, language: Language) -> str:
        return language.extra_arguments

    def message(self, language: Optional[Language] = None) -> str:
        if language is None:
            language = default_language()
        return f"{self.label(language)}: {', '.join(map(repr, self.tokens))}"


@dataclass
class DuplicateName(ArgumentError):
    """
    Raised while building a parser in which two arguments share a name.
    """

    name: str

    def message(self, language: Optional[Language] = None) -> str:
        return f"Duplicate name {self.name!r}: {self.usage}"


@dataclass
class InvalidName(ArgumentError):
    """
    Raised while building an argument whose names are malformed.
    """

    name: str

    def message(self, language: Optional[Language] = None) -> str:
        return f"Invalid name {self.name!r}: {self.usage}"
