from combinargs.args import Args, field
from combinargs.description import Affixes, Description
from combinargs.errors import (
    ArgumentError,
    DuplicateName,
    ExtraArguments,
    InvalidName,
    InvalidValue,
    MissingArgument,
    MissingValue,
    UnknownVariant,
    UnrecognizedArgument,
)
from combinargs.help import render
from combinargs.language import ENGLISH, GERMAN, LANGUAGES, Language
from combinargs.parsers import (
    Parser,
    combine,
    constant,
    early_exit,
    flag,
    value,
    value_enum,
)
from combinargs.result import EarlyExit, Failure, Result, Success

__all__ = [
    "Parser",
    "combine",
    "constant",
    "early_exit",
    "flag",
    "value",
    "value_enum",
    "Args",
    "field",
    "Affixes",
    "Description",
    "render",
    "Language",
    "ENGLISH",
    "GERMAN",
    "LANGUAGES",
    "ArgumentError",
    "DuplicateName",
    "ExtraArguments",
    "InvalidName",
    "InvalidValue",
    "MissingArgument",
    "MissingValue",
    "UnknownVariant",
    "UnrecognizedArgument",
    "Result",
    "Success",
    "EarlyExit",
    "Failure",
]
