from enum import Enum
from typing import NamedTuple

from combinargs import ENGLISH, combine, flag, value, value_enum


class Enumeration(Enum):
    ONE = 1
    TWO = 2
    THREE = 3


class Settings(NamedTuple):
    flag: bool
    renamed: bool
    required: bool
    value: str
    enumeration: Enumeration


if __name__ == "__main__":
    language = ENGLISH
    p = combine(
        Settings,
        flag("flag", default=False, help="A flag with default settings.", language=language),
        flag(
            ["other", "name"],
            short=["u", "v"],
            default=False,
            help="A flag with alternative names.",
            language=language,
        ),
        flag("required", short="r", help="A flag without default value.", language=language),
        value(
            "value",
            default="",
            help="A value with default settings.",
            language=language,
        ),
        value_enum(
            "enumeration",
            Enumeration,
            short="e",
            default=Enumeration.TWO,
            help="An enum argument.",
            language=language,
        ),
    ).with_help("main", description="Example program.", language=language)

    print(p.parse_args())
