"""
Defines the :py:class:`Args <combinargs.args.Args>` dataclass and associated functions.
"""
from __future__ import annotations

import dataclasses
import typing
from dataclasses import MISSING, Field, dataclass, fields
from enum import Enum
from typing import Any, Optional, Type, TypeVar, Union, get_args

from combinargs.description import Names
from combinargs.language import Language
from combinargs.parsers import Parser, combine, flag, value, value_enum

T = TypeVar("T", bound="Args")


def field(
    help: Optional[str] = None,
    short: Names = None,
    long: Names = None,
    metadata: Optional[dict] = None,
    parser: Optional[Parser[Any]] = None,
    **kwargs,
) -> Field:
    """
    This is a thin wrapper around :external:py:func:`dataclasses.field`.

    Parameters
    ----------

    help : str
        An optional help string for the argument.

    short : str | Sequence[str] | None
        Short name(s) for the argument.

    long : str | Sequence[str] | None
        Long name(s). Defaults to the field name.

    metadata : dict
        Identical to the `metadata` argument for :external:py:func:`dataclasses.field`.

    parser : Optional[Parser]
        A parser to use for this field instead of the one derived from its type.

    Returns
    -------

    A :external:py:class:`dataclasses.Field` object that can be used in place of a default argument as described in the :external:py:class:`dataclasses.Field` documentation.
    """
    if metadata is None:
        metadata = {}
    for k, v in dict(help=help, short=short, long=long, parser=parser).items():
        if v is not None:
            metadata.update({k: v})
    return dataclasses.field(metadata=metadata, **kwargs)


@dataclass
class _ArgsField:
    name: str
    default: Any
    type: Any
    help: Optional[str] = None
    short: Names = None
    long: Names = None

    @staticmethod
    def parse(field: Field, type: Any) -> Union["_ArgsField", Parser[Any]]:
        if "parser" in field.metadata:
            parser = field.metadata["parser"]
            assert isinstance(parser, Parser), parser
            return parser
        default = field.default
        if field.default_factory is not MISSING:
            default = field.default_factory()
        return _ArgsField(
            name=field.name,
            default=default,
            type=type,
            help=field.metadata.get("help"),
            short=field.metadata.get("short"),
            long=field.metadata.get("long"),
        )

    def parser(
        self,
        case_sensitive: bool,
        language: Optional[Language],
        replace_underscores: bool,
    ) -> Parser[Any]:
        _type = self.type
        type_args = get_args(_type)
        try:
            _type, none = type_args
            assert none == type(None)
        except (ValueError, AssertionError):
            pass
        long = self.long
        if long is None:
            long = self.name.replace("_", "-") if replace_underscores else self.name
        kwargs = dict(
            short=self.short,
            help=self.help,
            case_sensitive=case_sensitive,
            language=language,
        )
        if _type == bool:
            default = False if self.default is MISSING else self.default
            return flag(long, default=default, **kwargs)
        if isinstance(_type, type) and issubclass(_type, Enum):
            return value_enum(long, _type, default=self.default, **kwargs)
        return value(long, default=self.default, convert=_type, **kwargs)


@dataclass
class Args:
    """
    :py:class:`Args` is sugar for :py:func:`combine <combinargs.parsers.combine>`:
    each field becomes an argument and the dataclass itself is the combining
    function.

    >>> from dataclasses import dataclass
    >>> from combinargs import Args
    >>> @dataclass
    ... class MyArgs(Args):
    ...     verbose: bool
    ...     count: int = 1
    >>> MyArgs.parse_args("--verbose", "--count", "3")
    MyArgs(verbose=True, count=3)

    ``bool`` fields default to ``False``; ``--no-<name>`` is accepted too:

    >>> MyArgs.parse_args("--count=2", "--no-verbose")
    MyArgs(verbose=False, count=2)

    To supply other metadata, like ``help`` text or short names, use :py:func:`field`:

    >>> from combinargs import field
    >>> @dataclass
    ... class MyArgs(Args):
    ...     dry_run: bool = field(short="n", help="Print, but do nothing.")
    ...     level: Optional[int] = field(default=None, short="l")
    >>> MyArgs.parse_args("-n", "-l3")
    MyArgs(dry_run=True, level=3)

    By using the :py:meth:`Args.parser` method, :py:class:`Args` can take advantage of all the same
    combinators as other parsers:

    >>> p = MyArgs.parser().convert(lambda args: args.level)
    >>> p.parse(["--level", "4"]).get
    Success(value=4)
    """

    @classmethod
    def parser(
        cls: Type[T],
        case_sensitive: bool = True,
        language: Optional[Language] = None,
        replace_underscores: bool = True,
    ) -> Parser[T]:
        """
        Returns a parser for the dataclass.
        Converts each field to a parser (:py:func:`value <combinargs.parsers.value>`,
        :py:func:`value_enum <combinargs.parsers.value_enum>` or
        :py:func:`flag <combinargs.parsers.flag>` depending on its type). Combines these parsers using
        :py:func:`combine <combinargs.parsers.combine>`.

        Parameters
        ----------

        case_sensitive: bool
            Whether names are compared case-sensitively.

        language: Optional[Language]
            Supplies the negation prefix, meta-variable and other defaults.

        replace_underscores: bool
            If true, underscores in argument names are replaced with dashes.

        Examples
        --------

        >>> @dataclass
        ... class MyArgs(Args):
        ...     dry_run: bool = True
        >>> MyArgs.parser().parse(["--no-dry-run"]).get
        Success(value=MyArgs(dry_run=False))
        >>> MyArgs.parser(replace_underscores=False).parse(["--no-dry_run"]).get
        Success(value=MyArgs(dry_run=False))
        """
        hints = typing.get_type_hints(cls)

        def get_parsers():
            for f in fields(cls):
                if not f.init:
                    continue
                field = _ArgsField.parse(f, hints.get(f.name, f.type))
                if isinstance(field, Parser):
                    yield field
                else:
                    yield field.parser(
                        case_sensitive=case_sensitive,
                        language=language,
                        replace_underscores=replace_underscores,
                    )

        return combine(cls, *get_parsers())

    @classmethod
    def parse_args(
        cls: Type[T],
        *args: str,
        program_name: Optional[str] = None,
        version: Optional[str] = None,
        description: Optional[str] = None,
        language: Optional[Language] = None,
        **kwargs,
    ) -> Optional[T]:
        """
        Parses the arguments and returns an instance of the dataclass. Adds
        ``--help`` (and ``--version`` if ``version`` is given).

        >>> @dataclass
        ... class MyArgs(Args):
        ...     count: int = field(default=0, help="a number")
        >>> MyArgs.parse_args("--help", program_name="prog")
        prog
        <BLANKLINE>
        prog [OPTIONS]
        <BLANKLINE>
        OPTIONS:
          --count(=| )VALUE       a number [Default: 0]
          --help            | -h  Show this text.
        <BLANKLINE>
        """
        p = cls.parser(language=language, **kwargs)
        if program_name is None:
            program_name = cls.__name__
        if version is None:
            p = p.with_help(program_name, description=description, language=language)
        else:
            p = p.with_help_and_version(
                program_name, version, description=description, language=language
            )
        return p.parse_args(*args, language=language)
