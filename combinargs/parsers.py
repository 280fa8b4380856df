"""
Defines the :py:class:`Parser <combinargs.parsers.Parser>` class and the
functions that build and combine parsers.
"""
from __future__ import annotations

import os
import sys
from dataclasses import MISSING, dataclass, replace
from enum import Enum
from typing import (
    Any,
    Callable,
    Generic,
    Iterable,
    List,
    Optional,
    Sequence,
    Tuple,
    Type,
    TypeVar,
)

from combinargs.description import Affixes, Description, Names
from combinargs.errors import DuplicateName, ExtraArguments
from combinargs.help import HelpArgument, render
from combinargs.language import Language, default_language
from combinargs.leaves import (
    EarlyExitArgument,
    FlagArgument,
    Leaf,
    ValueArgument,
    display_value,
)
from combinargs.matcher import Matcher
from combinargs.result import EarlyExit, Result, Success
from combinargs.unicode import Compare

TESTING = os.environ.get("COMBINARGS_TESTING", False)
PRINTING = os.environ.get("COMBINARGS_PRINTING", True)

A_co = TypeVar("A_co", covariant=True)
A = TypeVar("A")
B = TypeVar("B")
E = TypeVar("E", bound=Enum)


def check_unique(leaves: Sequence[Leaf]) -> None:
    """
    Raise :py:class:`DuplicateName` if two leaves share a long name or a short
    name under the same prefix.

    >>> check_unique(flag("x").leaves + value("x").leaves)
    Traceback (most recent call last):
    ...
    combinargs.errors.DuplicateName: Duplicate name 'x': --x(=| )VALUE

    Negated spellings of flags count as long names:

    >>> check_unique(flag("cache").leaves + flag("no-cache").leaves)
    Traceback (most recent call last):
    ...
    combinargs.errors.DuplicateName: Duplicate name 'no-cache': --[no-]no-cache
    """
    seen: List[Tuple[str, Compare, Compare]] = []
    for leaf in leaves:
        d = leaf.description
        long = d.long
        if leaf.negatable:
            negation = d.affixes.negation_prefix.string + d.affixes.negation_infix.string
            long += tuple(
                Compare(
                    negation + name.string,
                    name.case_sensitive and d.affixes.negation_prefix.case_sensitive,
                )
                for name in d.long
            )
        for slot, prefix, names in (
            ("long", d.affixes.long_prefix, long),
            ("short", d.affixes.short_prefix, d.short),
        ):
            for name in names:
                for other_slot, other_prefix, other in seen:
                    if (
                        slot == other_slot
                        and prefix.conflicts(other_prefix)
                        and name.conflicts(other)
                    ):
                        raise DuplicateName(leaf.usage(), name=name.string)
                seen.append((slot, prefix, name))


@dataclass(frozen=True)
class Parser(Generic[A_co]):
    """
    A parser is a flat, ordered tuple of leaf arguments together with a
    ``build`` function that turns one value per leaf into the parsed result.
    Parsers are immutable; combining them produces new parsers.

    Parameters
    ----------

    leaves : Tuple[Leaf, ...]
        Every argument reachable from this parser, in declaration order.

    build : Callable[[Sequence[Any]], A_co]
        Receives the values bound to ``leaves`` (in the same order) and returns the result.

    Examples
    --------

    >>> p = flag("verbose", short="v", default=False)
    >>> p.parse(["-v"]).get
    Success(value=True)
    >>> p.parse([]).get
    Success(value=False)
    """

    leaves: Tuple[Leaf, ...]
    build: Callable[[Sequence[Any]], A_co]

    def __post_init__(self):
        check_unique(self.leaves)

    @classmethod
    def leaf(cls, leaf: Leaf[A]) -> "Parser[A]":
        return cls((leaf,), lambda values: values[0])

    def convert(self, f: Callable[[A_co], B]) -> "Parser[B]":
        """
        Apply ``f`` to the result of this parser.

        >>> value("count", convert=int).convert(lambda n: n * 2).parse(["--count", "4"]).get
        Success(value=8)
        """
        build = self.build
        return Parser(self.leaves, lambda values: f(build(values)))

    def parse(self, tokens: Iterable[str]) -> Result[A_co]:
        """
        Parse ``tokens`` (which must not include the program name).

        Parameters
        ----------

        tokens : Iterable[str]
            The raw arguments.

        Returns
        -------

        A :py:class:`Result <combinargs.result.Result>` holding a
        :py:class:`Success <combinargs.result.Success>`, an
        :py:class:`EarlyExit <combinargs.result.EarlyExit>` or a
        :py:class:`Failure <combinargs.result.Failure>` listing every error found.

        Examples
        --------

        >>> p = combine(
        ...     lambda a, b: a + b,
        ...     value("a", convert=int),
        ...     value("b", convert=int),
        ... )
        >>> p.parse(["--a", "1", "--b=2"]).get
        Success(value=3)
        >>> [type(e).__name__ for e in p.parse(["--c"]).errors]
        ['UnrecognizedArgument', 'MissingValue', 'MissingValue']
        """
        matcher = Matcher(self.leaves)
        state = matcher.run(list(tokens))
        if state.exit is not None:
            return Result.early_exit(state.exit)
        matched = Result.gather(Result.failure(e) for e in state.errors)
        extra: Result[Any] = Result.return_(())
        if state.extra:
            extra = Result.failure(
                ExtraArguments(" ".join(state.extra), tokens=tuple(state.extra))
            )
        values = Result.gather(matcher.resolve(state))
        return Result.gather([matched, values, extra]).map(
            lambda gathered: self.build(gathered[1])
        )

    def parse_args(
        self, *args: str, language: Optional[Language] = None
    ) -> Optional[A_co]:
        """
        The main way the user extracts parsed results from the parser.
        Prints early-exit messages (to stdout) and errors (to stderr), then
        exits, unless ``TESTING`` is set.

        Parameters
        ----------
        args : str
            A sequence of strings to parse. If empty, defaults to ``sys.argv[1:]``.
        language : Optional[Language]
            The language used for error messages.

        Examples
        --------

        >>> flag("verbose").with_version("prog", "1.2.3").parse_args("--version")
        prog 1.2.3
        """
        _args = args if args or TESTING else sys.argv[1:]
        get = self.parse(_args).get
        if isinstance(get, Success):
            return get.value
        if isinstance(get, EarlyExit):
            for message in get.messages:
                self._print(message)
            code = 0
        else:
            for error in get.errors:
                self._print(error.message(language), file=sys.stderr)
            code = 2
        if TESTING:
            return None
        sys.exit(code)

    @staticmethod
    def _print(*args, **kwargs):
        if PRINTING:
            print(*args, **kwargs)

    def with_early_exit(self, leaf: EarlyExitArgument) -> "Parser[A_co]":
        build = self.build
        return Parser(self.leaves + (leaf,), lambda values: build(values[:-1]))

    def with_affixes(self, **affixes: "str | Compare") -> "Parser[A_co]":
        """
        Override affixes on every leaf of this parser. Keyword arguments are
        the field names of :py:class:`Affixes <combinargs.description.Affixes>`.
        Help text added by :py:meth:`with_help` is rendered again with the new
        affixes.

        >>> p = flag("verbose", default=False).with_affixes(long_prefix="+", negation_prefix="not")
        >>> p.parse(["+not-verbose"]).get
        Success(value=False)
        """

        def update(leaf: Leaf) -> Leaf:
            d = leaf.description
            changes = {
                k: v if isinstance(v, Compare) else Compare(v, getattr(d.affixes, k).case_sensitive)
                for k, v in affixes.items()
            }
            return replace(leaf, description=replace(d, affixes=replace(d.affixes, **changes)))

        leaves = tuple(map(update, self.leaves))
        leaves = tuple(
            leaf.refresh(leaves) if isinstance(leaf, HelpArgument) else leaf
            for leaf in leaves
        )
        return Parser(leaves, self.build)

    def free_short(self, name: str) -> Optional[str]:
        """
        ``name`` if no leaf of this parser uses it as a short name, else ``None``.

        >>> flag("verbose", short="v").free_short("v") is None
        True
        """
        if any(leaf.description.has_short(name) for leaf in self.leaves):
            return None
        return name

    def help_text(
        self,
        program_name: str,
        version: Optional[str] = None,
        description: Optional[str] = None,
        language: Optional[Language] = None,
        exe_name: Optional[str] = None,
    ) -> str:
        return render(
            self,
            program_name=program_name,
            program_version=version,
            description=description,
            language=language,
            exe_name=exe_name,
        )

    def with_help(
        self,
        program_name: str,
        version: Optional[str] = None,
        description: Optional[str] = None,
        long: Names = None,
        short: Names = None,
        help: Optional[str] = None,
        language: Optional[Language] = None,
        exe_name: Optional[str] = None,
    ) -> "Parser[A_co]":
        """
        Add an early-exit flag (``--help | -h`` by default) that shows the
        help text of this parser.

        >>> p = flag("verbose", default=False).with_help("prog")
        >>> print(p.parse(["-h"]).messages[0])
        prog
        <BLANKLINE>
        prog [OPTIONS]
        <BLANKLINE>
        OPTIONS:
          --[no-]verbose       [Default: false]
          --help         | -h  Show this text.
        <BLANKLINE>
        """
        if language is None:
            language = default_language()
        d: Description[None] = Description.make(
            language.help_long if long is None else long,
            short=self.free_short(language.help_short) if short is None else short,
            help=language.help_description if help is None else help,
            language=language,
        )
        leaf = HelpArgument(
            d,
            message="",
            program_name=program_name,
            program_version=version,
            about=description,
            language=language,
            exe_name=exe_name,
        )
        return self.with_early_exit(leaf.refresh(self.leaves + (leaf,)))

    def with_version(
        self,
        program_name: str,
        version: str,
        long: Names = None,
        short: Names = None,
        help: Optional[str] = None,
        language: Optional[Language] = None,
    ) -> "Parser[A_co]":
        """
        Add an early-exit flag (``--version | -v`` by default) that shows
        ``"{program_name} {version}"``.
        A default short name that another leaf already uses is left out.
        """
        if language is None:
            language = default_language()
        d: Description[None] = Description.make(
            language.version_long if long is None else long,
            short=self.free_short(language.version_short) if short is None else short,
            help=language.version_description if help is None else help,
            language=language,
        )
        return self.with_early_exit(
            EarlyExitArgument(d, message=f"{program_name} {version}")
        )

    def with_help_and_version(
        self,
        program_name: str,
        version: str,
        description: Optional[str] = None,
        language: Optional[Language] = None,
        exe_name: Optional[str] = None,
    ) -> "Parser[A_co]":
        return self.with_version(program_name, version, language=language).with_help(
            program_name,
            version=version,
            description=description,
            language=language,
            exe_name=exe_name,
        )


def combine(f: Callable[..., A], *parsers: Parser[Any]) -> Parser[A]:
    """
    Combine ``parsers`` into one parser whose result is ``f`` applied to
    their results, in order. Raises
    :py:class:`DuplicateName <combinargs.errors.DuplicateName>` if the
    combined parsers share a name.

    >>> p = combine(
    ...     lambda verbose, count: dict(verbose=verbose, count=count),
    ...     flag("verbose", short="v", default=False),
    ...     value("count", short="c", convert=int, default=1),
    ... )
    >>> p.parse(["-c", "5", "-v"]).get
    Success(value={'verbose': True, 'count': 5})

    Parsers nest:

    >>> q = combine(lambda inner, name: (inner["count"], name), p, value("name"))
    >>> q.parse(["--name=x"]).get
    Success(value=(1, 'x'))
    """
    leaves = tuple(leaf for parser in parsers for leaf in parser.leaves)

    def build(values: Sequence[Any]) -> A:
        args = []
        start = 0
        for parser in parsers:
            end = start + len(parser.leaves)
            args.append(parser.build(values[start:end]))
            start = end
        return f(*args)

    return Parser(leaves, build)


def constant(a: A) -> Parser[A]:
    """
    A parser with no arguments that always produces ``a``.

    >>> constant(3).parse([]).get
    Success(value=3)
    """
    return Parser((), lambda _: a)


def flag(
    long: Names,
    short: Names = None,
    help: Optional[str] = None,
    default: Any = MISSING,
    convert: Optional[Callable[[bool], A]] = None,
    negatable: bool = True,
    case_sensitive: bool = True,
    language: Optional[Language] = None,
    affixes: Optional[Affixes] = None,
) -> Parser[A]:
    """
    A flag binds ``True`` when its name is given and ``False`` when its
    negated name is given.

    Parameters
    ----------

    long : str | Sequence[str]
        Long name(s); the first is primary.
    short : str | Sequence[str] | None
        Short name(s), each a single character.
    help : Optional[str]
        Help text.
    default : Any
        Value when the flag is absent. Without a default the flag is required.
    convert : Optional[Callable[[bool], A]]
        Applied to the bound boolean.
    negatable : bool
        Whether ``--no-<name>`` is accepted.
    case_sensitive : bool
        Whether names and affixes are compared case-sensitively.

    Examples
    --------

    >>> p = flag("verbose", short="v")
    >>> p.parse(["--no-verbose"]).get
    Success(value=False)
    >>> p.parse([]).errors[0].message()
    'Missing Flag: --[no-]verbose | -v'
    >>> flag("quiet", convert=lambda on: "quiet" if on else "loud").parse(["--quiet"]).get
    Success(value='quiet')
    """
    description: Description[A] = Description.make(
        long,
        short=short,
        help=help,
        default=default,
        case_sensitive=case_sensitive,
        language=language,
        affixes=affixes,
    )
    if convert is None:
        return Parser.leaf(FlagArgument(description, negatable=negatable))
    return Parser.leaf(FlagArgument(description, convert=convert, negatable=negatable))


def value(
    long: Names,
    short: Names = None,
    help: Optional[str] = None,
    default: Any = MISSING,
    convert: Callable[[str], A] = str,
    metavar: Optional[str] = None,
    allowed: Optional[Iterable[A]] = None,
    show: Callable[[A], str] = display_value,
    case_sensitive: bool = True,
    language: Optional[Language] = None,
    affixes: Optional[Affixes] = None,
) -> Parser[A]:
    """
    A value argument converts the text that follows its name.

    Parameters
    ----------

    convert : Callable[[str], A]
        Converts the raw text. An exception becomes an
        :py:class:`InvalidValue <combinargs.errors.InvalidValue>` error.
    metavar : Optional[str]
        Placeholder shown in help text. Defaults to the language's (``VALUE``).
    allowed : Optional[Iterable[A]]
        If given, converted values outside it produce
        :py:class:`UnknownVariant <combinargs.errors.UnknownVariant>`.
    show : Callable[[A], str]
        Renders values in help text.

    Examples
    --------

    >>> p = value("wert", short="w", convert=int)
    >>> [p.parse(args).get for args in (["--wert", "3"], ["-w3"], ["-w=3"])]
    [Success(value=3), Success(value=3), Success(value=3)]
    >>> type(p.parse(["-w", "x"]).errors[0]).__name__
    'InvalidValue'
    >>> type(value("n", convert=int, allowed=[1, 2]).parse(["--n", "3"]).errors[0]).__name__
    'UnknownVariant'
    """
    if language is None:
        language = default_language()
    description: Description[A] = Description.make(
        long,
        short=short,
        help=help,
        default=default,
        case_sensitive=case_sensitive,
        language=language,
        affixes=affixes,
    )
    return Parser.leaf(
        ValueArgument(
            description,
            convert=convert,
            metavar=language.meta_var if metavar is None else metavar,
            allowed=None if allowed is None else tuple(allowed),
            show=show,
        )
    )


def _enum_member(enum_type: Type[E], raw: str) -> E:
    for member in enum_type:
        if Compare(member.name, case_sensitive=False).eq(raw):
            return member
    raise KeyError(raw)


def value_enum(
    long: Names,
    enum_type: Type[E],
    short: Names = None,
    help: Optional[str] = None,
    default: Any = MISSING,
    metavar: Optional[str] = None,
    case_sensitive: bool = True,
    language: Optional[Language] = None,
    affixes: Optional[Affixes] = None,
) -> Parser[E]:
    """
    A value argument whose allowed values are the members of ``enum_type``,
    given by name (case-insensitively).

    >>> from enum import Enum
    >>> class Color(Enum):
    ...     RED = 1
    ...     GREEN = 2
    >>> p = value_enum("color", Color, default=Color.RED)
    >>> p.parse(["--color", "green"]).get
    Success(value=<Color.GREEN: 2>)
    >>> print(p.parse(["--color", "blue"]).errors[0].message())
    Unknown Variant: --color(=| )VALUE
    'blue' [Possible values: RED, GREEN]
    """
    return value(
        long,
        short=short,
        help=help,
        default=default,
        convert=lambda raw: _enum_member(enum_type, raw),
        metavar=metavar,
        allowed=list(enum_type),
        case_sensitive=case_sensitive,
        language=language,
        affixes=affixes,
    )


def early_exit(
    long: Names,
    message: str,
    short: Names = None,
    help: Optional[str] = None,
    case_sensitive: bool = True,
    language: Optional[Language] = None,
    affixes: Optional[Affixes] = None,
) -> Parser[None]:
    """
    A flag that ends parsing with ``message`` as soon as it is seen. Its
    value (when absent) is ``None``.

    >>> p = combine(lambda n, _: n, value("n", convert=int), early_exit("about", "made by me"))
    >>> p.parse(["--n", "oops", "--about"]).messages
    ['made by me']
    """
    description: Description[None] = Description.make(
        long,
        short=short,
        help=help,
        case_sensitive=case_sensitive,
        language=language,
        affixes=affixes,
    )
    return Parser.leaf(EarlyExitArgument(description, message=message))
