"""
Names, affixes and the :py:class:`Description` shared by every argument.
"""
from __future__ import annotations

from dataclasses import _MISSING_TYPE, MISSING, dataclass
from typing import Any, Generic, Iterable, Optional, Sequence, Tuple, TypeVar, Union

from combinargs.errors import InvalidName
from combinargs.language import Language, default_language
from combinargs.unicode import Compare, graphemes

A = TypeVar("A")

Names = Union[str, Sequence[str], None]


def _compare(s: "str | Compare", case_sensitive: bool) -> Compare:
    if isinstance(s, Compare):
        return s
    return Compare(s, case_sensitive=case_sensitive)


def _names(names: Names) -> Tuple[str, ...]:
    if names is None:
        return ()
    if isinstance(names, str):
        return (names,)
    return tuple(names)


def alternatives(names: Iterable[Compare]) -> str:
    """
    >>> alternatives([Compare("a")])
    'a'
    >>> alternatives([Compare("a"), Compare("b")])
    '(a|b)'
    """
    strings = [str(n) for n in names]
    if len(strings) == 1:
        return strings[0]
    return "(" + "|".join(strings) + ")"


@dataclass(frozen=True)
class Affixes:
    """
    The prefixes and infixes surrounding a name. Each affix carries its own
    case-sensitivity.
    """

    long_prefix: Compare
    short_prefix: Compare
    negation_prefix: Compare
    negation_infix: Compare
    value_infix: Compare

    @classmethod
    def make(
        cls,
        language: Optional[Language] = None,
        case_sensitive: bool = True,
        long_prefix: "str | Compare | None" = None,
        short_prefix: "str | Compare | None" = None,
        negation_prefix: "str | Compare | None" = None,
        negation_infix: "str | Compare | None" = None,
        value_infix: "str | Compare | None" = None,
    ) -> "Affixes":
        """
        Fill every affix not given explicitly from ``language``.

        >>> affixes = Affixes.make()
        >>> str(affixes.long_prefix), str(affixes.negation_prefix)
        ('--', 'no')
        >>> str(Affixes.make(negation_prefix="without").negation_prefix)
        'without'
        """
        if language is None:
            language = default_language()

        def get(s, fallback: str) -> Compare:
            return _compare(fallback if s is None else s, case_sensitive)

        return cls(
            long_prefix=get(long_prefix, language.long_prefix),
            short_prefix=get(short_prefix, language.short_prefix),
            negation_prefix=get(negation_prefix, language.negation_prefix),
            negation_infix=get(negation_infix, language.negation_infix),
            value_infix=get(value_infix, language.value_infix),
        )


@dataclass(frozen=True)
class NameMatch:
    """
    The outcome of a successful long-name match. ``value`` is the text after
    the value infix, if the token carried one.
    """

    name: str
    negated: bool = False
    value: Optional[str] = None


@dataclass(frozen=True)
class Description(Generic[A]):
    """
    Names, help text and default of a single argument.

    Parameters
    ----------

    long : Tuple[Compare, ...]
        Long names. The first is the primary name.

    default : A | MISSING
        The value used when the argument is absent. ``MISSING`` makes the argument required.

    affixes : Affixes
        Prefixes and infixes used when matching and rendering the names.

    short : Tuple[Compare, ...]
        Short names, each exactly one grapheme.

    help : Optional[str]
        Help text shown by :py:func:`combinargs.help.render`.
    """

    long: Tuple[Compare, ...]
    default: "A | _MISSING_TYPE"
    affixes: Affixes
    short: Tuple[Compare, ...] = ()
    help: Optional[str] = None

    def __post_init__(self):
        if not self.long:
            raise InvalidName(
                "at least one long name is required", name=alternatives(self.short)
            )
        for name in self.long:
            if not name.string:
                raise InvalidName("long names must not be empty", name=name.string)
        for name in self.short:
            if len(graphemes(name.string)) != 1:
                raise InvalidName(
                    "short names must be exactly one character", name=name.string
                )

    @classmethod
    def make(
        cls,
        long: Names,
        short: Names = None,
        help: Optional[str] = None,
        default: Any = MISSING,
        case_sensitive: bool = True,
        language: Optional[Language] = None,
        affixes: Optional[Affixes] = None,
    ) -> "Description[A]":
        """
        >>> d = Description.make(["verbose", "loud"], short="v", default=False)
        >>> d.primary, [str(s) for s in d.short]
        ('verbose', ['v'])
        >>> Description.make("x", short="xy")
        Traceback (most recent call last):
        ...
        combinargs.errors.InvalidName: Invalid name 'xy': short names must be exactly one character
        """
        if affixes is None:
            affixes = Affixes.make(language=language, case_sensitive=case_sensitive)
        return cls(
            long=tuple(Compare(n, case_sensitive) for n in _names(long)),
            short=tuple(Compare(n, case_sensitive) for n in _names(short)),
            help=help,
            default=default,
            affixes=affixes,
        )

    @property
    def primary(self) -> str:
        return self.long[0].string

    @property
    def required(self) -> bool:
        return isinstance(self.default, _MISSING_TYPE)

    def has_short(self, grapheme: str) -> bool:
        return any(name.eq(grapheme) for name in self.short)

    def match_long(
        self, token: str, negatable: bool = False, takes_value: bool = False
    ) -> Optional[NameMatch]:
        """
        Match ``token`` against the long names.

        >>> d = Description.make("count", default=0)
        >>> d.match_long("--count=3", takes_value=True)
        NameMatch(name='count', negated=False, value='3')
        >>> d.match_long("--counter", takes_value=True) is None
        True
        >>> Description.make("verbose").match_long("--no-verbose", negatable=True)
        NameMatch(name='verbose', negated=True, value=None)
        """
        rest = self.affixes.long_prefix.strip_prefix(token)
        if rest is None:
            return None
        candidates = [(rest, False)]
        if negatable:
            after = self.affixes.negation_prefix.strip_prefix(rest)
            if after is not None:
                after = self.affixes.negation_infix.strip_prefix(after)
            if after is not None:
                candidates.append((after, True))
        for remainder, negated in candidates:
            for name in self.long:
                after_name = name.strip_prefix(remainder)
                if after_name == "":
                    return NameMatch(name.string, negated=negated)
                if takes_value and not negated and after_name is not None:
                    raw = self.affixes.value_infix.strip_prefix(after_name)
                    if raw is not None:
                        return NameMatch(name.string, value=raw)
        return None

    def long_usage(self, negatable: bool = False, meta_var: Optional[str] = None) -> str:
        """
        >>> Description.make("verbose").long_usage(negatable=True)
        '--[no-]verbose'
        >>> Description.make("count").long_usage(meta_var="VALUE")
        '--count(=| )VALUE'
        """
        affixes = self.affixes
        usage = str(affixes.long_prefix)
        if negatable:
            usage += f"[{affixes.negation_prefix}{affixes.negation_infix}]"
        usage += alternatives(self.long)
        if meta_var is not None:
            usage += f"({affixes.value_infix}| ){meta_var}"
        return usage

    def short_usage(self, meta_var: Optional[str] = None) -> Optional[str]:
        """
        >>> Description.make("count", short="c").short_usage(meta_var="VALUE")
        '-c[=| ]VALUE'
        """
        if not self.short:
            return None
        usage = str(self.affixes.short_prefix) + alternatives(self.short)
        if meta_var is not None:
            usage += f"[{self.affixes.value_infix}| ]{meta_var}"
        return usage

    def usage(self, negatable: bool = False, meta_var: Optional[str] = None) -> str:
        long = self.long_usage(negatable=negatable, meta_var=meta_var)
        short = self.short_usage(meta_var=meta_var)
        return long if short is None else f"{long} | {short}"
