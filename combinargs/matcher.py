"""
The token matcher. Resolves a stream of raw tokens against a fixed, ordered
set of leaves and accumulates bindings in a per-call :py:class:`ParseState`.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional, Sequence, Set, Tuple

from combinargs.errors import ArgumentError, UnrecognizedArgument
from combinargs.leaves import (
    BindOutcome,
    Bound,
    EarlyExitArgument,
    Exit,
    FlagArgument,
    Leaf,
    Rejected,
    ValueArgument,
)
from combinargs.result import Result
from combinargs.unicode import Compare, graphemes


class Source(Enum):
    UNSET = "unset"
    FROM_NAME = "name"
    FROM_DEFAULT = "default"


@dataclass
class Binding:
    source: Source = Source.UNSET
    value: Any = None


@dataclass
class ParseState:
    """
    Everything that changes while one token stream is parsed. Created fresh
    for each call to :py:meth:`Matcher.run`.
    """

    tokens: Sequence[str]
    bindings: List[Binding]
    position: int = 0
    errors: List[ArgumentError] = field(default_factory=list)
    extra: List[str] = field(default_factory=list)
    rejected: Set[int] = field(default_factory=set)
    exit: Optional[str] = None

    @property
    def done(self) -> bool:
        return self.exit is not None or self.position >= len(self.tokens)

    def next_token(self) -> Optional[str]:
        """
        Consume and return the token after the current one, if any.
        """
        if self.position + 1 < len(self.tokens):
            self.position += 1
            return self.tokens[self.position]
        return None


@dataclass(frozen=True)
class Matcher:
    """
    >>> from combinargs import flag, value
    >>> from combinargs.parsers import combine
    >>> p = combine(lambda v, c: (v, c), flag("verbose", short="v", default=False), value("count", short="c", convert=int))
    >>> state = Matcher(p.leaves).run(["-v", "-c3"])
    >>> state.errors
    []
    >>> [b.value for b in state.bindings]
    [True, 3]
    """

    leaves: Tuple[Leaf, ...]

    def short_prefixes(self) -> List[Compare]:
        prefixes: List[Compare] = []
        for leaf in self.leaves:
            prefix = leaf.description.affixes.short_prefix
            if leaf.description.short and prefix not in prefixes:
                prefixes.append(prefix)
        return prefixes

    def run(self, tokens: Sequence[str]) -> ParseState:
        state = ParseState(
            tokens=list(tokens), bindings=[Binding() for _ in self.leaves]
        )
        while not state.done:
            self.step(state)
            state.position += 1
        return state

    def apply(self, state: ParseState, index: int, outcome: BindOutcome) -> None:
        if isinstance(outcome, Exit):
            state.exit = outcome.message
        elif isinstance(outcome, Rejected):
            state.errors.append(outcome.error)
            state.rejected.add(index)
        else:
            state.bindings[index] = Binding(Source.FROM_NAME, outcome.value)

    def step(self, state: ParseState) -> None:
        token = state.tokens[state.position]
        if self.match_long(state, token):
            return
        if self.match_short(state, token):
            return
        if self.prefixed(token):
            state.errors.append(UnrecognizedArgument(token, token=token))
        else:
            state.extra.append(token)

    def prefixed(self, token: str) -> bool:
        for leaf in self.leaves:
            affixes = leaf.description.affixes
            for prefix in (affixes.long_prefix, affixes.short_prefix):
                rest = prefix.strip_prefix(token)
                if rest is not None and rest != "":
                    return True
        return False

    def match_long(self, state: ParseState, token: str) -> bool:
        for index, leaf in enumerate(self.leaves):
            match = leaf.description.match_long(
                token,
                negatable=leaf.negatable,
                takes_value=isinstance(leaf, ValueArgument),
            )
            if match is None:
                continue
            if isinstance(leaf, ValueArgument):
                raw = match.value
                if raw is None:
                    raw = state.next_token()
                self.apply(state, index, leaf.bind(raw))
            elif isinstance(leaf, FlagArgument):
                self.apply(state, index, leaf.bind(negated=match.negated))
            elif isinstance(leaf, EarlyExitArgument):
                self.apply(state, index, leaf.bind())
            return True
        return False

    def find_short(self, prefix: Compare, grapheme: str, kinds) -> Optional[int]:
        for index, leaf in enumerate(self.leaves):
            d = leaf.description
            if (
                isinstance(leaf, kinds)
                and d.affixes.short_prefix == prefix
                and d.has_short(grapheme)
            ):
                return index
        return None

    def match_short(self, state: ParseState, token: str) -> bool:
        for prefix in self.short_prefixes():
            rest = prefix.strip_prefix(token)
            if not rest:
                continue
            clusters = graphemes(rest)

            flags = [
                self.find_short(prefix, g, (FlagArgument, EarlyExitArgument))
                for g in clusters
            ]
            if all(index is not None for index in flags):
                for index in flags:
                    self.apply(state, index, self.leaves[index].bind())
                    if state.exit is not None:
                        break
                return True

            index = self.find_short(prefix, clusters[0], ValueArgument)
            if index is not None:
                leaf = self.leaves[index]
                attached = "".join(clusters[1:])
                raw: Optional[str]
                if attached == "":
                    raw = state.next_token()
                else:
                    raw = leaf.description.affixes.value_infix.strip_prefix(attached)
                    if raw is None:
                        raw = attached
                self.apply(state, index, leaf.bind(raw))
                return True
        return False

    def resolve(self, state: ParseState) -> List[Result[Any]]:
        """
        One result per leaf: the bound value, the default, or the error of a
        missing argument. Leaves rejected while matching already have their
        error in ``state.errors``.
        """
        results: List[Result[Any]] = []
        for index, (leaf, binding) in enumerate(zip(self.leaves, state.bindings)):
            if binding.source is not Source.UNSET or index in state.rejected:
                results.append(Result.return_(binding.value))
                continue
            outcome = leaf.absent()
            if isinstance(outcome, Rejected):
                results.append(Result.failure(outcome.error))
            else:
                assert isinstance(outcome, Bound), outcome
                results.append(Result.return_(outcome.value))
        return results
