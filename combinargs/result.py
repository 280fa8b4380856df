"""
Defines the :py:class:`Result` dataclass, the outcome of parsing: a
:py:class:`Success`, an :py:class:`EarlyExit` or a :py:class:`Failure`.
"""
from dataclasses import dataclass
from functools import reduce
from typing import Any, Callable, Generic, Iterable, List, Tuple, Type, TypeVar

from pytypeclass import Monad
from pytypeclass.nonempty_list import NonemptyList

from combinargs.errors import ArgumentError

A_co = TypeVar("A_co", covariant=True)
A = TypeVar("A")
B = TypeVar("B")


@dataclass(frozen=True)
class Success(Generic[A_co]):
    value: A_co


@dataclass(frozen=True)
class EarlyExit:
    """
    Parsing stopped early, for example because ``--help`` was given.
    """

    messages: "NonemptyList[str]"


@dataclass(frozen=True)
class Failure:
    errors: "NonemptyList[ArgumentError]"


@dataclass
class Result(Monad[A_co]):
    """
    >>> Result.return_(1) >= (lambda x: Result.return_(x + 1))
    Result(get=Success(value=2))
    >>> Result.gather([Result.return_(1), Result.return_("a")]).get
    Success(value=(1, 'a'))
    """

    get: "Success[A_co] | EarlyExit | Failure"

    def __ge__(self, f: Callable[[A_co], Monad[B]]) -> "Result[B]":
        return self.bind(f)

    def bind(self, f: Callable[[A_co], Monad[B]]) -> "Result[B]":
        x = self.get
        if isinstance(x, Success):
            y = f(x.value)
            assert isinstance(y, Result), y
            return y
        return Result(x)

    @classmethod
    def return_(cls: "Type[Result[A]]", a: A) -> "Result[A]":
        return Result(Success(a))

    @classmethod
    def early_exit(cls, message: str, *messages: str) -> "Result[Any]":
        return Result(EarlyExit(NonemptyList.make(message, *messages)))

    @classmethod
    def failure(cls, error: ArgumentError, *errors: ArgumentError) -> "Result[Any]":
        return Result(Failure(NonemptyList.make(error, *errors)))

    @classmethod
    def gather(cls, results: Iterable["Result[Any]"]) -> "Result[Tuple[Any, ...]]":
        """
        Combine several results. Any early exit wins; otherwise all failures
        are concatenated in order; otherwise the values are collected into a
        tuple.

        >>> from combinargs.errors import UnrecognizedArgument
        >>> a = Result.failure(UnrecognizedArgument("-x", token="-x"))
        >>> b = Result.failure(UnrecognizedArgument("-y", token="-y"))
        >>> [e.token for e in Result.gather([a, Result.return_(1), b]).errors]
        ['-x', '-y']
        >>> Result.gather([a, Result.early_exit("bye")]).messages
        ['bye']
        """

        def combine(acc: Result[Tuple[Any, ...]], new: Result[Any]) -> Result[Any]:
            a, b = acc.get, new.get
            for get in [a, b]:
                if isinstance(get, EarlyExit):
                    return Result(get)
            if isinstance(a, Failure) and isinstance(b, Failure):
                return Result(Failure(a.errors + b.errors))
            for get in [a, b]:
                if isinstance(get, Failure):
                    return Result(get)
            assert isinstance(a, Success) and isinstance(b, Success)
            return Result(Success((*a.value, b.value)))

        return reduce(combine, results, Result.return_(()))

    def map(self, f: Callable[[A_co], B]) -> "Result[B]":
        return self >= (lambda a: Result.return_(f(a)))

    @property
    def errors(self) -> List[ArgumentError]:
        get = self.get
        return list(get.errors) if isinstance(get, Failure) else []

    @property
    def messages(self) -> List[str]:
        get = self.get
        return list(get.messages) if isinstance(get, EarlyExit) else []

    @property
    def value(self) -> A_co:
        """
        The parsed value. Raises the first error of a :py:class:`Failure` and
        :py:class:`SystemExit` for an :py:class:`EarlyExit`.
        """
        get = self.get
        if isinstance(get, Success):
            return get.value
        if isinstance(get, Failure):
            raise get.errors.head
        raise SystemExit("\n".join(get.messages))
