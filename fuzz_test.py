import sys
import unicodedata
from dataclasses import MISSING
from random import Random
from typing import List, NamedTuple

from hypothesis import given, register_random, settings
from hypothesis import strategies as st

from combinargs import (
    MissingArgument,
    Success,
    combine,
    early_exit,
    flag,
    parsers,
    value,
)
from combinargs.parsers import Parser
from combinargs.result import EarlyExit

MAX_LEAVES = 4
LONG_ALPHABET = "abcdefghijklmé"
SHORT_ALPHABET = "pqrstuvwxyz"

st_name = st.text(alphabet=LONG_ALPHABET, min_size=2, max_size=8)
st_short = st.sampled_from(SHORT_ALPHABET)
st_word = st.text(alphabet="XYZ", min_size=1, max_size=3)


class StOutput(NamedTuple):
    parser: Parser
    inputs: List[str]
    repr: str


@st.composite
def st_flag(draw) -> StOutput:
    name = draw(st_name)
    default = draw(st.booleans() | st.none())
    on = draw(st.booleans())
    parser = flag(name, default=MISSING if default is None else default)
    inputs = [f"--{name}" if on else f"--no-{name}"]
    return StOutput(
        parser=parser,
        inputs=inputs,
        repr=f"flag({name!r}, default={default})",
    )


@st.composite
def st_defaults(draw) -> StOutput:
    names = draw(st.lists(st_name, min_size=1, max_size=MAX_LEAVES, unique=True))
    parsers_ = []
    for name in names:
        if draw(st.booleans()):
            parsers_.append(flag(name, default=draw(st.booleans())))
        else:
            parsers_.append(value(name, default=draw(st.integers()), convert=int))
    return StOutput(
        parser=combine(lambda *xs: xs, *parsers_),
        inputs=[],
        repr=f"combine({names})",
    )


@settings(deadline=None)
@given(st_flag())
def test_flag_binding(flag_with_input):
    parser, inputs, repr = flag_with_input
    on = not inputs[0].startswith("--no-")
    assert parser.parse(inputs).get == Success(on), repr
    default = parser.leaves[0].description.default
    if default is MISSING:
        assert isinstance(parser.parse([]).errors[0], MissingArgument), repr
    else:
        assert parser.parse([]).get == Success(default), repr


@settings(deadline=None)
@given(
    st.lists(st_short, min_size=1, max_size=MAX_LEAVES, unique=True),
    st.data(),
)
def test_grouped_short_flags(shorts, data):
    chosen = data.draw(st.lists(st.sampled_from(shorts), min_size=1, unique=True))
    parser = combine(
        lambda *xs: xs,
        *[flag(f"flag-{s}", short=s, default=False) for s in shorts],
    )
    grouped = parser.parse(["-" + "".join(chosen)])
    assert grouped == parser.parse([f"-{s}" for s in chosen])
    assert grouped.get == Success(tuple(s in chosen for s in shorts))


@settings(deadline=None)
@given(st_name, st_short, st.integers())
def test_value_forms(name, short, n):
    parser = value(name, short=short, convert=int)
    raw = str(n)
    for inputs in [
        [f"--{name}", raw],
        [f"--{name}={raw}"],
        [f"-{short}", raw],
        [f"-{short}={raw}"],
        [f"-{short}{raw}"],
    ]:
        assert parser.parse(inputs).get == Success(n), inputs


@settings(deadline=None)
@given(st_defaults())
def test_idempotence(defaults):
    parser, inputs, repr = defaults
    first = parser.parse(inputs)
    assert isinstance(first.get, Success), repr
    assert first == parser.parse(inputs), repr


@settings(deadline=None)
@given(st.lists(st_name, min_size=1, max_size=MAX_LEAVES, unique=True))
def test_missing_arguments_aggregate(names):
    parser = combine(lambda *xs: xs, *[flag(name) for name in names])
    errors = parser.parse([]).errors
    assert len(errors) == len(names)
    assert all(isinstance(e, MissingArgument) for e in errors)


@settings(deadline=None)
@given(st_name, st.data())
def test_case_insensitive(name, data):
    upper = data.draw(st.lists(st.booleans(), min_size=len(name), max_size=len(name)))
    token = "".join(c.upper() if u else c for c, u in zip(name, upper))
    token = unicodedata.normalize("NFD", token)
    parser = flag(name, default=False, case_sensitive=False)
    assert parser.parse([f"--{token}"]).get == Success(True)
    assert parser.parse([f"--NO-{token}"]).get == Success(False)


@settings(deadline=None)
@given(st.lists(st_word, max_size=3), st.lists(st_word, max_size=3), st.data())
def test_early_exit_precedence(before, after, data):
    parser = combine(
        lambda n, _: n,
        value("number", convert=int),
        early_exit("about", "about"),
    )
    inputs = before + ["--number", "not-a-number"] + after
    positions = [i for i in range(len(inputs) + 1) if i != len(before) + 1]
    i = data.draw(st.sampled_from(positions))
    inputs.insert(i, "--about")
    result = parser.parse(inputs)
    assert isinstance(result.get, EarlyExit), inputs
    assert result.messages == ["about"]


@settings(deadline=None)
@given(st.lists(st_name, min_size=2, max_size=2, unique=True), st.booleans(), st.integers())
def test_help_defaults_round_trip(names, on, n):
    flag_name, value_name = names
    parser = combine(
        lambda *xs: xs,
        flag(flag_name, default=on),
        value(value_name, default=n, convert=int),
    )
    text = parser.help_text("prog")
    assert f"[Default: {str(on).lower()}]" in text
    assert f"[Default: {n}]" in text
    inputs = [f"--{flag_name}" if on else f"--no-{flag_name}", f"--{value_name}", str(n)]
    assert parser.parse(inputs) == parser.parse([])


if __name__ == "__main__":
    parsers.TESTING = True
    parsers.PRINTING = False

    register_random(Random(0))

    for test in [
        test_flag_binding,
        test_grouped_short_flags,
        test_value_forms,
        test_idempotence,
        test_missing_arguments_aggregate,
        test_case_insensitive,
        test_early_exit_precedence,
        test_help_defaults_round_trip,
    ]:
        print(test.__name__, file=sys.stderr)
        test()
