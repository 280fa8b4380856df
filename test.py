#! /usr/bin/env python
import doctest
import unittest
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Optional

import combinargs
from combinargs import (
    GERMAN,
    Args,
    DuplicateName,
    ExtraArguments,
    InvalidName,
    InvalidValue,
    MissingArgument,
    MissingValue,
    Result,
    Success,
    UnknownVariant,
    UnrecognizedArgument,
    combine,
    constant,
    early_exit,
    field,
    flag,
    render,
    value,
    value_enum,
)
from combinargs import (
    args,
    description,
    errors,
    help,
    language,
    leaves,
    matcher,
    parsers,
    result,
    unicode,
)
from combinargs.result import EarlyExit, Failure


def load_tests(_, tests, __):

    parsers.TESTING = True
    for mod in [
        unicode,
        language,
        errors,
        description,
        result,
        leaves,
        matcher,
        help,
        parsers,
        args,
    ]:
        tests.addTests(doctest.DocTestSuite(mod))
    tests.addTests(doctest.DocFileSuite("README.md"))
    return tests


class MonadLawTester(ABC):
    @abstractmethod
    def assertEqual(self, a, b):
        raise NotImplementedError

    def f1(self, x):
        unwrapped = self.unwrap(x)
        if isinstance(x, int):
            return self.m(unwrapped + 1)
        else:
            return self.m(unwrapped)

    def f2(self, x):
        unwrapped = self.unwrap(x)
        if isinstance(unwrapped, int):
            return self.m(unwrapped * 2)
        else:
            return self.m(unwrapped)

    @staticmethod
    @abstractmethod
    def m(a):
        raise NotImplementedError

    @staticmethod
    @abstractmethod
    def return_(a):
        raise NotImplementedError

    @staticmethod
    def unwrapped_values():
        return [1]

    @staticmethod
    @abstractmethod
    def wrapped_values():
        raise NotImplementedError

    def test_law1(self):
        for a in self.unwrapped_values():
            x1 = self.return_(a) >= self.f1
            x2 = self.m(self.f1(a))
            self.assertEqual(self.unwrap(x1), self.unwrap(x2))

    def test_law2(self):
        for p in self.wrapped_values():
            p = self.m(p)
            a = p >= self.return_
            self.assertEqual(self.unwrap(a), self.unwrap(p))

    def test_law3(self):
        for p in self.wrapped_values():
            p = self.m(p)
            x1 = p >= (lambda a: self.f1(a) >= self.f2)
            x2 = (p >= self.f1) >= self.f2
            self.assertEqual(self.unwrap(x1), self.unwrap(x2))

    @staticmethod
    @abstractmethod
    def unwrap(x):
        raise NotImplementedError


class TestResult(MonadLawTester, unittest.TestCase):
    @staticmethod
    def m(a):
        if isinstance(a, Result):
            return a
        return Result.return_(a)

    @staticmethod
    def return_(a):
        return Result.return_(a)

    @staticmethod
    def wrapped_values():
        return [
            Result.return_(1),
            Result.early_exit("bye"),
            Result.failure(UnrecognizedArgument("-x", token="-x")),
        ]

    @staticmethod
    def unwrap(x):
        if isinstance(x, Result):
            return x.get
        return x

    def test_gather_prefers_early_exit(self):
        failure = Result.failure(UnrecognizedArgument("-x", token="-x"))
        gathered = Result.gather([failure, Result.early_exit("help"), failure])
        self.assertEqual(gathered.messages, ["help"])

    def test_value_raises_first_error(self):
        error = UnrecognizedArgument("-x", token="-x")
        with self.assertRaises(UnrecognizedArgument):
            _ = Result.failure(error).value
        with self.assertRaises(SystemExit):
            _ = Result.early_exit("bye").value


class TestUnicode(unittest.TestCase):
    def test_graphemes(self):
        self.assertEqual(unicode.graphemes("äb"), ["ä", "b"])
        self.assertEqual(len(unicode.graphemes("🇩🇪")), 1)

    def test_strip_prefix_keeps_remainder_as_given(self):
        prefix = unicode.Compare("café", case_sensitive=False)
        self.assertEqual(prefix.strip_prefix("CAFÉ=x́"), "=x́")

    def test_conflicts(self):
        self.assertTrue(
            unicode.Compare("a", False).conflicts(unicode.Compare("A", True))
        )
        self.assertFalse(unicode.Compare("a").conflicts(unicode.Compare("A")))


class TestFlag(unittest.TestCase):
    def test_negation(self):
        p = flag("verbose", short="v", default=True)
        self.assertEqual(p.parse(["--verbose"]).get, Success(True))
        self.assertEqual(p.parse(["--no-verbose"]).get, Success(False))
        self.assertEqual(p.parse([]).get, Success(True))

    def test_required(self):
        errors = flag("verbose").parse([]).errors
        self.assertEqual(len(errors), 1)
        self.assertIsInstance(errors[0], MissingArgument)
        self.assertNotIsInstance(errors[0], MissingValue)

    def test_not_negatable(self):
        p = flag("verbose", default=False, negatable=False)
        self.assertIsInstance(p.parse(["--no-verbose"]).errors[0], UnrecognizedArgument)

    def test_last_occurrence_wins(self):
        p = flag("verbose", default=False)
        self.assertEqual(p.parse(["--verbose", "--no-verbose"]).get, Success(False))

    def test_alternative_names(self):
        p = flag(["verbose", "loud"], short=["v", "l"], default=False)
        for token in ["--loud", "-l", "--verbose", "-v"]:
            self.assertEqual(p.parse([token]).get, Success(True))

    def test_german_negation(self):
        p = flag("ausführlich", default=True, language=GERMAN)
        self.assertEqual(p.parse(["--kein-ausführlich"]).get, Success(False))

    def test_grouped_short_flags(self):
        p = combine(
            lambda f, g, h: (f, g, h),
            flag("eff", short="f", default=False),
            flag("gee", short="g", default=False),
            flag("aitch", short="h", default=False),
        )
        self.assertEqual(p.parse(["-fgh"]).get, Success((True, True, True)))
        self.assertEqual(p.parse(["-fgh"]), p.parse(["-f", "-g", "-h"]))
        self.assertEqual(p.parse(["-hf"]).get, Success((True, False, True)))


class TestValue(unittest.TestCase):
    def test_forms(self):
        p = value("wert", short="w", convert=int)
        for tokens in [
            ["--wert", "3"],
            ["--wert=3"],
            ["-w", "3"],
            ["-w=3"],
            ["-w3"],
        ]:
            with self.subTest(tokens=tokens):
                self.assertEqual(p.parse(tokens).get, Success(3))

    def test_missing_following_token(self):
        p = value("wert", short="w", convert=int)
        for tokens in [["--wert"], ["-w"]]:
            errors = p.parse(tokens).errors
            self.assertEqual(len(errors), 1)
            self.assertIsInstance(errors[0], MissingValue)

    def test_value_looks_like_option(self):
        p = value("offset", convert=int)
        self.assertEqual(p.parse(["--offset", "-5"]).get, Success(-5))

    def test_invalid_value(self):
        error = value("wert", convert=int).parse(["--wert", "drei"]).errors[0]
        self.assertIsInstance(error, InvalidValue)
        self.assertEqual(error.raw, "drei")
        self.assertIsInstance(error.cause, ValueError)

    def test_invalid_value_is_not_also_missing(self):
        errors = value("wert", convert=int).parse(["--wert", "drei"]).errors
        self.assertEqual([type(e) for e in errors], [InvalidValue])

    def test_allowed_values(self):
        p = value("level", convert=int, allowed=[1, 2, 3])
        self.assertEqual(p.parse(["--level", "2"]).get, Success(2))
        error = p.parse(["--level", "4"]).errors[0]
        self.assertIsInstance(error, UnknownVariant)
        self.assertEqual(error.allowed, ("1", "2", "3"))

    def test_enum(self):
        class Mode(Enum):
            FAST = "fast"
            SLOW = "slow"

        p = value_enum("mode", Mode, short="m")
        self.assertEqual(p.parse(["-mslow"]).get, Success(Mode.SLOW))
        self.assertEqual(p.parse(["--mode=FAST"]).get, Success(Mode.FAST))
        self.assertIsInstance(p.parse(["-m", "medium"]).errors[0], UnknownVariant)

    def test_attached_value_keeps_case_and_composition(self):
        p = value("name", short="n", case_sensitive=False)
        self.assertEqual(p.parse(["-NCafé"]).get, Success("Café"))


class TestShortPrecedence(unittest.TestCase):
    def setUp(self):
        self.parser = combine(
            lambda f, w, n: (f, w, n),
            flag("eff", short="f", default=False),
            flag("double", short="w", default=False),
            value("number", short="n", default=None, convert=int),
        )

    def test_flags_then_trailing_text_is_unrecognized(self):
        errors = self.parser.parse(["-fw3"]).errors
        self.assertEqual(len(errors), 1)
        self.assertIsInstance(errors[0], UnrecognizedArgument)
        self.assertEqual(errors[0].token, "-fw3")

    def test_value_leaf_takes_the_rest(self):
        p = combine(
            lambda f, w: (f, w),
            flag("eff", short="f", default=False),
            value("width", short="w", default=None),
        )
        self.assertEqual(p.parse(["-wf"]).get, Success((False, "f")))
        self.assertIsInstance(p.parse(["-fw3"]).errors[0], UnrecognizedArgument)

    def test_all_flags(self):
        self.assertEqual(self.parser.parse(["-wf"]).get, Success((True, True, None)))

    def test_value_after_flags_in_own_token(self):
        self.assertEqual(
            self.parser.parse(["-fw", "-n3"]).get, Success((True, True, 3))
        )


class TestCombine(unittest.TestCase):
    def test_declaration_order(self):
        p = combine(
            lambda *xs: xs,
            value("a", default="1"),
            combine(lambda b, c: b + c, value("b", default="2"), value("c", default="3")),
            constant("4"),
        )
        self.assertEqual(p.parse(["--c", "x"]).get, Success(("1", "2x", "4")))

    def test_duplicate_long_name(self):
        with self.assertRaises(DuplicateName):
            combine(lambda a, b: (a, b), flag("x"), value("x"))

    def test_duplicate_short_name_in_nested_tree(self):
        inner = combine(lambda a: a, flag("alpha", short="a"))
        with self.assertRaises(DuplicateName):
            combine(lambda a, b: (a, b), inner, value("apple", short="a"))

    def test_duplicate_after_normalization(self):
        with self.assertRaises(DuplicateName):
            combine(
                lambda a, b: (a, b),
                flag("caf\u00e9"),
                flag("cafe\u0301"),
            )

    def test_duplicate_case_insensitive(self):
        with self.assertRaises(DuplicateName):
            combine(
                lambda a, b: (a, b),
                flag("Name", case_sensitive=False),
                flag("name"),
            )

    def test_long_and_short_do_not_clash(self):
        p = combine(lambda a, b: (a, b), flag("v", default=False), flag("verbose", short="v", default=False))
        self.assertEqual(p.parse(["--v"]).get, Success((True, False)))
        self.assertEqual(p.parse(["-v"]).get, Success((False, True)))

    def test_negated_spelling_clashes_with_long_name(self):
        with self.assertRaises(DuplicateName):
            combine(
                lambda a, b: (a, b),
                flag("cache", default=True),
                flag("no-cache", default=False),
            )
        with self.assertRaises(DuplicateName):
            combine(lambda a, b: (a, b), value("no-cache"), flag("cache"))
        with self.assertRaises(DuplicateName):
            combine(
                lambda a, b: (a, b),
                flag("cache", case_sensitive=False),
                flag("No-Cache"),
            )

    def test_non_negatable_flag_frees_negated_spelling(self):
        p = combine(
            lambda a, b: (a, b),
            flag("cache", default=True, negatable=False),
            flag("no-cache", default=False),
        )
        self.assertEqual(p.parse(["--no-cache"]).get, Success((True, True)))

    def test_help_yields_short_name_to_user(self):
        p = flag("hello", short="h", default=False).with_help("prog")
        self.assertEqual(p.parse(["-h"]).get, Success(True))
        self.assertEqual(len(p.parse(["--help"]).messages), 1)

    def test_help_clashes_with_explicit_short_name(self):
        with self.assertRaises(DuplicateName):
            flag("hello", short="h").with_help("prog", short="h")

    def test_invalid_names(self):
        with self.assertRaises(InvalidName):
            flag([])
        with self.assertRaises(InvalidName):
            flag("")
        with self.assertRaises(InvalidName):
            flag("x", short="xy")

    def test_short_name_is_one_grapheme(self):
        p = flag("flag", short="🇩🇪", default=False)
        self.assertEqual(p.parse(["-🇩🇪"]).get, Success(True))

    def test_error_aggregation(self):
        p = combine(lambda a, b: (a, b), flag("a"), value("b"))
        errors = p.parse([]).errors
        self.assertEqual(len(errors), 2)
        self.assertTrue(all(isinstance(e, MissingArgument) for e in errors))

    def test_every_error_reported(self):
        p = combine(lambda a, b: (a, b), flag("a"), value("b", convert=int))
        errors = p.parse(["--zzz", "--b", "x", "word", "-q"]).errors
        self.assertEqual(
            [type(e) for e in errors],
            [
                UnrecognizedArgument,
                InvalidValue,
                UnrecognizedArgument,
                MissingArgument,
                ExtraArguments,
            ],
        )
        self.assertEqual(errors[-1].tokens, ("word",))

    def test_extra_arguments(self):
        p = flag("a", default=False)
        result = p.parse(["x", "--a", "y"])
        self.assertIsInstance(result.get, Failure)
        (error,) = result.errors
        self.assertIsInstance(error, ExtraArguments)
        self.assertEqual(error.tokens, ("x", "y"))

    def test_idempotence(self):
        p = combine(
            lambda a, b: (a, b),
            flag("a", default=False),
            value("b", default=2, convert=int),
        )
        self.assertEqual(p.parse([]), p.parse([]))
        self.assertEqual(p.parse([]).get, Success((False, 2)))

    def test_convert(self):
        p = value("n", convert=int).convert(str)
        self.assertEqual(p.parse(["--n=4"]).get, Success("4"))


class TestEarlyExit(unittest.TestCase):
    def test_precedence_over_errors(self):
        p = combine(
            lambda n, _: n,
            value("n", convert=int),
            early_exit("about", "about text", short="a"),
        )
        for tokens in [
            ["--n", "x", "--about"],
            ["--about", "--n", "x"],
            ["--unknown", "-a"],
        ]:
            with self.subTest(tokens=tokens):
                result = p.parse(tokens)
                self.assertIsInstance(result.get, EarlyExit)
                self.assertEqual(result.messages, ["about text"])

    def test_in_short_group(self):
        p = flag("quiet", short="q", default=False).with_version("prog", "2.0")
        self.assertEqual(p.parse(["-qv"]).messages, ["prog 2.0"])

    def test_help_and_version(self):
        p = flag("quiet", short="q", default=False).with_help_and_version(
            "prog", "2.0", description="Does things."
        )
        self.assertEqual(p.parse(["--version"]).messages, ["prog 2.0"])
        (text,) = p.parse(["--help"]).messages
        self.assertTrue(text.startswith("prog 2.0\nDoes things.\n\nprog [OPTIONS]\n"))
        self.assertIn("| -v  Show the current version.", text)
        self.assertEqual(p.parse([]).get, Success(False))

    def test_version_yields_short_name_to_user(self):
        p = flag("verbose", short="v", default=False).with_help_and_version("prog", "1.0")
        self.assertEqual(p.parse(["-v"]).get, Success(True))
        self.assertEqual(p.parse(["--version"]).messages, ["prog 1.0"])
        (text,) = p.parse(["-h"]).messages
        self.assertIn("Show the current version.", text)
        self.assertNotIn("| -v  Show the current version.", text)

    def test_german_help(self):
        p = value("zahl", default=3, convert=int, language=GERMAN).with_help(
            "programm", language=GERMAN
        )
        (text,) = p.parse(["--hilfe"]).messages
        self.assertIn("programm [OPTIONEN]", text)
        self.assertIn("--zahl(=| )WERT", text)
        self.assertIn("[Standard: 3]", text)
        self.assertIn("Zeige diesen Text an.", text)


class TestCaseInsensitive(unittest.TestCase):
    def test_case_and_composition(self):
        p = combine(
            lambda a, b: (a, b),
            flag("café", short="ä", default=False, case_sensitive=False),
            value("größe", convert=int, default=0, case_sensitive=False),
        )
        self.assertEqual(p.parse(["--CAFÉ"]).get, Success((True, 0)))
        self.assertEqual(p.parse(["--No-Café"]).get, Success((False, 0)))
        self.assertEqual(p.parse(["-Ä"]).get, Success((True, 0)))
        self.assertEqual(p.parse(["--GRÖSSE=2"]).get, Success((False, 2)))

    def test_case_sensitive_by_default(self):
        p = flag("verbose", default=False)
        self.assertIsInstance(p.parse(["--Verbose"]).errors[0], UnrecognizedArgument)


class TestHelp(unittest.TestCase):
    def test_layout(self):
        p = combine(
            lambda *xs: xs,
            flag("verbose", short="v", default=False, help="Talk more."),
            value("count", short="c", convert=int, help="How many."),
            value("level", convert=int, allowed=[1, 2], default=1),
        )
        text = render(p, "prog", "1.0", exe_name="prog.py")
        self.assertEqual(
            text.splitlines()[:5],
            ["prog 1.0", "", "prog.py [OPTIONS]", "", "OPTIONS:"],
        )
        lines = text.splitlines()[5:]
        self.assertEqual(len(lines), 3)
        self.assertTrue(lines[0].startswith("  --[no-]verbose    | -v"))
        self.assertTrue(lines[0].endswith("Talk more. [Default: false]"))
        self.assertTrue(lines[1].endswith("How many."))
        self.assertTrue(lines[2].endswith("[Possible values: 1, 2 | Default: 1]"))
        columns = {line.index(note) for line, note in zip(lines, ["Talk", "How", "[Possible"])}
        self.assertEqual(len(columns), 1)

    def test_defaults_round_trip(self):
        p = combine(
            lambda *xs: xs,
            flag("verbose", default=False),
            value("count", default=3, convert=int),
            value("name", default="anon"),
        )
        text = p.help_text("prog")
        self.assertIn("[Default: false]", text)
        self.assertIn("[Default: 3]", text)
        self.assertIn("[Default: anon]", text)
        tokens = ["--no-verbose", "--count", "3", "--name", "anon"]
        self.assertEqual(p.parse(tokens), p.parse([]))

    def test_rendering_does_not_affect_parsing(self):
        p = flag("verbose", default=False)
        before = p.parse(["--verbose"])
        p.help_text("prog", "1.0")
        self.assertEqual(p.parse(["--verbose"]), before)

    def test_error_messages(self):
        p = combine(lambda a, b: (a, b), flag("a", short="x"), value("bee", short="b"))
        messages = [e.message() for e in p.parse(["--zzz"]).errors]
        self.assertEqual(
            messages,
            [
                "Unrecognized Argument: --zzz",
                "Missing Flag: --[no-]a | -x",
                "Missing Value: --bee(=| )VALUE | -b[=| ]VALUE",
            ],
        )
        german = [e.message(GERMAN) for e in p.parse([]).errors]
        self.assertEqual(german[0], "Fehlende Flag: --[no-]a | -x")


class TestAffixes(unittest.TestCase):
    def test_custom_affixes(self):
        p = value(
            "width",
            short="w",
            convert=int,
            affixes=combinargs.Affixes.make(
                long_prefix="/", short_prefix="+", value_infix=":"
            ),
        )
        self.assertEqual(p.parse(["/width:3"]).get, Success(3))
        self.assertEqual(p.parse(["+w:4"]).get, Success(4))
        self.assertEqual(p.parse(["+w5"]).get, Success(5))
        self.assertIsInstance(p.parse(["--width=3"]).errors[-1], ExtraArguments)

    def test_tree_level_affixes(self):
        p = combine(
            lambda a, b: (a, b),
            flag("a", default=False),
            flag("b", default=True),
        ).with_affixes(negation_prefix="without", negation_infix="_")
        self.assertEqual(p.parse(["--a", "--without_b"]).get, Success((True, False)))

    def test_help_follows_affixes(self):
        p = flag("verbose", default=False).with_help("prog").with_affixes(long_prefix="+")
        (text,) = p.parse(["+help"]).messages
        self.assertIn("+[no-]verbose", text)
        self.assertIn("+help", text)
        self.assertNotIn("--", text)

    def test_case_insensitive_affix(self):
        p = flag("verbose", default=True).with_affixes(
            negation_prefix=combinargs.description.Compare("no", case_sensitive=False)
        )
        self.assertEqual(p.parse(["--NO-verbose"]).get, Success(False))


class TestArgs(unittest.TestCase):
    def test_types(self):
        class Color(Enum):
            RED = 1
            BLUE = 2

        @dataclass
        class MyArgs(Args):
            name: str
            count: int = field(default=1, short="c")
            ratio: Optional[float] = None
            color: Color = Color.RED
            dry_run: bool = False

        p = MyArgs.parser()
        self.assertEqual(
            p.parse(["--name", "x", "-c2", "--ratio=.5", "--color", "blue", "--dry-run"]).get,
            Success(MyArgs(name="x", count=2, ratio=0.5, color=Color.BLUE, dry_run=True)),
        )
        self.assertIsInstance(p.parse([]).errors[0], MissingValue)

    def test_custom_parser(self):
        @dataclass
        class MyArgs(Args):
            size: int = field(parser=value("size", convert=lambda s: int(s) + 1))

        self.assertEqual(MyArgs.parser().parse(["--size", "1"]).get, Success(MyArgs(2)))

    def test_parse_args(self):
        @dataclass
        class MyArgs(Args):
            quiet: bool = True

        self.assertEqual(MyArgs.parse_args("--no-quiet"), MyArgs(quiet=False))
        self.assertIsNone(MyArgs.parse_args("--version", version="1.0"))
        self.assertIsNone(MyArgs.parse_args("--bogus"))

    def test_version_with_short_v_field(self):
        @dataclass
        class MyArgs(Args):
            verbose: bool = field(short="v", default=False)

        self.assertEqual(MyArgs.parse_args("-v", version="1.0"), MyArgs(verbose=True))


if __name__ == "__main__":
    unittest.main()
