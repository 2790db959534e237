# python
"""
Flag set behavioral tests (registration, parsing rules, faults, visitation).

Scope
- Validate registration: typed registrants write defaults, names are validated,
  redefinition raises FlagRedefinedError.
- Validate parsing: long/short spellings, inline and spaced values, bool toggles,
  '--' and non-flag termination, leftover args.
- Validate faults: unknown flags (with suggestions), missing values, malformed
  values and tokens, help requests, and the continue/raise/exit modes.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import io
import unittest
from types import SimpleNamespace
from unittest import TestCase

from fluentflag import flagset
from fluentflag.faults import (
    FlagRedefinedError,
    HelpRequested,
    MalformedTokenError,
    MalformedValueError,
    MissingValueError,
    UnknownFlagError,
)
from fluentflag.flagset import FlagSet
from fluentflag.values import Accumulator, FlagKind, Ref


class TestRegistration(TestCase):
    """Behavioral tests for FlagSet registration."""

    def setUp(self):
        self.flags = FlagSet("test", on_error="raise")

    def testTypedVarWritesDefault(self):
        ref = Ref()
        self.flags.int_var(ref, "num", 5, "number")
        self.assertEqual(ref.value, 5)

    def testTypedVarBindsAttribute(self):
        options = SimpleNamespace()
        self.flags.string_var(options, "word", "foo", "word", attribute="word")
        self.flags.float64_var(options, "ratio", 1, "ratio", attribute="ratio")
        self.assertEqual(options.word, "foo")
        self.assertEqual(options.ratio, 1.0)

    def testRedefinitionRaises(self):
        self.flags.bool_var(Ref(), "verbose", False)
        with self.assertRaises(FlagRedefinedError) as context:
            self.flags.bool_var(Ref(), "verbose", False)
        self.assertIn("flag redefined: verbose", str(context.exception))

    def testRedefinitionLeavesTargetUntouched(self):
        self.flags.int_var(Ref(), "num", 1)
        ref = Ref("untouched")
        with self.assertRaises(FlagRedefinedError):
            self.flags.int_var(ref, "num", 2)
        self.assertEqual(ref.value, "untouched")

    def testInvalidNames(self):
        for name in ("", "-x", "a=b"):
            with self.assertRaises(ValueError):
                self.flags.var(Accumulator(FlagKind.INT), name, "bad")

    def testLookup(self):
        self.flags.uint_var(Ref(), "count", 7, "count flag")
        flag = self.flags.lookup("count")
        self.assertEqual(flag.usage, "count flag")
        self.assertEqual(flag.default, "7")
        self.assertIsNone(self.flags.lookup("missing"))


class TestParsing(TestCase):
    """Behavioral tests for FlagSet.parse()."""

    def setUp(self):
        self.flags = FlagSet("test", on_error="raise")

    def testInlineAndSpacedValues(self):
        first, second = Ref(), Ref()
        self.flags.int_var(first, "a", 0)
        self.flags.int_var(second, "bee", 0)
        self.flags.parse(["--a=1", "-bee", "2"])
        self.assertEqual((first.value, second.value), (1, 2))

    def testOneAndTwoDashesAreEquivalent(self):
        ref = Ref()
        self.flags.string_var(ref, "name", "")
        self.flags.parse(["-name=x"])
        self.assertEqual(ref.value, "x")
        self.flags.parse(["--name", "y"])
        self.assertEqual(ref.value, "y")

    def testBoolPresenceAndExplicitValue(self):
        ref = Ref()
        self.flags.bool_var(ref, "flag", True)
        self.flags.parse(["--flag=false"])
        self.assertIs(ref.value, False)
        self.flags.parse(["--flag"])
        self.assertIs(ref.value, True)

    def testBoolDoesNotConsumeNextToken(self):
        ref = Ref()
        self.flags.bool_var(ref, "b", False)
        self.flags.parse(["-b", "false"])
        self.assertIs(ref.value, True)
        self.assertEqual(self.flags.args, ["false"])

    def testValueMayLookLikeFlag(self):
        ref = Ref()
        self.flags.int_var(ref, "i", 0)
        self.flags.parse(["-i", "-5"])
        self.assertEqual(ref.value, -5)

    def testTerminatorAndNonFlagStop(self):
        ref = Ref()
        self.flags.bool_var(ref, "v", False)
        self.flags.parse(["-v", "--", "-v", "file"])
        self.assertEqual(self.flags.args, ["-v", "file"])
        self.flags.parse(["file", "-v"])
        self.assertEqual(self.flags.args, ["file", "-v"])
        self.flags.parse(["-", "x"])
        self.assertEqual(self.flags.args, ["-", "x"])

    def testAccumulatorInterleavesByPosition(self):
        values = []
        accumulator = Accumulator(FlagKind.INT, values)
        self.flags.var(accumulator, "num", "numbers")
        self.flags.var(accumulator, "n", "")
        self.flags.parse(["-n", "1", "--num=2", "-n", "3"])
        self.assertEqual(values, [1, 2, 3])

    def testAccumulatorRequiresValue(self):
        self.flags.var(Accumulator(FlagKind.BOOL), "b", "")
        with self.assertRaises(MissingValueError):
            self.flags.parse(["-b"])

    def testParsedAndVisit(self):
        self.flags.int_var(Ref(), "a", 0)
        self.flags.int_var(Ref(), "b", 0)
        self.assertFalse(self.flags.parsed)
        self.flags.parse(["-b", "1"])
        self.assertTrue(self.flags.parsed)
        self.assertEqual(self.flags.n_flag(), 1)
        visited, everything = [], []
        self.flags.visit(lambda flag: visited.append(flag.name))
        self.flags.visit_all(lambda flag: everything.append((flag.name, str(flag.value))))
        self.assertEqual(visited, ["b"])
        self.assertEqual(everything, [("a", "0"), ("b", "1")])

    def testPrintDefaults(self):
        output = io.StringIO()
        self.flags.set_output(output)
        self.flags.int_var(Ref(), "count", 7, "count flag")
        self.flags.string_var(Ref(), "name", "foo", "a `word` to print")
        self.flags.string_var(Ref(), "empty", "", "nothing by default")
        self.flags.bool_var(Ref(), "v", False, "verbose")
        self.flags.var(Accumulator(FlagKind.STRING), "tag", "tags")
        self.flags.print_defaults()
        self.assertEqual(output.getvalue().expandtabs(8), "\n".join((
            "  -count int",
            "        count flag (default 7)",
            "  -empty string",
            "        nothing by default",
            '  -name word',
            '        a word to print (default "foo")',
            "  -tag value",
            "        tags",
            "  -v    verbose",
            "",
        )))

    def testUnquoteUsage(self):
        self.flags.float64_var(Ref(), "ratio", 0.5, "ratio")
        self.flags.uint64_var(Ref(), "size", 0, "size in `bytes`")
        self.flags.bool_var(Ref(), "quiet", False, "quiet")
        self.assertEqual(flagset.unquote_usage(self.flags.lookup("ratio")), ("float", "ratio"))
        self.assertEqual(flagset.unquote_usage(self.flags.lookup("size")), ("bytes", "size in bytes"))
        self.assertEqual(flagset.unquote_usage(self.flags.lookup("quiet")), ("", "quiet"))

    def testSetProgrammatically(self):
        ref = Ref()
        self.flags.uint64_var(ref, "size", 0)
        self.flags.set("size", "10")
        self.assertEqual(ref.value, 10)
        with self.assertRaises(UnknownFlagError):
            self.flags.set("nope", "1")


class TestFaults(TestCase):
    """Behavioral tests for parse faults and error handling modes."""

    def setUp(self):
        self.flags = FlagSet("test", on_error="raise")
        self.ref = Ref()
        self.flags.int_var(self.ref, "count", 0, "count flag")

    def testUnknownFlagSuggests(self):
        with self.assertRaises(UnknownFlagError) as context:
            self.flags.parse(["--cont=3"])
        self.assertEqual(context.exception.options["suggestions"], ["count"])
        self.assertIn("--count", context.exception.options["hint"])

    def testMissingValue(self):
        with self.assertRaises(MissingValueError) as context:
            self.flags.parse(["--count"])
        self.assertEqual(context.exception.options["flag"], "count")

    def testMalformedValue(self):
        with self.assertRaises(MalformedValueError) as context:
            self.flags.parse(["--count", "many"])
        fault = context.exception
        self.assertEqual(fault.options["raw"], "many")
        self.assertEqual(fault.options["position"], 1)
        self.assertIsInstance(fault.__cause__, MalformedValueError)
        self.assertEqual(self.ref.value, 0)

    def testMalformedTokens(self):
        for token in ("---count", "-=1", "--=1"):
            with self.assertRaises(MalformedTokenError):
                self.flags.parse([token])

    def testHelpRequested(self):
        with self.assertRaises(HelpRequested):
            self.flags.parse(["-h"])
        with self.assertRaises(HelpRequested):
            self.flags.parse(["--help"])

    def testDefinedHelpIsOrdinary(self):
        ref = Ref()
        self.flags.bool_var(ref, "help", False)
        self.flags.parse(["--help"])
        self.assertIs(ref.value, True)

    def testContinuePrintsAndRaises(self):
        flags = FlagSet("tool", on_error="continue")
        flags.int_var(Ref(), "count", 0, "count flag")
        output = io.StringIO()
        flags.set_output(output)
        with self.assertRaises(UnknownFlagError):
            flags.parse(["--nope"])
        printed = output.getvalue()
        self.assertIn("unknown flag", printed.lower())
        self.assertIn("Usage of tool:", printed)
        self.assertIn("-count", printed)

    def testExitModeExits(self):
        flags = FlagSet("tool", on_error="exit")
        flags.set_output(io.StringIO())
        with self.assertRaises(SystemExit) as context:
            flags.parse(["--nope"])
        self.assertEqual(context.exception.code, 2)
        with self.assertRaises(SystemExit) as context:
            flags.parse(["--help"])
        self.assertEqual(context.exception.code, 0)

    def testCustomUsage(self):
        flags = FlagSet("tool", on_error="continue")
        flags.set_output(io.StringIO())
        called = []
        flags.usage = lambda: called.append(True)
        with self.assertRaises(HelpRequested):
            flags.parse(["-help"])
        self.assertEqual(called, [True])

    def testOnErrorValidated(self):
        with self.assertRaises(ValueError):
            FlagSet("tool", on_error="panic")


class TestCommandLine(TestCase):
    """Behavioral tests for the process-wide flag set."""

    def testResetReplacesSet(self):
        previous = flagset.command_line
        try:
            fresh = flagset.reset_command_line("prog", on_error="raise")
            self.assertIs(flagset.command_line, fresh)
            self.assertEqual(fresh.name, "prog")
            ref = Ref()
            fresh.bool_var(ref, "v", False)
            flagset.parse_command_line(["-v"])
            self.assertIs(ref.value, True)
        finally:
            flagset.command_line = previous


if __name__ == "__main__":
    unittest.main()
