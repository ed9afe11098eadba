"""
Faults behavioral tests.

Scope
- Class-level defaults (code, title, hint) and their override by explicit options.
- Exception families: definition errors are ValueErrors, intake errors TypeErrors.
- Rendering with rich (plain and fancy), the optional docs line, and host hooks read from __main__.
- trigger(): raising outside shell mode, printing + exiting in shell mode.
"""
import copy
import io
import sys
import unittest
from unittest import TestCase, mock

from rich.console import Console

from sextant import faults
from sextant.faults import *


def render(renderable, width=120):
    console = Console(file=io.StringIO(), color_system=None, force_terminal=False, width=width)
    with console.capture() as capture:
        console.print(renderable)
    return capture.get()


class TestFaultDefaults(TestCase):
    """Options merged from the class declaration."""

    def testSubclassDefaults(self):
        fault = InvalidLongNameError("bad name")
        self.assertIs(fault.code, FaultCode.INVALID_LONG_NAME)
        self.assertEqual(fault.options["title"], "invalid long name")
        self.assertIn("--do-a-thing", fault.options["hint"])

    def testExplicitOptionsWin(self):
        fault = InvalidLongNameError("bad name", title="custom", parameter="--x")
        self.assertEqual(fault.options["title"], "custom")
        self.assertEqual(fault.options["parameter"], "--x")

    def testDefaultsInheritedFromFamily(self):
        self.assertEqual(DuplicateAlternativeError("dup").options["title"], "duplicate alternative")
        self.assertEqual(DefinitionError("oops").options["title"], "invalid definition")

    def testOptionsAreReadOnly(self):
        fault = UnexpectedDataError("bad data")
        with self.assertRaises(TypeError):
            fault.options["code"] = None

    def testStrIsMessage(self):
        self.assertEqual(str(UnexpectedDataError("bad data")), "bad data")
        self.assertEqual(str(ParameterException()), "")

    def testFamilies(self):
        for fault in (
            InvalidLongNameError(), InvalidShortNameError(), EmptyArgumentNameError(),
            LowercaseArgumentNameError(), InvalidArgumentNameError(), TooFewAlternativesError(),
            DuplicateAlternativeError(), InvalidDefaultValueError(),
        ):
            with self.subTest(fault=type(fault).__name__):
                self.assertIsInstance(fault, DefinitionError)
                self.assertIsInstance(fault, ValueError)
        self.assertIsInstance(UnexpectedDataError(), TypeError)
        self.assertIsInstance(UnknownParameterError(), LookupError)

    def testCodesAreUnique(self):
        self.assertEqual(len(set(FaultCode)), len(FaultCode.__members__))


class TestReplace(TestCase):
    """copy.replace() support used by trigger()."""

    def testReplaceMergesOptions(self):
        fault = UnexpectedDataError("bad data", parameter="--count")
        replaced = copy.replace(fault, shell=True)
        self.assertIsNot(replaced, fault)
        self.assertIs(type(replaced), UnexpectedDataError)
        self.assertEqual(replaced.message, "bad data")
        self.assertEqual(replaced.options["parameter"], "--count")
        self.assertTrue(replaced.options["shell"])


class TestRendering(TestCase):
    """Rich rendering of faults."""

    def testPlainRendering(self):
        output = render(InvalidLongNameError("bad name", prog="tool", colorful=False))
        self.assertIn("[ tool — 21101 | Invalid Long Name ]", output)
        self.assertIn("bad name", output)
        self.assertIn("→", output)

    def testFancyRendering(self):
        output = render(UnexpectedDataError("bad data", prog="tool", colorful=False, fancy=True))
        self.assertIn("Unexpected Data", output)
        self.assertIn("bad data", output)
        self.assertIn("╭", output)

    def testNoHintLine(self):
        output = render(DuplicateAlternativeError("dup", prog="tool", colorful=False))
        self.assertNotIn("→", output)

    def testDocsLine(self):
        output = render(UnknownParameterError("missing", prog="tool", colorful=False, docs="see the registry guide"))
        self.assertIn("see the registry guide", output)
        self.assertLess(output.index("missing"), output.index("see the registry guide"))
        self.assertNotIn("registry guide", render(UnknownParameterError("missing", prog="tool", colorful=False)))

    def testHostCodeLabels(self):
        main = sys.modules["__main__"]
        with mock.patch.object(main, "__codes__", {FaultCode.UNEXPECTED_DATA: "E-DATA"}, create=True):
            self.assertEqual(FaultCode.UNEXPECTED_DATA.normalize(), "E-DATA")
            output = render(UnexpectedDataError("bad data", prog="tool", colorful=False))
        self.assertIn("E-DATA", output)
        self.assertEqual(FaultCode.INVALID_LONG_NAME.normalize(), "21101")

    def testHostProgName(self):
        main = sys.modules["__main__"]
        with mock.patch.object(main, "__prog__", "hosted", create=True):
            output = render(UnexpectedDataError("bad data", colorful=False))
        self.assertIn("[ hosted —", output)


class TestTrigger(TestCase):
    """The central fault entry point."""

    def testRaisesOutsideShell(self):
        with self.assertRaises(UnexpectedDataError) as context:
            trigger(UnexpectedDataError("bad data"), parameter="--count")
        self.assertEqual(context.exception.options["parameter"], "--count")

    def testPrintsAndExitsInShell(self):
        output = io.StringIO()
        with mock.patch.object(faults, "console", Console(file=output, color_system=None, width=120)):
            with self.assertRaises(SystemExit) as context:
                trigger(TooFewAlternativesError("need two"), shell=True, colorful=False, prog="tool")
        self.assertEqual(context.exception.code, 1)
        self.assertIn("need two", output.getvalue())
        self.assertIn("Too Few Alternatives", output.getvalue())

    def testRejectsNonFaults(self):
        with self.assertRaises(TypeError):
            trigger(ValueError("plain"))


class TestGetdoc(TestCase):
    """Documentation lookup from the host application."""

    def testMissingDoc(self):
        self.assertIsNone(getdoc(FaultCode.UNKNOWN_PARAMETER))

    def testHostDoc(self):
        main = sys.modules["__main__"]
        with mock.patch.object(main, "__docs__", {FaultCode.UNKNOWN_PARAMETER: "see registry"}, create=True):
            self.assertEqual(getdoc(FaultCode.UNKNOWN_PARAMETER), "see registry")

    def testRejectsNonCode(self):
        with self.assertRaises(TypeError):
            getdoc(21101)


if __name__ == "__main__":
    unittest.main()
