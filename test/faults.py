"""
Faults module behavioral tests.

Scope
- Validate stable failure codes and host remapping through __main__.__codes__.
- Validate the exception hierarchy (families, builtin bases, options).
- Validate ParseExit grouping and rich rendering (plain and fancy).

Conventions
- Test method names follow CamelCase per project convention.
"""
import io
import unittest
from unittest import TestCase
from unittest.mock import patch

from rich.console import Console

from argsparser import (
    ArgKind,
    Token,
    NULL_TOKEN,
    FailureKind,
    ArgsParserException,
    RegistrationError,
    DuplicateRegistrationError,
    RegistrationClosedError,
    ParseFault,
    UnrecognizedArgumentError,
    MissingValueError,
    DuplicatedArgumentError,
    ValidationFailedError,
    ConversionFailedError,
    MissingRequiredError,
    NotSuppliedError,
    TypeMismatchError,
    ParseExit,
    report,
)


def render(renderable):
    stream = io.StringIO()
    Console(file=stream, force_terminal=False, width=120).print(renderable)
    return stream.getvalue()


class TestFailureKind(TestCase):
    """Behavioral tests for FailureKind codes."""

    def testCodesAreGroupedByDomain(self):
        self.assertEqual(FailureKind.DUPLICATE_REGISTRATION // 100, 101)
        self.assertEqual(FailureKind.REGISTRATION_CLOSED // 100, 101)
        for kind in (
                FailureKind.UNRECOGNIZED_ARGUMENT,
                FailureKind.MISSING_VALUE,
                FailureKind.DUPLICATED_ARGUMENT,
                FailureKind.VALIDATION_FAILED,
                FailureKind.CONVERSION_FAILED,
                FailureKind.MISSING_REQUIRED,
        ):
            with self.subTest(kind=kind):
                self.assertEqual(kind // 100, 111)
        self.assertEqual(FailureKind.NOT_SUPPLIED // 100, 131)
        self.assertEqual(FailureKind.TYPE_MISMATCH // 100, 131)

    def testNormalizeDefaultsToNumber(self):
        self.assertEqual(FailureKind.MISSING_VALUE.normalize(), "11112")

    def testNormalizeHonoursHostCodes(self):
        main = __import__("__main__")
        with patch.object(main, "__codes__", {FailureKind.MISSING_VALUE: "E-VALUE"}, create=True):
            self.assertEqual(FailureKind.MISSING_VALUE.normalize(), "E-VALUE")
            self.assertEqual(FailureKind.MISSING_REQUIRED.normalize(), "11131")


class TestHierarchy(TestCase):
    """Behavioral tests for the exception families."""

    def testFamilies(self):
        for cls in (DuplicateRegistrationError, RegistrationClosedError):
            with self.subTest(cls=cls):
                self.assertTrue(issubclass(cls, RegistrationError))
        for cls in (
                UnrecognizedArgumentError,
                MissingValueError,
                DuplicatedArgumentError,
                ValidationFailedError,
                ConversionFailedError,
                MissingRequiredError,
        ):
            with self.subTest(cls=cls):
                self.assertTrue(issubclass(cls, ParseFault))
                self.assertTrue(issubclass(cls, ArgsParserException))

    def testRetrievalErrorsKeepBuiltinBases(self):
        self.assertTrue(issubclass(NotSuppliedError, LookupError))
        self.assertTrue(issubclass(TypeMismatchError, TypeError))

    def testFaultOptions(self):
        token = Token(ArgKind.OPTION, 1)
        fault = ValidationFailedError("invalid value", hint="try again", token=token, index=4, reason="too big")
        self.assertEqual(fault.message, "invalid value")
        self.assertEqual(str(fault), "invalid value")
        self.assertEqual(fault.kind, FailureKind.VALIDATION_FAILED)
        self.assertEqual(fault.title, "invalid value")
        self.assertEqual(fault.hint, "try again")
        self.assertEqual(fault.token, token)
        self.assertEqual(fault.index, 4)
        self.assertEqual(fault.reason, "too big")

    def testFaultOptionsAreReadOnly(self):
        fault = MissingValueError("no value")
        with self.assertRaises(TypeError):
            fault.options["hint"] = "x"

    def testFaultDefaults(self):
        fault = UnrecognizedArgumentError("unrecognized")
        self.assertEqual(fault.token, NULL_TOKEN)
        self.assertIsNone(fault.index)
        self.assertIsNone(fault.hint)

    def testTitleOverride(self):
        self.assertEqual(MissingValueError("no value", title="custom").title, "custom")


class TestRendering(TestCase):
    """Behavioral tests for rich rendering."""

    def testFaultRendering(self):
        fault = MissingValueError("option '--count' at first position requires a value", hint="pass it", prog="tool", colorful=False)
        output = render(fault)
        self.assertIn("[ tool — 11112 | Missing Value ]", output)
        self.assertIn("option '--count' at first position requires a value", output)
        self.assertIn("→ pass it", output)

    def testFancyRenderingUsesPanel(self):
        fault = MissingValueError("requires a value", prog="tool", colorful=False, fancy=True)
        output = render(fault)
        self.assertIn("requires a value", output)
        self.assertIn("╭", output)

    def testParseExitGroupsFaults(self):
        faults = [UnrecognizedArgumentError("first fault", colorful=False), MissingRequiredError("second fault", colorful=False)]
        group = ParseExit(faults, prog="tool", colorful=False)
        self.assertIsInstance(group, ExceptionGroup)
        self.assertEqual(group.message, "bad parse")
        self.assertEqual(len(group.exceptions), 2)
        output = render(group)
        self.assertIn("[ tool — Bad Parse ]", output)
        self.assertIn("first fault", output)
        self.assertIn("second fault", output)

    def testReportToStream(self):
        stream = io.StringIO()
        report(NotSuppliedError("no value", colorful=False), file=stream)
        self.assertIn("no value", stream.getvalue())


if __name__ == "__main__":
    unittest.main()
