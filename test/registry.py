"""
Registry module behavioral tests.

Scope
- Validate token issuance (dense positions per kind, registration order).
- Validate lookups by token, by name/alias and by positional order.
- Validate duplicate rejection (shared switch/option namespace) and closing.

Conventions
- Test method names follow CamelCase per project convention.
"""
import unittest
from unittest import TestCase

from argsparser import (
    ArgKind,
    Token,
    NULL_TOKEN,
    Registry,
    Positional,
    Switch,
    Option,
    DuplicateRegistrationError,
    RegistrationClosedError,
    FailureKind,
)


class TestRegistration(TestCase):
    """Behavioral tests for Registry.register()."""

    def testTokensAreDensePerKind(self):
        registry = Registry()
        self.assertEqual(registry.register(Positional("source")), Token(ArgKind.POSITIONAL, 0))
        self.assertEqual(registry.register(Switch("verbose", "v")), Token(ArgKind.SWITCH, 0))
        self.assertEqual(registry.register(Option("count", "c")), Token(ArgKind.OPTION, 0))
        self.assertEqual(registry.register(Positional("target")), Token(ArgKind.POSITIONAL, 1))
        self.assertEqual(registry.register(Option("level")), Token(ArgKind.OPTION, 1))
        self.assertEqual(len(registry), 5)

    def testRegisterRejectsNonSpecs(self):
        with self.assertRaises(TypeError):
            Registry().register("verbose")

    def testDuplicateNameAcrossSwitchAndOption(self):
        registry = Registry()
        token = registry.register(Switch("verbose"))
        with self.assertRaises(DuplicateRegistrationError) as context:
            registry.register(Option("verbose"))
        self.assertEqual(context.exception.kind, FailureKind.DUPLICATE_REGISTRATION)
        self.assertEqual(context.exception.options["token"], token)

    def testDuplicateAliasIsRejected(self):
        registry = Registry()
        registry.register(Switch("verbose", "v"))
        with self.assertRaises(DuplicateRegistrationError):
            registry.register(Option("version", "v"))

    def testAliasCannotShadowAName(self):
        registry = Registry()
        registry.register(Switch("x"))
        with self.assertRaises(DuplicateRegistrationError):
            registry.register(Option("extra", "x"))

    def testFailedRegistrationLeavesNoTrace(self):
        registry = Registry()
        registry.register(Switch("verbose", "v"))
        with self.assertRaises(DuplicateRegistrationError):
            registry.register(Option("quiet", "v"))
        self.assertEqual(registry.find("quiet"), NULL_TOKEN)
        self.assertEqual(registry.register(Option("quiet", "q")), Token(ArgKind.OPTION, 0))

    def testDuplicatePositionalName(self):
        registry = Registry()
        registry.register(Positional("source"))
        with self.assertRaises(DuplicateRegistrationError):
            registry.register(Positional("source"))

    def testPositionalNamesAreApartFromNamedArguments(self):
        registry = Registry()
        registry.register(Positional("source"))
        registry.register(Option("source"))
        self.assertEqual(registry.find("source"), Token(ArgKind.OPTION, 0))

    def testClosedRegistryRejectsEveryKind(self):
        registry = Registry()
        registry.close()
        self.assertTrue(registry.closed)
        for spec in (Positional("source"), Switch("verbose"), Option("count")):
            with self.subTest(spec=spec):
                with self.assertRaises(RegistrationClosedError):
                    registry.register(spec)
        self.assertEqual(len(registry), 0)


class TestLookup(TestCase):
    """Behavioral tests for Registry lookups."""

    def setUp(self):
        self.registry = Registry()
        self.source = Positional("source")
        self.verbose = Switch("verbose", "v")
        self.count = Option("count", "c")
        self.tokens = [self.registry.register(spec) for spec in (self.source, self.verbose, self.count)]

    def testLookupReturnsTheRegisteredSpec(self):
        self.assertIs(self.registry.lookup(self.tokens[0]), self.source)
        self.assertIs(self.registry.lookup(self.tokens[1]), self.verbose)
        self.assertIs(self.registry.lookup(self.tokens[2]), self.count)

    def testLookupRejectsNullAndForeignTokens(self):
        with self.assertRaises(LookupError):
            self.registry.lookup(NULL_TOKEN)
        with self.assertRaises(LookupError):
            self.registry.lookup(Token(ArgKind.OPTION, 7))
        with self.assertRaises(TypeError):
            self.registry.lookup((3, 0))

    def testFindByNameAndAlias(self):
        self.assertEqual(self.registry.find("count"), self.tokens[2])
        self.assertEqual(self.registry.find("c"), self.tokens[2])
        self.assertEqual(self.registry.find("v"), self.tokens[1])
        self.assertEqual(self.registry.find("missing"), NULL_TOKEN)

    def testFindIgnoresPositionals(self):
        self.assertEqual(self.registry.find("source"), NULL_TOKEN)

    def testPositionalByOrder(self):
        self.assertEqual(self.registry.positional(0), self.tokens[0])
        self.assertEqual(self.registry.positional(1), NULL_TOKEN)
        self.assertEqual(self.registry.positional(-1), NULL_TOKEN)

    def testIterationOrder(self):
        self.assertEqual([token for token, spec in self.registry], self.tokens)
        self.assertEqual(list(self.registry.tokens(ArgKind.SWITCH)), [self.tokens[1]])

    def testContains(self):
        self.assertIn(self.tokens[2], self.registry)
        self.assertNotIn(NULL_TOKEN, self.registry)
        self.assertNotIn(Token(ArgKind.SWITCH, 5), self.registry)


if __name__ == "__main__":
    unittest.main()
