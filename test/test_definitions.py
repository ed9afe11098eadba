"""
Definition records tests.

Scope
- Field names and defaults of every record.
- Records are immutable.
"""
import unittest
from unittest import TestCase

from sextant.definitions import *


class TestDefinitions(TestCase):
    """Behavioral tests for the definition records."""

    def testFlagDefaults(self):
        definition = FlagDefinition("--verbose")
        self.assertEqual(definition.parameter_long_name, "--verbose")
        self.assertIsNone(definition.parameter_short_name)
        self.assertEqual(definition.description, "")

    def testArgumentDefinitions(self):
        for record in (IntegerDefinition, StringDefinition, StringListDefinition):
            with self.subTest(record=record.__name__):
                definition = record("--thing", "-t", "A thing", "THING")
                self.assertEqual(definition.argument_name, "THING")
                self.assertIsNone(record("--thing").argument_name)

    def testChoiceDefaults(self):
        definition = ChoiceDefinition("--mode", alternatives=("a", "b"))
        self.assertEqual(definition.alternatives, ("a", "b"))
        self.assertIsNone(definition.default_value)

    def testImmutable(self):
        definition = FlagDefinition("--verbose")
        with self.assertRaises(AttributeError):
            definition.parameter_long_name = "--quiet"


if __name__ == "__main__":
    unittest.main()
