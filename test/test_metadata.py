"""
Metadata module behavioral tests (discovery, ordering, defects).

Scope
- Validate program banner fields and their independent degradation to ''.
- Validate that only typing.final methods are exposed, in declaration order.
- Validate parameter descriptors: order, type, optionality, description.
- Validate memoization/idempotence and MetadataError for malformed classes.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from typing import final
from unittest import TestCase

from docket import Command, extract
from docket.faults import FaultCode, MetadataError
from docket.metadata import ParameterType


class Sample(Command):
    """
    Sample command used by the metadata tests.

    :title: Sample Tool
    :version: v2.0
    :usage: sample <method> [options...]
    """

    @final
    def first(self, alpha, beta=3, *, gamma=False):
        """
        First method
        spanning two lines

        :param str alpha: Alpha value
        :param int beta: Beta value
        :param bool gamma: Gamma switch
        """

    def helper(self, x):
        """
        Not exposed.

        :param int x: Anything
        """

    @final
    def second(self, items):
        """
        Second method

        :param array items: Items to keep
        """


class Child(Sample):

    @final
    def third(self):
        """Third method"""

    @final
    def second(self, items, limit=None):
        """
        Second method, redefined

        :param list items: Items to keep
        :param int limit: Upper bound
        """


class TestProgram(TestCase):
    """Program banner extraction."""

    def testProgramFields(self):
        program = extract(Sample).program
        self.assertEqual(program.title, "Sample Tool")
        self.assertEqual(program.version, "v2.0")
        self.assertEqual(program.usage, "sample <method> [options...]")

    def testMissingFieldsDegradeToEmpty(self):
        class Partial(Command):
            """
            :title: Only a title
            """

        program = extract(Partial).program
        self.assertEqual(program.title, "Only a title")
        self.assertEqual(program.version, "")
        self.assertEqual(program.usage, "")

    def testDocstringIsNotInherited(self):
        self.assertEqual(extract(Child).program.title, "")


class TestMethods(TestCase):
    """Exposed method discovery and parameter descriptors."""

    def testOnlyFinalMethodsAreExposed(self):
        methods = extract(Sample).methods
        self.assertEqual(list(methods), ["first", "second"])
        self.assertNotIn("helper", methods)
        self.assertNotIn("dispatch", methods)

    def testDescriptionStopsAtFirstField(self):
        self.assertEqual(extract(Sample).methods["first"].description, "First method\nspanning two lines")

    def testParameterOrderMatchesSignature(self):
        parameters = extract(Sample).methods["first"].parameters
        self.assertEqual([parameter.name for parameter in parameters], ["alpha", "beta", "gamma"])

    def testParameterDescriptors(self):
        alpha, beta, gamma = extract(Sample).methods["first"].parameters
        self.assertEqual(alpha.type, ParameterType.STRING)
        self.assertFalse(alpha.optional)
        self.assertEqual(alpha.description, "Alpha value")
        self.assertEqual(beta.type, ParameterType.INT)
        self.assertTrue(beta.optional)
        self.assertEqual(gamma.type, ParameterType.BOOL)
        self.assertTrue(gamma.optional)

    def testTypeAliases(self):
        items, = extract(Sample).methods["second"].parameters
        self.assertIs(items.type, ParameterType.LIST)

    def testInheritedOrderKeepsFirstDeclaration(self):
        methods = extract(Child).methods
        self.assertEqual(list(methods), ["first", "second", "third"])
        self.assertEqual(methods["second"].description, "Second method, redefined")
        self.assertEqual(len(methods["second"].parameters), 2)

    def testMethodWithoutParameters(self):
        third = extract(Child).methods["third"]
        self.assertEqual(third.description, "Third method")
        self.assertEqual(third.parameters, ())

    def testInstanceMetadataIsCached(self):
        command = Sample()
        self.assertIs(command.metadata, command.metadata)
        self.assertIs(command.metadata, extract(Sample))


class TestIdempotence(TestCase):
    """Memoization and structural equality."""

    def testRepeatedCallsReturnSameObject(self):
        self.assertIs(extract(Sample), extract(Sample))

    def testRecomputationIsStructurallyEqual(self):
        self.assertEqual(extract.__wrapped__(Sample), extract(Sample))

    def testMethodsAreReadOnly(self):
        with self.assertRaises(TypeError):
            extract(Sample).methods["other"] = None  # type: ignore[index]

    def testNonClassRejected(self):
        with self.assertRaises(TypeError):
            extract(Sample())


class TestDefects(TestCase):
    """Malformed command classes are rejected at extraction time."""

    def testUndocumentedParameterRaises(self):
        class Broken(Command):
            @final
            def run(self, target):
                """Run something"""

        with self.assertRaises(MetadataError) as context:
            extract(Broken)
        self.assertEqual(context.exception.code, FaultCode.UNDOCUMENTED_PARAMETER)
        self.assertIn("'target'", str(context.exception))

    def testUnsupportedTypeRaises(self):
        class Broken(Command):
            @final
            def scale(self, ratio):
                """
                Scale something

                :param float ratio: Scale ratio
                """

        with self.assertRaises(MetadataError) as context:
            extract(Broken)
        self.assertEqual(context.exception.code, FaultCode.UNSUPPORTED_TYPE)

    def testVariadicParameterRaises(self):
        class Broken(Command):
            @final
            def gather(self, *items):
                """
                Gather items

                :param list items: Items
                """

        with self.assertRaises(MetadataError) as context:
            extract(Broken)
        self.assertEqual(context.exception.code, FaultCode.UNSUPPORTED_KIND)

    def testMetadataErrorIsTypeError(self):
        class Broken(Command):
            @final
            def run(self, target):
                """Run something"""

        with self.assertRaises(TypeError):
            extract(Broken)


if __name__ == "__main__":
    unittest.main()
