"""
Tests for the Unset sentinel and the small helpers of argsmith.utils.
"""
import copy
import pickle
import unittest
from unittest import TestCase

from argsmith.utils import Unset, UnsetType, coalesce, mirror, rename


class TestUnset(TestCase):

    def testSingleton(self):
        self.assertIs(UnsetType(), Unset)

    def testFalsy(self):
        self.assertFalse(Unset)
        self.assertIsNot(Unset, None)

    def testRepresentation(self):
        self.assertEqual(repr(Unset), "Unset")

    def testCopyPreservesIdentity(self):
        self.assertIs(copy.copy(Unset), Unset)
        self.assertIs(copy.deepcopy(Unset), Unset)
        self.assertIs(pickle.loads(pickle.dumps(Unset)), Unset)

    def testFinal(self):
        with self.assertRaises(TypeError):
            type("Derived", (UnsetType,), {})


class TestHelpers(TestCase):

    def testCoalesce(self):
        self.assertEqual(coalesce(Unset, "--"), "--")
        self.assertEqual(coalesce("-", "--"), "-")
        self.assertIsNone(coalesce(None, "--"))
        self.assertIsNone(coalesce(Unset))

    def testRename(self):
        @rename("resolve")
        def function():
            pass

        self.assertEqual(function.__name__, "resolve")
        self.assertEqual(function.__qualname__, "resolve")

    def testRenameArity(self):
        with self.assertRaises(TypeError):
            rename()

    def testMirrorReturnsCopies(self):
        class Holder:
            aliases = mirror("aliases")

            def __init__(self):
                self._aliases = ["f", "F"]

        holder = Holder()
        self.assertEqual(holder.aliases, ("f", "F"))
        with self.assertRaises(AttributeError):
            holder.aliases = ()


if __name__ == "__main__":
    unittest.main()
