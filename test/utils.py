"""
Tests for the utils module.

This module verifies the helpers shared by the codec, the flag set and the builder:
- The Unset sentinel: singleton identity, falsy semantics, representation,
  copy/pickle identity and finality.
- coalesce(): only Unset is replaced.
- ordinal(): word labels, numeric suffixes and the teens.
"""
import copy
import pickle
import unittest
from unittest import TestCase

from fluentflag.utils import *


class UnsetTest(TestCase):
    """
    Test suite for the `UnsetType` singleton.
    """

    def testSingleton(self) -> None:
        self.assertIs(UnsetType(), UnsetType())
        self.assertIs(Unset, UnsetType())

    def testFalsyButDistinct(self) -> None:
        """
        The sentinel is falsy without being equal to other falsy values.
        """
        self.assertFalse(bool(Unset))
        self.assertNotEqual(Unset, None)
        self.assertNotEqual(Unset, 0)
        self.assertNotEqual(Unset, "")

    def testRepr(self) -> None:
        self.assertEqual(repr(Unset), "Unset")
        self.assertEqual(str(Unset), "Unset")

    def testUnion(self) -> None:
        """
        str | Unset builds the same union as str | UnsetType, from either side.
        """
        self.assertEqual(str | Unset, str | UnsetType)
        self.assertEqual(Unset | str, str | UnsetType)
        self.assertIsInstance("message", str | Unset)
        self.assertIsInstance(Unset, str | Unset)
        self.assertNotIsInstance(1, str | Unset)

    def testCopyAndPicklePreserveSingleton(self) -> None:
        self.assertIs(copy.copy(Unset), Unset)
        self.assertIs(copy.deepcopy(Unset), Unset)
        self.assertIs(pickle.loads(pickle.dumps(Unset)), Unset)

    def testFinalClass(self) -> None:
        """
        The class is final: attempts to subclass must fail with TypeError.
        """
        with self.assertRaises(TypeError):
            type("UnsetType", (UnsetType,), {})


class CoalesceTest(TestCase):

    def testReplacesUnset(self) -> None:
        self.assertEqual(coalesce(Unset, 7), 7)
        self.assertIsNone(coalesce(Unset))

    def testKeepsFalseyValues(self) -> None:
        for value in (None, 0, "", False, []):
            self.assertIs(coalesce(value, "fallback"), value)


class OrdinalTest(TestCase):

    def testWords(self) -> None:
        self.assertEqual(ordinal(1), "first")
        self.assertEqual(ordinal(10), "tenth")

    def testSuffixes(self) -> None:
        cases = [(11, "11th"), (12, "12th"), (13, "13th"), (21, "21st"), (22, "22nd"), (23, "23rd"), (111, "111th"), (0, "0th")]
        for number, label in cases:
            self.assertEqual(ordinal(number), label)


if __name__ == '__main__':
    unittest.main()
