import unittest

from errors import InvalidConfiguration
from utilities import (
    Alpha26,
    LEGACY_REFLECTORS,
    LEGACY_ROTORS,
    cycles_from_wiring,
    format_message,
    legacy_config,
    preprocess_message,
)


class TestUtilities(unittest.TestCase):
    def test_format_message(self) -> None:
        self.assertEqual(format_message("ABCDEFGHIJKL"), "ABCDE FGHIJ KL")
        self.assertEqual(format_message("ABCDE"), "ABCDE")
        self.assertEqual(format_message("AB CD EF"), "ABCDE F")
        self.assertEqual(format_message(""), "")
        self.assertEqual(format_message("ABCDEFG", block=3), "ABC DEF G")
        with self.assertRaises(InvalidConfiguration):
            format_message("ABC", block=0)

    def test_preprocess_message(self) -> None:
        self.assertEqual(preprocess_message("Hello, World!", Alpha26), "HELLO WORLD")
        self.assertEqual(preprocess_message("ab-c", "abc"), "abc")

    def test_cycles_from_wiring(self) -> None:
        self.assertEqual(
            cycles_from_wiring("EKMFLGDQVZNTOWYHXUSPAIBRCJ", Alpha26),
            "(AELTPHQXRU) (BKNW) (CMOY) (DFG) (IV) (JZ) (S)",
        )
        self.assertEqual(cycles_from_wiring("BADC", "ABCD"), "(AB) (CD)")
        with self.assertRaises(InvalidConfiguration):
            cycles_from_wiring("AABC", "ABCD")

    def test_wheel_database(self) -> None:
        for name, kind, wiring in LEGACY_ROTORS + LEGACY_REFLECTORS:
            with self.subTest(name=name):
                self.assertEqual(sorted(wiring), sorted(Alpha26))
                self.assertIn(kind[0], "MNR")
        # reflectors pair symbols up without fixed points
        for name, _, wiring in LEGACY_REFLECTORS:
            groups = cycles_from_wiring(wiring, Alpha26).split()
            self.assertTrue(all(len(g) == 4 for g in groups), name)
        self.assertEqual(
            [name for name, _, _ in LEGACY_REFLECTORS],
            ["A", "B", "C", "B-THIN", "C-THIN"],
        )

    def test_legacy_config_header(self) -> None:
        lines = legacy_config(4, 3).splitlines()
        self.assertEqual(lines[0], Alpha26)
        self.assertEqual(lines[1], "4 3")
        self.assertTrue(lines[2].startswith("I MQ (AELTPHQXRU)"))


if __name__ == "__main__":
    unittest.main()
