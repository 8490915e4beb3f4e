from __future__ import annotations

import random
import unittest

from wideint import BigInt


def _samples(seed: int, count: int, bits: int) -> list[int]:
    rng = random.Random(seed)
    out = [0, 1, -1, 2, -2, (1 << 31) - 1, -(1 << 31), 1 << 31, (1 << 32) - 1, 1 << 32, -(1 << 32), (1 << 24) - 1, 1 << 24]
    for _ in range(count):
        width = rng.randint(1, bits)
        value = rng.getrandbits(width)
        out.append(-value if rng.random() < 0.5 else value)
    return out


class BigIntConstructionTests(unittest.TestCase):
    def test_from_int_round_trips_through_int(self) -> None:
        for value in _samples(1, 60, 300):
            with self.subTest(value=value):
                self.assertEqual(int(BigInt.from_int(value)), value)

    def test_canonical_form_is_unique(self) -> None:
        self.assertEqual(BigInt.from_words([5, 0, 0]).words, (5,))
        self.assertEqual(BigInt.from_words([-1, -1]).words, ())
        self.assertEqual(BigInt.from_words([-1, -1]).sign, -1)
        self.assertEqual(BigInt.from_words([0xFFFFFFFF, 0]), 0xFFFFFFFF)
        self.assertEqual(BigInt.from_raw([0xFFFFFFFF], 0), 0xFFFFFFFF)
        self.assertEqual(BigInt.from_raw([], -1), -1)
        self.assertEqual(BigInt.ZERO.words, ())
        self.assertEqual(BigInt.ZERO.sign, 0)

    def test_non_canonical_direct_construction_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            BigInt((5, 0), 0)
        with self.assertRaises(ValueError):
            BigInt((), 1)

    def test_words_are_stored_as_a_tuple(self) -> None:
        value = BigInt([5], 0)
        self.assertIsInstance(value.words, tuple)
        self.assertEqual(value, 5)
        self.assertEqual(value, BigInt.from_int(5))
        self.assertEqual(hash(value), hash(BigInt.from_int(5)))

    def test_from_float_truncates_toward_zero(self) -> None:
        cases = [0.0, -0.0, 0.5, -0.5, 1.9, -1.9, 4294967296.5, -4294967297.75, 1e20, -1e20, 2.0**100, 1e300]
        for value in cases:
            with self.subTest(value=value):
                self.assertEqual(int(BigInt.from_float(value)), int(value))

    def test_from_float_non_finite_maps_to_zero(self) -> None:
        for value in (float("nan"), float("inf"), float("-inf")):
            with self.subTest(value=value):
                self.assertTrue(BigInt.from_float(value).is_zero())

    def test_constants(self) -> None:
        self.assertEqual(BigInt.ZERO, 0)
        self.assertEqual(BigInt.ONE, 1)
        self.assertEqual(BigInt.NEG_ONE, -1)
        self.assertEqual(BigInt.TWO_PWR_24, 1 << 24)


class BigIntArithmeticTests(unittest.TestCase):
    def test_add_subtract_negate_match_python(self) -> None:
        values = _samples(2, 40, 200)
        rng = random.Random(3)
        for _ in range(150):
            a = rng.choice(values)
            b = rng.choice(values)
            x, y = BigInt.from_int(a), BigInt.from_int(b)
            with self.subTest(a=a, b=b):
                self.assertEqual(int(x.add(y)), a + b)
                self.assertEqual(int(x.subtract(y)), a - b)
                self.assertEqual(int(x.negate()), -a)

    def test_multiply_matches_python(self) -> None:
        values = _samples(4, 40, 256)
        rng = random.Random(5)
        for _ in range(120):
            a = rng.choice(values)
            b = rng.choice(values)
            with self.subTest(a=a, b=b):
                self.assertEqual(int(BigInt.from_int(a).multiply(BigInt.from_int(b))), a * b)

    def test_multiply_carry_heavy_operands(self) -> None:
        ones = (1 << 256) - 1
        for a, b in [(ones, ones), (ones, -ones), ((1 << 64) - 1, (1 << 96) - 1), (0xFFFF_FFFF, 0xFFFF_FFFF)]:
            with self.subTest(a=a, b=b):
                self.assertEqual(int(BigInt.from_int(a) * BigInt.from_int(b)), a * b)

    def test_multiply_fast_path_boundary(self) -> None:
        edge = (1 << 24) - 1
        for a, b in [(edge, edge), (edge, 1 << 24), (1 << 24, 1 << 24), (-edge, edge)]:
            with self.subTest(a=a, b=b):
                self.assertEqual(int(BigInt.from_int(a).multiply(BigInt.from_int(b))), a * b)

    def test_multiply_by_zero_short_circuits(self) -> None:
        big = BigInt.from_int(1 << 200)
        self.assertIs(big.multiply(BigInt.ZERO), BigInt.ZERO)
        self.assertIs(BigInt.ZERO.multiply(big), BigInt.ZERO)

    def test_power_of_two_scenario(self) -> None:
        value = BigInt.from_string("340282366920938463463374607431768211456")
        self.assertEqual(value.multiply(BigInt.from_int(2)).to_string(), "680564733841876926926749214863536422912")

    def test_add_carries_across_word_boundaries(self) -> None:
        cases = [((1 << 32) - 1, 1), ((1 << 64) - 1, 1), (-(1 << 64), -1), (-1, 1), (1 << 95, -(1 << 95))]
        for a, b in cases:
            with self.subTest(a=a, b=b):
                self.assertEqual(int(BigInt.from_int(a) + BigInt.from_int(b)), a + b)

    def test_absolute_and_signum(self) -> None:
        for value in (0, 5, -5, 1 << 100, -(1 << 100)):
            with self.subTest(value=value):
                x = BigInt.from_int(value)
                self.assertEqual(int(x.absolute()), abs(value))
                self.assertEqual(int(x.signum()), (value > 0) - (value < 0))

    def test_predicates(self) -> None:
        self.assertTrue(BigInt.ZERO.is_zero())
        self.assertFalse(BigInt.NEG_ONE.is_zero())
        self.assertTrue(BigInt.from_int(-3).is_negative())
        self.assertTrue(BigInt.from_int(-3).is_odd())
        self.assertTrue(BigInt.NEG_ONE.is_odd())
        self.assertFalse(BigInt.from_int(1 << 40).is_odd())
        for value in (0, 1, 255, 1 << 31, (1 << 64) - 1, -(1 << 64), -1):
            with self.subTest(value=value):
                self.assertEqual(BigInt.from_int(value).bit_length(), abs(value).bit_length())


class BigIntComparisonTests(unittest.TestCase):
    def test_compare_matches_python_ordering(self) -> None:
        values = _samples(6, 25, 160)
        for a in values[:20]:
            for b in values[:20]:
                x, y = BigInt.from_int(a), BigInt.from_int(b)
                with self.subTest(a=a, b=b):
                    self.assertEqual(x.compare(y), (a > b) - (a < b))
                    self.assertEqual(x.equals(y), a == b)
                    self.assertEqual(x.not_equals(y), a != b)
                    self.assertEqual(x.less_than(y), a < b)
                    self.assertEqual(x.less_or_equal(y), a <= b)
                    self.assertEqual(x.greater_than(y), a > b)
                    self.assertEqual(x.greater_or_equal(y), a >= b)

    def test_compare_int(self) -> None:
        self.assertEqual(BigInt.from_int(10).compare_int(3), 1)
        self.assertEqual(BigInt.from_int(-10).compare_int(3), -1)
        self.assertEqual(BigInt.from_int(1 << 70).compare_int(1 << 70), 0)

    def test_python_operators_and_hashing(self) -> None:
        x = BigInt.from_int(-7)
        y = BigInt.from_int(2)
        self.assertEqual(x + y, -5)
        self.assertEqual(x - y, -9)
        self.assertEqual(x * y, -14)
        self.assertEqual(x // y, -4)
        self.assertEqual(x % y, 1)
        self.assertEqual(divmod(x, y), (BigInt.from_int(-4), BigInt.from_int(1)))
        self.assertEqual(3 - y, 1)
        self.assertEqual(-x, 7)
        self.assertEqual(abs(x), 7)
        self.assertEqual(~y, -3)
        self.assertLess(x, y)
        self.assertGreater(y, x)
        self.assertEqual(hash(BigInt.from_int(1 << 80)), hash(1 << 80))
        self.assertEqual(len({BigInt.from_int(1 << 80), BigInt.from_int(1 << 80)}), 1)
        self.assertEqual([10, 20, 30][BigInt.from_int(1)], 20)
        self.assertFalse(BigInt.ZERO)
        self.assertTrue(BigInt.ONE)
        self.assertEqual(repr(BigInt.from_int(-12)), "BigInt(-12)")
        self.assertNotEqual(BigInt.ONE, "1")


if __name__ == "__main__":
    unittest.main()
