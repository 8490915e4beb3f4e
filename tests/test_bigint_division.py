from __future__ import annotations

import random
import unittest

from wideint import BigInt, DivisionByZeroError
from wideint.division import approximate_quotient, correction_step


def _trunc_div(a: int, b: int) -> int:
    q = abs(a) // abs(b)
    return q if (a < 0) == (b < 0) else -q


class DivisionEngineTests(unittest.TestCase):
    def test_correction_step_is_one_below_2_pow_48(self) -> None:
        self.assertEqual(correction_step(0.5), 1.0)
        self.assertEqual(correction_step(1.0), 1.0)
        self.assertEqual(correction_step(12345.0), 1.0)
        self.assertEqual(correction_step(2.0**47), 1.0)

    def test_correction_step_grows_with_the_estimate(self) -> None:
        self.assertEqual(correction_step(1.5 * 2.0**59), 2.0**12)
        self.assertEqual(correction_step(2.0**60 + 2.0**40), 2.0**13)
        self.assertEqual(correction_step(1.5 * 2.0**100), 2.0**53)

    def test_approximate_quotient_on_positive_operands(self) -> None:
        cases = [(7, 2), (1, 3), (3, 3), ((1 << 100) + 12345, 97), ((1 << 200) - 1, (1 << 100) + 1)]
        for a, b in cases:
            with self.subTest(a=a, b=b):
                self.assertEqual(int(approximate_quotient(BigInt.from_int(a), BigInt.from_int(b))), a // b)


class BigIntDivisionTests(unittest.TestCase):
    def test_truncated_quotient_scenario(self) -> None:
        q = BigInt.from_int(-7).quotient(BigInt.from_int(2))
        self.assertEqual(q, -3)
        self.assertEqual(BigInt.from_int(-7).remainder(BigInt.from_int(2)), -1)

    def test_floored_division_scenario(self) -> None:
        self.assertEqual(BigInt.from_int(-7).divide_floor(BigInt.from_int(2)), -4)
        self.assertEqual(BigInt.from_int(-7).modulo_floor(BigInt.from_int(2)), 1)

    def test_sign_combinations(self) -> None:
        for a in (7, -7, 6, -6, 0):
            for b in (2, -2, 7, -7, 1, -1):
                x, y = BigInt.from_int(a), BigInt.from_int(b)
                with self.subTest(a=a, b=b):
                    self.assertEqual(int(x.quotient(y)), _trunc_div(a, b))
                    self.assertEqual(int(x.remainder(y)), a - _trunc_div(a, b) * b)
                    self.assertEqual(int(x.divide_floor(y)), a // b)
                    self.assertEqual(int(x.modulo_floor(y)), a % b)

    def test_random_operands_satisfy_division_identities(self) -> None:
        rng = random.Random(11)
        for _ in range(80):
            a = rng.getrandbits(rng.randint(1, 256)) * rng.choice((1, -1))
            b = rng.getrandbits(rng.randint(1, 160)) * rng.choice((1, -1))
            if b == 0:
                b = 3
            x, y = BigInt.from_int(a), BigInt.from_int(b)
            with self.subTest(a=a, b=b):
                q, r = x.quot_rem(y)
                self.assertEqual(int(q), _trunc_div(a, b))
                self.assertEqual(int(q.multiply(y).add(r)), a)
                self.assertLess(abs(int(r)), abs(b))
                self.assertTrue(r.is_zero() or r.is_negative() == x.is_negative())
                fq, fm = x.div_mod(y)
                self.assertEqual((int(fq), int(fm)), divmod(a, b))

    def test_operands_beyond_double_range(self) -> None:
        cases = [
            (3**1500, 7**300),
            (-(3**1500), 7**300),
            ((1 << 2100) + 1, (1 << 1050) - 3),
            ((1 << 1100) - 1, 12345),
            (5**1000, 5**999),
            ((1 << 1030), (1 << 1030) - 1),
        ]
        for a, b in cases:
            x, y = BigInt.from_int(a), BigInt.from_int(b)
            with self.subTest(a_bits=a.bit_length(), b_bits=b.bit_length()):
                q, r = x.quot_rem(y)
                self.assertEqual(int(q), _trunc_div(a, b))
                self.assertEqual(int(r), a - _trunc_div(a, b) * b)

    def test_dividend_smaller_than_divisor(self) -> None:
        self.assertEqual(BigInt.from_int(3).quotient(BigInt.from_int(1 << 80)), 0)
        self.assertEqual(BigInt.from_int(-3).divide_floor(BigInt.from_int(1 << 80)), -1)

    def test_division_by_zero_raises(self) -> None:
        x = BigInt.from_int(5)
        for op in (x.quotient, x.remainder, x.divide_floor, x.modulo_floor, x.quot_rem, x.div_mod):
            with self.subTest(op=op.__name__):
                with self.assertRaises(DivisionByZeroError):
                    op(BigInt.ZERO)
        with self.assertRaises(ZeroDivisionError):
            x // 0

    def test_quotient_logs_pass_count_at_debug(self) -> None:
        with self.assertLogs("wideint.division", level="DEBUG") as captured:
            BigInt.from_int(1 << 90).quotient(BigInt.from_int(3))
        self.assertTrue(any("converged" in line for line in captured.output))


if __name__ == "__main__":
    unittest.main()
