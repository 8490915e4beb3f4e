from __future__ import annotations

import unittest

from wideint import BigInt, Fixed64, SmallValueCache, small_value_cache_stats
from wideint.cache import BIGINT_CACHE, SMALL_CACHE_MAX, SMALL_CACHE_MIN


class SmallValueCacheTests(unittest.TestCase):
    def test_in_range_values_are_shared(self) -> None:
        cache: SmallValueCache = SmallValueCache(-4, 4)
        first = BigInt.from_int(3, cache=cache)
        second = BigInt.from_int(3, cache=cache)
        self.assertIs(first, second)
        self.assertIn(3, cache)
        self.assertEqual(len(cache), 1)

    def test_out_of_range_values_bypass_the_table(self) -> None:
        cache: SmallValueCache = SmallValueCache(-4, 4)
        first = BigInt.from_int(4, cache=cache)
        second = BigInt.from_int(4, cache=cache)
        self.assertEqual(first, second)
        self.assertIsNot(first, second)
        self.assertEqual(len(cache), 0)
        self.assertFalse(cache.covers(-5))
        self.assertTrue(cache.covers(-4))

    def test_disabled_cache_always_builds(self) -> None:
        cache: SmallValueCache = SmallValueCache(-4, 4, enabled=False)
        self.assertIsNot(Fixed64.from_int(1, cache=cache), Fixed64.from_int(1, cache=cache))
        self.assertEqual(cache.stats()["misses"], 0)

    def test_empty_range_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            SmallValueCache(3, 3)

    def test_stats_count_hits_and_misses(self) -> None:
        cache: SmallValueCache = SmallValueCache(0, 8)
        for value in (1, 1, 1, 2):
            Fixed64.from_int(value, cache=cache)
        stats = cache.stats(reset=True)
        self.assertEqual(stats["hits"], 2)
        self.assertEqual(stats["misses"], 2)
        self.assertEqual(stats["size"], 2)
        self.assertAlmostEqual(stats["hit_rate"], 0.5)
        after = cache.stats()
        self.assertEqual((after["hits"], after["misses"], after["size"]), (0, 0, 2))
        cache.clear()
        self.assertEqual(len(cache), 0)

    def test_miss_is_logged_at_debug(self) -> None:
        cache: SmallValueCache = SmallValueCache(0, 8)
        with self.assertLogs("wideint.cache", level="DEBUG") as captured:
            BigInt.from_int(5, cache=cache)
        self.assertIn("miss for 5", captured.output[0])

    def test_default_bounds_cover_zero_and_one(self) -> None:
        self.assertLessEqual(SMALL_CACHE_MIN, 0)
        self.assertGreaterEqual(SMALL_CACHE_MAX, 2)

    @unittest.skipUnless(BIGINT_CACHE.enabled, "default small-value cache is disabled")
    def test_default_cache_returns_canonical_constants(self) -> None:
        self.assertIs(BigInt.from_int(0), BigInt.ZERO)
        self.assertIs(BigInt.from_int(1), BigInt.ONE)
        self.assertIs(Fixed64.from_int(1), Fixed64.ONE)

    def test_process_wide_stats_shape(self) -> None:
        BigInt.from_int(7)
        Fixed64.from_int(7)
        stats = small_value_cache_stats()
        for key in ("bigint", "fixed64", "hits", "misses", "size", "hit_rate"):
            self.assertIn(key, stats)
        self.assertEqual(stats["hits"], stats["bigint"]["hits"] + stats["fixed64"]["hits"])
        self.assertGreaterEqual(stats["hit_rate"], 0.0)
        self.assertLessEqual(stats["hit_rate"], 1.0)


if __name__ == "__main__":
    unittest.main()
