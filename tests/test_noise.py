"""Tests for the hash field and the gradient noise field."""
import math
import unittest

from formulaterrain.noise import GradientNoiseField, HashField, hash_int, to_uint32


class TestHashField(unittest.TestCase):

    def test_hash_is_pure_and_in_unit_interval(self):
        pairs = [(0, 0), (1, 0), (0, 1), (-1, -1), (123456, -987654), (2**31 - 1, -2**31)]
        for a, b in pairs:
            first = hash_int(a, b)
            self.assertEqual(first, hash_int(a, b))
            self.assertGreaterEqual(first, 0.0)
            self.assertLess(first, 1.0)

    def test_known_value_at_origin(self):
        # FNV-1a style fold of two zero words
        h = 0x811C9DC5
        h = (h * 0x01000193) & 0xFFFFFFFF
        h = (h * 0x01000193) & 0xFFFFFFFF
        self.assertEqual(hash_int(0, 0), h / 2**32)

    def test_inputs_reduce_to_32_bits(self):
        self.assertEqual(hash_int(2**32 + 5, 7), hash_int(5, 7))
        self.assertEqual(hash_int(-1, 0), hash_int(0xFFFFFFFF, 0))

    def test_huge_coordinates_stay_distinct_and_stable(self):
        base = 10**15
        values = {hash_int(base + i, base) for i in range(16)}
        self.assertEqual(len(values), 16)
        self.assertEqual(hash_int(base, base), hash_int(base, base))

    def test_to_uint32_handles_reals_and_non_finite(self):
        self.assertEqual(to_uint32(3.9), 3)
        self.assertEqual(to_uint32(-3.9), to_uint32(-3))
        self.assertEqual(to_uint32(math.nan), 0)
        self.assertEqual(to_uint32(math.inf), 0)

    def test_scalar_at_quantizes_to_hundredths(self):
        field = HashField()
        self.assertEqual(field.scalar_at(1.234, 5.678), hash_int(123, 567))
        self.assertEqual(field.scalar_at(1.2341, 5.6789), field.scalar_at(1.2349, 5.6781))

    def test_normal_is_deterministic_and_shifted_by_mean(self):
        field = HashField()
        a = field.normal(10, 20)
        self.assertEqual(a, field.normal(10, 20))
        self.assertTrue(math.isfinite(a))
        self.assertAlmostEqual(field.normal(10, 20, mean=5.0, stdev=2.0), a * 2.0 + 5.0)

    def test_normal_clamps_zero_uniform_sample(self):
        field = HashField()
        # No column yields u == 0 in practice; the clamp only guards log(0)
        for x in range(-5, 5):
            self.assertTrue(math.isfinite(field.normal(x, -x)))


class TestGradientNoiseField(unittest.TestCase):

    def setUp(self):
        self.noise = GradientNoiseField(seed=1234)

    def test_permutation_table_is_duplicated_shuffle(self):
        perm = self.noise.perm
        self.assertEqual(len(perm), 512)
        self.assertEqual(sorted(perm[:256]), list(range(256)))
        self.assertEqual(perm[:256], perm[256:])

    def test_sample_is_deterministic_until_reseed(self):
        points = [(0.3, 0.7), (12.5, -3.25), (-100.1, 40.9)]
        first = [self.noise.sample(x, z) for x, z in points]
        second = [self.noise.sample(x, z) for x, z in points]
        self.assertEqual(first, second)

    def test_same_seed_gives_same_field(self):
        other = GradientNoiseField(seed=1234)
        self.assertEqual(self.noise.sample(3.3, 4.4), other.sample(3.3, 4.4))

    def test_reseed_changes_field(self):
        before = [self.noise.sample(i * 0.37, i * 0.91) for i in range(20)]
        self.noise.reseed(99)
        after = [self.noise.sample(i * 0.37, i * 0.91) for i in range(20)]
        self.assertNotEqual(before, after)

    def test_sample_is_continuous(self):
        for x, z in [(0.1, 0.2), (5.5, -2.25), (40.01, 17.3)]:
            base = self.noise.sample(x, z)
            self.assertLess(abs(self.noise.sample(x + 1e-6, z) - base), 1e-3)
            self.assertLess(abs(self.noise.sample(x, z + 1e-6) - base), 1e-3)

    def test_sample_range(self):
        for i in range(500):
            value = self.noise.sample(i * 0.173, i * -0.311)
            self.assertLessEqual(abs(value), 1.5)

    def test_lattice_origin_is_zero(self):
        self.assertEqual(self.noise.sample(0.0, 0.0), 0.0)

    def test_single_octave_equals_sample(self):
        for persistence in (0.1, 0.5, 0.9):
            self.assertEqual(
                self.noise.octaves(1.7, -2.3, 1, persistence),
                self.noise.sample(1.7, -2.3),
            )

    def test_octaves_are_normalized(self):
        for count in (2, 4, 8):
            for i in range(50):
                self.assertLessEqual(abs(self.noise.octaves(i * 0.21, i * 0.13, count, 0.5)), 1.5)

    def test_zero_octaves_fall_back_to_default(self):
        self.assertEqual(self.noise.octaves(2.5, 1.5, 0, 0), self.noise.octaves(2.5, 1.5, 4, 0.5))

    def test_nan_arguments_fall_back_to_default(self):
        expected = self.noise.octaves(2.5, 1.5, 4, 0.5)
        self.assertEqual(self.noise.octaves(2.5, 1.5, math.nan, 0.5), expected)
        self.assertEqual(self.noise.octaves(2.5, 1.5, 4, math.nan), expected)

    def test_fractional_octave_count_rounds_up(self):
        self.assertEqual(
            self.noise.octaves(0.37, 0.81, 2.5, 0.5),
            self.noise.octaves(0.37, 0.81, 3, 0.5),
        )
        self.assertNotEqual(
            self.noise.octaves(0.37, 0.81, 2.5, 0.5),
            self.noise.octaves(0.37, 0.81, 2, 0.5),
        )

    def test_negative_octave_count_sums_nothing(self):
        self.assertEqual(self.noise.octaves(0.37, 0.81, -3, 0.5), 0.0)

    def test_octave_count_is_capped(self):
        self.assertEqual(
            self.noise.octaves(0.37, 0.81, math.inf, 0.5),
            self.noise.octaves(0.37, 0.81, 1000, 0.5),
        )

    def test_far_coordinates_are_finite(self):
        value = self.noise.sample(1e12 + 0.5, -1e12 + 0.25)
        self.assertTrue(math.isfinite(value))


if __name__ == "__main__":
    unittest.main()
