"""Tests for the terrain session and configuration."""
import tempfile
import unittest
from pathlib import Path

from formulaterrain.config import TerrainConfig, get_preset, list_presets, FORMULA_PRESETS
from formulaterrain.expression import CompileError
from formulaterrain.session import TerrainSession


class TestTerrainSession(unittest.TestCase):

    def setUp(self):
        self.session = TerrainSession(TerrainConfig(window_size=4, layer_count=2, seed=21))
        self.frames = []
        self.session.add_listener(self.frames.append)

    def test_set_formula_renders(self):
        frame = self.session.set_formula("x + z")
        self.assertEqual(len(frame.voxels), 4 * 4 * 2)
        self.assertEqual(self.session.formula, "x + z")
        self.assertEqual(self.frames, [frame])

    def test_rejected_formula_keeps_last_good_state(self):
        frame = self.session.set_formula("x + z")
        with self.assertRaises(CompileError):
            self.session.set_formula("x +")
        self.assertEqual(self.session.formula, "x + z")
        self.assertIs(self.session.frame, frame)
        self.assertEqual(len(self.frames), 1)

    def test_update_respects_hysteresis(self):
        self.session.set_formula("x")
        self.assertIsNone(self.session.update(1, 1))
        self.assertIsNotNone(self.session.update(5, 0))
        self.assertEqual(self.session.frame.center, (5, 0))

    def test_recenter_forces_refresh_at_origin(self):
        self.session.set_formula("x")
        self.session.update(10, 10)
        frame = self.session.recenter()
        self.assertEqual(frame.center, (0, 0))

    def test_formula_change_renders_at_reference(self):
        self.session.set_formula("x")
        self.session.update(7, 3)
        frame = self.session.set_formula("z")
        self.assertEqual(frame.center, (7, 3))

    def test_randomize(self):
        generated = self.session.randomize()
        self.assertEqual(self.session.formula, generated.formula)
        self.assertIs(self.session.generated, generated)
        self.assertIsNotNone(self.session.frame)

    def test_randomize_is_reproducible_with_seed(self):
        other = TerrainSession(TerrainConfig(window_size=4, layer_count=2, seed=21))
        a = self.session.randomize()
        b = other.randomize()
        self.assertEqual(a, b)
        self.assertEqual(self.session.frame.columns, other.frame.columns)

    def test_realistic_only(self):
        session = TerrainSession(TerrainConfig(window_size=2, realistic_only=True, seed=1))
        self.assertEqual(session.randomize().theme, "Realistic")

    def test_no_formula_means_no_frames(self):
        session = TerrainSession(TerrainConfig(window_size=2))
        self.assertIsNone(session.update(100, 100))
        self.assertIsNone(session.frame)


class TestTerrainConfig(unittest.TestCase):

    def test_validate(self):
        TerrainConfig().validate()
        with self.assertRaises(ValueError):
            TerrainConfig(window_size=0).validate()
        with self.assertRaises(ValueError):
            TerrainConfig(under_layer_shade=1.5).validate()

    def test_save_and_load(self):
        config = TerrainConfig(window_size=64, layer_count=3, seed=5, realistic_only=True)
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "terrain.json"
            config.save(path)
            self.assertEqual(TerrainConfig.load(path), config)

    def test_window_config(self):
        window = TerrainConfig(window_size=10, hysteresis=3).window_config()
        self.assertEqual(window.size, 10)
        self.assertEqual(window.hysteresis, 3)

    def test_presets(self):
        self.assertEqual(get_preset("Rolling-Hills"), FORMULA_PRESETS["rolling_hills"])
        self.assertIsNone(get_preset("missing"))
        self.assertIn("pyramid", list_presets())

    def test_presets_compile(self):
        session = TerrainSession(TerrainConfig(window_size=2))
        for name in list_presets():
            with self.subTest(name=name):
                session.set_formula(get_preset(name))


if __name__ == "__main__":
    unittest.main()
