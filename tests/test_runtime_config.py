import pathlib
import sys
import tempfile
import unittest

# Ensure src/ is on path for direct test execution
ROOT = pathlib.Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from scrollspec.config.runtime import (  # noqa: E402
    SpectrogramConfig,
    config_from_mapping,
    load_config,
)


class SpectrogramConfigTest(unittest.TestCase):
    def test_defaults(self):
        cfg = SpectrogramConfig().sanitized()
        self.assertEqual(cfg.sample_rate, 48000.0)
        self.assertEqual(cfg.total_bins, 1024)
        self.assertEqual(cfg.nyquist_hz, 24000.0)
        self.assertEqual(cfg.initial_scale_mode, "linear")
        self.assertEqual(cfg.initial_scroll_speed, 2)
        self.assertEqual(cfg.grid_step, 50)
        self.assertEqual(cfg.grid_color, (204, 204, 204))

    def test_sanitized_clamps_cosmetic_values(self):
        cfg = SpectrogramConfig(
            smoothing=1.5,
            freq_ticks=0,
            scale_width=-4,
            label_color="#fff",
            background="#102030",
            width=0,
        ).sanitized()
        self.assertEqual(cfg.smoothing, 0.99)
        self.assertEqual(cfg.freq_ticks, 1)
        self.assertEqual(cfg.scale_width, 0)
        self.assertEqual(cfg.label_color, (255, 255, 255))
        self.assertEqual(cfg.background, (16, 32, 48))
        self.assertEqual(cfg.width, 1)

    def test_scale_mode_aliases(self):
        cfg = SpectrogramConfig(initial_scale_mode="Logarithmic").sanitized()
        self.assertEqual(cfg.initial_scale_mode, "log")

    def test_invalid_values_raise(self):
        bad = [
            {"fft_size": 1000},
            {"fft_size": 16},
            {"sample_rate": 0},
            {"frame_rate": -1},
            {"min_decibels": -20, "max_decibels": -30},
            {"initial_scroll_speed": 0},
            {"initial_scale_mode": "mel"},
            {"grid_color": "#12"},
        ]
        for overrides in bad:
            with self.subTest(overrides=overrides):
                with self.assertRaises(ValueError):
                    SpectrogramConfig(**overrides).sanitized()

    def test_mapping_with_nested_block(self):
        cfg = config_from_mapping(
            {"spectrogram": {"fft_size": 1024, "initial_scroll_speed": 5}, "unknown": 1}
        )
        self.assertEqual(cfg.total_bins, 512)
        self.assertEqual(cfg.initial_scroll_speed, 5)

    def test_empty_mapping_gives_defaults(self):
        self.assertEqual(config_from_mapping(None), SpectrogramConfig().sanitized())
        self.assertEqual(config_from_mapping({}), SpectrogramConfig().sanitized())

    def test_load_yaml_file(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = pathlib.Path(tmpdir) / "spectrogram.yaml"
            path.write_text(
                "spectrogram:\n"
                "  sample_rate: 44100\n"
                "  initial_scale_mode: log\n"
                "  grid_step: 0\n"
                "  label_color: [200, 200, 200]\n",
                encoding="utf-8",
            )
            cfg = load_config(path)
        self.assertEqual(cfg.sample_rate, 44100.0)
        self.assertEqual(cfg.nyquist_hz, 22050.0)
        self.assertEqual(cfg.initial_scale_mode, "log")
        self.assertEqual(cfg.grid_step, 0)
        self.assertEqual(cfg.label_color, (200, 200, 200))

    def test_missing_file_gives_defaults(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            cfg = load_config(pathlib.Path(tmpdir) / "absent.yaml")
        self.assertEqual(cfg, SpectrogramConfig().sanitized())
        self.assertEqual(load_config(None), SpectrogramConfig().sanitized())

    def test_non_mapping_document_rejected(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = pathlib.Path(tmpdir) / "list.yaml"
            path.write_text("- 1\n- 2\n", encoding="utf-8")
            with self.assertRaises(ValueError):
                load_config(path)


if __name__ == "__main__":
    unittest.main()
