from __future__ import annotations

import json
from pathlib import Path
import tempfile
import unittest

from PIL import Image

from eventline import StyleError, TimelineStyle, validate_style
from eventline.cli import main
from eventline.errors import ConfigError
from eventline.io import load_dataset, load_options
from eventline.style import hex_to_rgba


EXAMPLE_DIR = Path(__file__).resolve().parents[1] / "examples" / "timeline"

DATASET = {
    "metrics": ["Coverage"],
    "data": [[{"x": 0, "y": 10}, {"x": 10, "y": 20}, {"x": 20, "y": 15}]],
    "snapshots": [{"sid": 1, "d": "A"}, {"sid": 2, "d": "B"}, {"sid": 3, "d": "C"}],
    "events": [{"sid": 2, "d": 10, "l": [{"n": "X"}]}],
}


class StyleTests(unittest.TestCase):
    def test_hex_colors_convert_to_rgba(self) -> None:
        self.assertEqual(hex_to_rgba("#CAE3F2"), (202, 227, 242, 255))
        self.assertEqual(hex_to_rgba("#00000080"), (0, 0, 0, 128))

    def test_overrides_merge_onto_defaults(self) -> None:
        style = validate_style({"event_fill": "#112233", "series_palette": ["#000000"], "font_size_px": 12})
        self.assertEqual(style.rgba("event_fill"), (17, 34, 51, 255))
        self.assertEqual(style.series_color(3), (0, 0, 0, 255))
        self.assertEqual(style.font_size_px, 12.0)
        self.assertEqual(style.border, TimelineStyle().border)

    def test_unknown_or_malformed_tokens_rejected(self) -> None:
        with self.assertRaises(StyleError):
            validate_style({"glow": "#FFFFFF"})
        with self.assertRaises(StyleError):
            validate_style({"border": "grey"})
        with self.assertRaises(StyleError):
            validate_style({"line_width": 0})
        with self.assertRaises(StyleError):
            validate_style({"series_palette": []})


class LoaderTests(unittest.TestCase):
    def test_example_files_load(self) -> None:
        dataset = load_dataset(EXAMPLE_DIR / "dataset.json")
        self.assertEqual(len(dataset["data"]), len(dataset["metrics"]))
        options = load_options(EXAMPLE_DIR / "options.toml")
        self.assertEqual(options.height, 120)
        self.assertEqual(options.width, 820)

    def test_dataset_errors_are_config_errors(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            bad = Path(tmp) / "bad.json"
            bad.write_text("{not json", encoding="utf-8")
            with self.assertRaises(ConfigError):
                load_dataset(bad)
            missing = Path(tmp) / "missing.json"
            missing.write_text(json.dumps({"data": []}), encoding="utf-8")
            with self.assertRaises(ConfigError):
                load_dataset(missing)
            with self.assertRaises(ConfigError):
                load_dataset(Path(tmp) / "absent.json")

    def test_option_errors_are_config_errors(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            opts = Path(tmp) / "opts.toml"
            opts.write_text("[timeline]\nheight = -3\n", encoding="utf-8")
            with self.assertRaises(ConfigError):
                load_options(opts)
            opts.write_text('[style]\nborder = "grey"\n', encoding="utf-8")
            with self.assertRaises(ConfigError):
                load_options(opts)


class CliTests(unittest.TestCase):
    def test_render_writes_png(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            dataset = Path(tmp) / "dataset.json"
            dataset.write_text(json.dumps(DATASET), encoding="utf-8")
            out = Path(tmp) / "chart.png"
            code = main(["render", str(dataset), "--out", str(out), "--width", "400", "--pointer-x", "190"])
            self.assertEqual(code, 0)
            with Image.open(out) as img:
                self.assertEqual(img.size, (380, 145))

    def test_render_example_with_options(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            out = Path(tmp) / "example.png"
            code = main(
                [
                    "render",
                    str(EXAMPLE_DIR / "dataset.json"),
                    "--config",
                    str(EXAMPLE_DIR / "options.toml"),
                    "--out",
                    str(out),
                    "--leave",
                ]
            )
            self.assertEqual(code, 0)
            with Image.open(out) as img:
                self.assertEqual(img.size, (800, 120 + 40 + 25))

    def test_explicit_zero_size_is_rejected(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            dataset = Path(tmp) / "dataset.json"
            dataset.write_text(json.dumps(DATASET), encoding="utf-8")
            out = Path(tmp) / "x.png"
            for flag in ("--width", "--height"):
                with self.assertLogs("eventline", level="ERROR"):
                    code = main(
                        ["render", str(dataset), "--config", str(EXAMPLE_DIR / "options.toml"), "--out", str(out), flag, "0"]
                    )
                self.assertEqual(code, 2)
            self.assertFalse(out.exists())

    def test_invalid_dataset_exits_with_error_code(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            dataset = Path(tmp) / "dataset.json"
            broken = dict(DATASET, metrics=["a", "b"])
            dataset.write_text(json.dumps(broken), encoding="utf-8")
            with self.assertLogs("eventline", level="ERROR"):
                code = main(["render", str(dataset), "--out", str(Path(tmp) / "x.png")])
            self.assertEqual(code, 2)


if __name__ == "__main__":
    unittest.main()
