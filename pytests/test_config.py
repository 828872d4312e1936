"""Tests for JSON config loading."""

import json

import pytest

from magic_header import config
from magic_header.blend import BlendMode, ProcessOptions


def test_missing_default_config_is_empty(tmp_path, monkeypatch):
    monkeypatch.setattr(config, "DEFAULT_CONFIG_FILE", tmp_path / "magic_header.json")
    assert config.load_config() == {}


def test_default_config_file_used(tmp_path, monkeypatch):
    path = tmp_path / "magic_header.json"
    path.write_text(json.dumps({"mode": "interlaced"}), encoding="utf-8")
    monkeypatch.setattr(config, "DEFAULT_CONFIG_FILE", path)
    assert config.load_config() == {"mode": "interlaced"}


def test_explicit_missing_config_raises(tmp_path):
    with pytest.raises(FileNotFoundError, match="Config file not found"):
        config.load_config(tmp_path / "absent.json")


def test_unknown_keys_dropped(tmp_path, caplog):
    path = tmp_path / "cfg.json"
    path.write_text(json.dumps({"width": 900, "colour": "teal"}), encoding="utf-8")
    cfg = config.load_config(path)
    assert cfg == {"width": 900}
    assert "colour" in caplog.text


def test_non_object_rejected(tmp_path):
    path = tmp_path / "cfg.json"
    path.write_text("[1, 2, 3]", encoding="utf-8")
    with pytest.raises(ValueError, match="JSON object"):
        config.load_config(path)


def test_config_round_trip_into_options(tmp_path):
    path = tmp_path / "cfg.json"
    path.write_text(
        json.dumps(
            {
                "width": 600,
                "height": 200,
                "mode": "SCANLINES",
                "preserve_color": True,
                "alpha_min": 0.01,
                "alpha_max": 0.99,
                "alpha_byte_min": 2,
                "alpha_byte_max": 253,
                "resample": "bilinear",
                "band_rows": 16,
            }
        ),
        encoding="utf-8",
    )
    opts = ProcessOptions.from_config(config.load_config(path))
    assert (opts.width, opts.height) == (600, 200)
    assert opts.mode is BlendMode.SCANLINES
    assert opts.preserve_color is True
    assert (opts.bounds.alpha_min, opts.bounds.alpha_max) == (0.01, 0.99)
    assert (opts.bounds.byte_min, opts.bounds.byte_max) == (2, 253)
    assert opts.resample == "bilinear"
    assert opts.band_rows == 16
