"""
Configuration Tests
===================

Tests for YAML loading and environment overrides.
"""

import pytest


class TestLoadConfig:
    """Tests for load_config()."""

    def test_defaults_without_file(self, tmp_path, monkeypatch):
        """Verify defaults apply when the file is missing."""
        from doodle_animator.config import load_config

        for name in ("API_KEY", "GEMINI_API_KEY", "PORT", "DOODLE_FRAME_RATE"):
            monkeypatch.delenv(name, raising=False)

        settings = load_config(str(tmp_path / "missing.yaml"))

        assert settings.animation.frame_rate_hz == 4.0
        assert settings.animation.width == 1024
        assert settings.animation.max_colors == 256
        assert settings.animation.color_format == "rgb444"
        assert settings.animation.skip_bad_frames is False
        assert settings.generation.api_key is None

    def test_yaml_values(self, tmp_path, monkeypatch):
        """Verify values are read from YAML."""
        from doodle_animator.config import load_config

        monkeypatch.delenv("DOODLE_FRAME_RATE", raising=False)
        path = tmp_path / "config.yaml"
        path.write_text("animation:\n  frame_rate_hz: 8\n  width: 256\n")

        settings = load_config(str(path))

        assert settings.animation.frame_rate_hz == 8
        assert settings.animation.width == 256
        assert settings.animation.height == 1024

    def test_env_overrides_yaml(self, tmp_path, monkeypatch):
        """Verify environment variables win over the file."""
        from doodle_animator.config import load_config

        path = tmp_path / "config.yaml"
        path.write_text("animation:\n  frame_rate_hz: 8\n")
        monkeypatch.setenv("DOODLE_FRAME_RATE", "2")
        monkeypatch.setenv("DOODLE_CANVAS_SIZE", "512")
        monkeypatch.setenv("DOODLE_SKIP_BAD_FRAMES", "true")
        monkeypatch.setenv("API_KEY", "secret")

        settings = load_config(str(path))

        assert settings.animation.frame_rate_hz == 2
        assert settings.animation.width == 512
        assert settings.animation.height == 512
        assert settings.animation.skip_bad_frames is True
        assert settings.generation.api_key == "secret"

    def test_invalid_values_rejected(self, tmp_path, monkeypatch):
        """Verify out-of-range values fail validation."""
        from pydantic import ValidationError

        from doodle_animator.config import load_config

        monkeypatch.delenv("DOODLE_COLOR_FORMAT", raising=False)
        path = tmp_path / "config.yaml"
        path.write_text("animation:\n  color_format: rgb888\n")

        with pytest.raises(ValidationError):
            load_config(str(path))
