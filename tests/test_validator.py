"""
Frame Validator Tests
=====================

Tests for response part filtering and frame numbering.
"""

import pytest


class TestFrameValidator:
    """Tests for FrameValidator.validate()."""

    def test_keeps_image_parts_in_order(self, image_parts, frame_pngs):
        """Verify accepted frames keep response order and are numbered 1..N."""
        from doodle_animator.frames.validator import FrameValidator

        result = FrameValidator().validate(image_parts)

        assert result.count == 5
        assert [frame.index for frame in result.frames] == [1, 2, 3, 4, 5]
        assert [frame.data for frame in result.frames] == list(frame_pngs)

    def test_skips_text_parts(self, response_parts):
        """Verify text parts are not frames and do not shift numbering."""
        from doodle_animator.frames.validator import FrameValidator

        validator = FrameValidator()
        result = validator.validate(response_parts)

        assert result.count == 5
        assert result.rejected == 1
        assert result.frames[0].index == 1
        assert validator.metrics.text_parts == 1

    def test_skips_malformed_parts(self, png_factory):
        """Verify empty payloads and non-image types are skipped."""
        from doodle_animator.frames.validator import FrameValidator
        from doodle_animator.models.parts import ImagePart

        parts = [
            ImagePart(mime_type="image/png", data=b""),
            ImagePart(mime_type="text/plain", data=b"hello"),
            ImagePart(mime_type="", data=b"abc"),
            ImagePart(mime_type="image/png", data=png_factory((1, 2, 3))),
        ]

        validator = FrameValidator()
        result = validator.validate(parts)

        assert result.count == 1
        assert result.rejected == 3
        assert result.frames[0].index == 1
        assert validator.metrics.malformed_parts == 3

    def test_metrics_accumulate(self, response_parts):
        """Verify counters accumulate across calls."""
        from doodle_animator.frames.validator import FrameValidator

        validator = FrameValidator()
        validator.validate(response_parts)
        validator.validate(response_parts)

        metrics = validator.metrics.to_dict()
        assert metrics["parts_seen"] == 12
        assert metrics["frames_accepted"] == 10

    def test_empty_response(self):
        """Verify an empty response yields no frames."""
        from doodle_animator.frames.validator import FrameValidator

        result = FrameValidator().validate([])
        assert result.count == 0
        assert result.rejected == 0


class TestValidationResult:
    """Tests for the minimum-frame policy."""

    def test_require_passes_with_enough_frames(self, image_parts):
        """Verify require() returns the frames."""
        from doodle_animator.frames.validator import FrameValidator

        frames = FrameValidator().validate(image_parts[:2]).require()
        assert len(frames) == 2

    def test_require_reports_observed_count(self, image_parts):
        """Verify a single frame is not enough for an animation."""
        from doodle_animator.errors import InsufficientFrames
        from doodle_animator.frames.validator import FrameValidator
        from doodle_animator.models.failure_codes import FailureCode

        with pytest.raises(InsufficientFrames) as exc_info:
            FrameValidator().validate(image_parts[:1]).require()

        assert exc_info.value.count == 1
        assert exc_info.value.code == FailureCode.INSUFFICIENT_FRAMES

    def test_require_custom_minimum(self, image_parts):
        """Verify the minimum is configurable."""
        from doodle_animator.errors import InsufficientFrames
        from doodle_animator.frames.validator import FrameValidator

        with pytest.raises(InsufficientFrames):
            FrameValidator().validate(image_parts).require(6)


class TestValidatedFrame:
    """Tests for ValidatedFrame invariants."""

    def test_rejects_zero_index(self):
        """Verify indexes are 1-based."""
        from doodle_animator.frames.frame import ValidatedFrame

        with pytest.raises(ValueError):
            ValidatedFrame(index=0, data=b"x", mime_type="image/png")

    def test_rejects_non_image_type(self):
        """Verify only image types are accepted."""
        from doodle_animator.frames.frame import ValidatedFrame

        with pytest.raises(ValueError):
            ValidatedFrame(index=1, data=b"x", mime_type="text/plain")

    def test_repr_hides_payload(self):
        """Verify repr does not dump bytes."""
        from doodle_animator.frames.frame import ValidatedFrame

        frame = ValidatedFrame(index=2, data=b"\x00" * 100, mime_type="image/png")
        assert "size=100" in repr(frame)
        assert "\\x00" not in repr(frame)
