"""
Animation Stream Tests
======================

Tests for frame timing, the GIF container and the stream lifecycle.
"""

import io

import numpy as np
import pytest
from PIL import Image


def _palette():
    from doodle_animator.encoding.palette import Palette

    return Palette(colors=np.array([[0, 0, 0], [255, 255, 255]], dtype=np.uint8))


def _indices(value: int, size: int = 4) -> np.ndarray:
    return np.full((size, size), value, dtype=np.uint8)


class TestFrameTiming:
    """Tests for delay computation."""

    @pytest.mark.parametrize(
        "rate,expected",
        [(4, 250), (3, 333), (10, 100), (0.5, 2000), (200, 10), (1000, 10)],
    )
    def test_frame_delay_ms(self, rate, expected):
        """Verify round-half-up with the 10 ms floor."""
        from doodle_animator.encoding.stream import frame_delay_ms

        assert frame_delay_ms(rate) == expected

    @pytest.mark.parametrize("rate", [0, -1])
    def test_frame_delay_rejects_non_positive(self, rate):
        """Verify a playback rate must be positive."""
        from doodle_animator.encoding.stream import frame_delay_ms

        with pytest.raises(ValueError):
            frame_delay_ms(rate)

    @pytest.mark.parametrize(
        "delay_ms,expected",
        [(250, 25), (333, 33), (10, 1), (4, 1), (0, 1), (15, 2)],
    )
    def test_to_centiseconds(self, delay_ms, expected):
        """Verify conversion to hundredths never drops below 1."""
        from doodle_animator.encoding.stream import to_centiseconds

        assert to_centiseconds(delay_ms) == expected


class TestAnimationStream:
    """Tests for AnimationStream."""

    def test_finalize_writes_looping_gif(self):
        """Verify a looping GIF with every frame and the right delay."""
        from doodle_animator.encoding.stream import AnimationStream

        stream = AnimationStream(4, 4)
        for value in (0, 1, 0):
            stream.append_frame(_indices(value), 4, 4, _palette(), delay_ms=250)

        data = stream.finalize()

        assert data[:6] == b"GIF89a"
        with Image.open(io.BytesIO(data)) as image:
            assert image.n_frames == 3
            assert image.info["loop"] == 0
            assert image.info["duration"] == 250
            assert image.size == (4, 4)

    def test_identical_frames_are_kept(self):
        """Verify repeated frames each get their own block and delay."""
        from doodle_animator.encoding.stream import AnimationStream

        stream = AnimationStream(4, 4)
        for value in (0, 0, 1, 1, 0):
            stream.append_frame(_indices(value), 4, 4, _palette(), delay_ms=250)

        with Image.open(io.BytesIO(stream.finalize())) as image:
            assert image.n_frames == 5
            for position in range(5):
                image.seek(position)
                assert image.info["duration"] == 250

    def test_frame_colors_preserved(self):
        """Verify per-frame palettes survive encoding."""
        from doodle_animator.encoding.palette import Palette
        from doodle_animator.encoding.stream import AnimationStream

        red = Palette(colors=np.array([[255, 0, 0], [0, 0, 0]], dtype=np.uint8))
        blue = Palette(colors=np.array([[0, 0, 255], [0, 0, 0]], dtype=np.uint8))

        stream = AnimationStream(4, 4)
        stream.append_frame(_indices(0), 4, 4, red, delay_ms=100)
        stream.append_frame(_indices(0), 4, 4, blue, delay_ms=100)

        with Image.open(io.BytesIO(stream.finalize())) as image:
            assert image.convert("RGB").getpixel((0, 0)) == (255, 0, 0)
            image.seek(1)
            assert image.convert("RGB").getpixel((0, 0)) == (0, 0, 255)

    def test_finalize_twice_raises(self):
        """Verify the stream can only be finalized once."""
        from doodle_animator.encoding.stream import AnimationStream
        from doodle_animator.errors import AlreadyFinalized

        stream = AnimationStream(4, 4)
        stream.append_frame(_indices(0), 4, 4, _palette(), delay_ms=100)
        stream.finalize()

        with pytest.raises(AlreadyFinalized):
            stream.finalize()

    def test_append_after_finalize_raises(self):
        """Verify no frames can be added after finalize()."""
        from doodle_animator.encoding.stream import AnimationStream
        from doodle_animator.errors import AlreadyFinalized

        stream = AnimationStream(4, 4)
        stream.append_frame(_indices(0), 4, 4, _palette(), delay_ms=100)
        stream.finalize()

        with pytest.raises(AlreadyFinalized):
            stream.append_frame(_indices(1), 4, 4, _palette(), delay_ms=100)
        assert stream.finalized
        assert stream.frame_count == 1

    def test_finalize_empty_raises(self):
        """Verify an empty stream cannot be encoded."""
        from doodle_animator.encoding.stream import AnimationStream

        with pytest.raises(ValueError):
            AnimationStream(4, 4).finalize()

    def test_size_mismatch_rejected(self):
        """Verify all frames must match the stream size."""
        from doodle_animator.encoding.stream import AnimationStream

        stream = AnimationStream(4, 4)
        with pytest.raises(ValueError):
            stream.append_frame(_indices(0, size=5), 5, 5, _palette(), delay_ms=100)

    def test_index_out_of_range_rejected(self):
        """Verify indices must refer to palette entries."""
        from doodle_animator.encoding.stream import AnimationStream

        stream = AnimationStream(4, 4)
        with pytest.raises(ValueError):
            stream.append_frame(_indices(2), 4, 4, _palette(), delay_ms=100)

    def test_minimum_delay_applied(self):
        """Verify a tiny delay is stored as one hundredth."""
        from doodle_animator.encoding.stream import AnimationStream

        stream = AnimationStream(4, 4)
        frame = stream.append_frame(_indices(0), 4, 4, _palette(), delay_ms=1)
        assert frame.delay_cs == 1


class TestAnimationAsset:
    """Tests for the finished asset and its handle."""

    def test_sniff_media_type(self):
        """Verify container signatures."""
        from doodle_animator.encoding.asset import sniff_media_type

        assert sniff_media_type(b"GIF89a...") == "image/gif"
        assert sniff_media_type(b"GIF87a...") == "image/gif"
        assert sniff_media_type(b"\x89PNG\r\n\x1a\n...") == "image/png"
        assert sniff_media_type(b"RIFF\x00\x00\x00\x00WEBPVP8 ") == "image/webp"
        assert sniff_media_type(b"hello") == "application/octet-stream"

    def test_data_url(self):
        """Verify the handle is a playable data: URL."""
        from doodle_animator.encoding.asset import AnimationAsset

        asset = AnimationAsset.from_bytes(
            b"GIF89a", width=2, height=2, frame_count=2, delay_ms=250
        )
        assert asset.media_type == "image/gif"
        assert asset.url == "data:image/gif;base64,R0lGODlh"
        assert asset.size == 6

    @pytest.mark.parametrize(
        "label,expected",
        [
            ("A cat waving", "animation_a_cat_waving.gif"),
            ("", "animation_generated.gif"),
            ("x" * 40, "animation_" + "x" * 30 + ".gif"),
        ],
    )
    def test_download_name(self, label, expected):
        """Verify filenames are sanitized and truncated."""
        from doodle_animator.encoding.asset import download_name

        assert download_name(label) == expected
