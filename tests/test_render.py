"""
Render Tests
============

Frame normalization, payload precomputation and adaptive delay.
"""

import pytest

from printnet.models.animation import AnimationDefinition, NormalizedAnimation
from printnet.render import (
    MAX_SQUARE_SIZE,
    compute_adaptive_delay,
    compute_square_size,
    normalize,
    precompute,
)


def _definition(frames, framerate=100):
    return AnimationDefinition.model_validate({"frames": frames, "framerate": framerate})


class TestNormalizer:
    """Tests for square cropping/padding and framerate clamping."""

    def test_square_example(self, sample_definition):
        """A 2x2 animation is unchanged apart from the framerate clamp."""
        normalized = normalize(sample_definition)

        assert normalized.square_size == 2
        assert normalized.frames == (("AB", "CD"), ("EF", "GH"))
        assert normalized.frame_rate_ms == 16

    def test_wide_frames_are_cropped(self):
        """Width beyond the line count is truncated."""
        normalized = normalize(_definition([["ABCDE", "FGHIJ"]]))

        assert normalized.square_size == 2
        assert normalized.frames == (("AB", "FG"),)

    def test_tall_frames_are_cropped(self):
        """Lines beyond the widest line length are dropped."""
        normalized = normalize(_definition([["AB", "CD", "EF", "GH"]]))

        assert normalized.square_size == 2
        assert normalized.frames == (("AB", "CD"),)

    def test_short_lines_are_padded(self):
        """Lines shorter than the square are right-padded with spaces."""
        normalized = normalize(_definition([["ABC", "D", ""]]))

        assert normalized.frames == (("ABC", "D  ", "   "),)

    def test_null_lines_become_spaces(self):
        """A null line is replaced by square_size spaces."""
        normalized = normalize(_definition([["AB", None]]))

        assert normalized.frames == (("AB", "  "),)

    def test_later_frames_use_first_frame_size(self):
        """Every frame is fitted to the square derived from frame one."""
        normalized = normalize(_definition([["AB", "CD"], ["WXYZ", "Q", "R"]]))

        assert normalized.frames[1] == ("WX", "Q ")

    def test_short_frames_get_no_extra_lines(self):
        """Frames with fewer lines than the square keep fewer lines."""
        normalized = normalize(_definition([["ABC", "DEF", "GHI"], ["JKL"]]))

        assert normalized.frames[1] == ("JKL",)

    def test_square_size_is_capped(self):
        """The square never exceeds the maximum size."""
        big = ["x" * 250] * 250
        normalized = normalize(_definition([big]))

        assert normalized.square_size == MAX_SQUARE_SIZE
        assert len(normalized.frames[0]) == MAX_SQUARE_SIZE
        assert all(len(line) == MAX_SQUARE_SIZE for line in normalized.frames[0])

    def test_empty_animation_passes_through(self):
        """No frames means no cropping and a zero square."""
        normalized = normalize(_definition([], framerate=5))

        assert normalized.frames == ()
        assert normalized.square_size == 0
        assert normalized.frame_rate_ms == 16

    def test_empty_first_frame(self):
        """A first frame with no lines yields a zero square."""
        normalized = normalize(_definition([[], ["AB", "CD"]]))

        assert normalized.square_size == 0
        assert normalized.frames == ((), ())

    @pytest.mark.parametrize("framerate,expected", [(0, 16), (10, 16), (16, 16), (40, 40)])
    def test_framerate_floor(self, framerate, expected):
        """The framerate is never below 16ms."""
        assert normalize(_definition([["A"]], framerate)).frame_rate_ms == expected

    def test_square_size_property(self):
        """Every line of every frame is exactly square_size wide."""
        frames = [["short", "a much longer line", None, "mid line"], ["x", "y"]]
        normalized = normalize(_definition(frames))

        expected = min(len("a much longer line"), 4)
        assert normalized.square_size == expected
        for frame in normalized.frames:
            assert all(len(line) == expected for line in frame)

    def test_compute_square_size_counts_null_as_zero(self):
        """Null lines count as zero width."""
        assert compute_square_size([None, None, "ABC"]) == 3
        assert compute_square_size([None]) == 0


class TestAdaptiveDelay:
    """Tests for the payload-size delay table."""

    @pytest.mark.parametrize("size,base,expected", [
        (60000, 20, 100),
        (60000, 50, 150),
        (30000, 20, 50),
        (30000, 40, 80),
        (6000, 16, 30),
        (6000, 30, 45),
        (5000, 16, 16),
        (4, 16, 16),
        (0, 100, 100),
    ])
    def test_delay_table(self, size, base, expected):
        """Delay follows the size tiers and their floors."""
        assert compute_adaptive_delay(size, base) == expected

    def test_thresholds_are_exclusive(self):
        """Exactly hitting a threshold stays in the lower tier."""
        assert compute_adaptive_delay(50000, 20) == 50
        assert compute_adaptive_delay(20000, 20) == 30


class TestPrecompute:
    """Tests for payload encoding."""

    def test_payload_example(self, sample_definition):
        """Lines are newline-joined and terminated by a blank line."""
        animation = precompute("sample", normalize(sample_definition))

        assert animation.payloads == (b"AB\nCD\n\n", b"EF\nGH\n\n")
        assert animation.delay_ms == 16
        assert animation.frame_count == 2
        assert animation.total_bytes == 14

    def test_idempotent(self, sample_definition):
        """Precomputing twice yields byte-identical payloads."""
        normalized = normalize(sample_definition)

        assert precompute("a", normalized).payloads == precompute("a", normalized).payloads

    def test_utf8_encoding(self):
        """Non-ASCII art is encoded as UTF-8."""
        normalized = NormalizedAnimation(frames=(("é█", "░▒"),), frame_rate_ms=16, square_size=2)

        assert precompute("u", normalized).payloads[0] == "é█\n░▒\n\n".encode("utf-8")

    def test_delay_uses_first_frame_only(self):
        """Only the first frame's size drives the delay."""
        big = tuple("x" * 100 for _ in range(100))
        normalized = NormalizedAnimation(
            frames=(("ab", "cd"), big),
            frame_rate_ms=20,
            square_size=100,
        )

        assert precompute("mixed", normalized).delay_ms == 20

    def test_empty_animation(self):
        """Zero frames produce zero payloads and the base delay."""
        normalized = NormalizedAnimation(frames=(), frame_rate_ms=16, square_size=0)
        animation = precompute("empty", normalized)

        assert animation.payloads == ()
        assert animation.delay_ms == 16
