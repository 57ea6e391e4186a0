"""Tests for typeschema.config module."""

import pytest
from pydantic import ValidationError

from typeschema.config import DEFAULT_OPTIONS, ConversionOptions


class TestConversionOptions:
    """Test option defaults and validation."""

    def test_defaults(self) -> None:
        """Test default limits."""
        assert DEFAULT_OPTIONS.max_depth == 256
        assert DEFAULT_OPTIONS.detect_cycles is True

    @pytest.mark.parametrize("depth", [0, -1])
    def test_max_depth_must_be_positive(self, depth: int) -> None:
        """Test that a non-positive depth is rejected."""
        with pytest.raises(ValidationError):
            ConversionOptions(max_depth=depth)

    def test_unknown_option_rejected(self) -> None:
        """Test that misspelled options fail loudly."""
        with pytest.raises(ValidationError):
            ConversionOptions(max_dept=5)

    def test_frozen(self) -> None:
        """Test that options are immutable."""
        options = ConversionOptions(max_depth=8)
        with pytest.raises(ValidationError):
            options.max_depth = 9
