#!/usr/bin/env python3
"""
Tests for the location notation parser
"""

import pytest

from memrange.frontend import parse_location
from memrange.shared.errors import LocationSyntaxError
from memrange.shared.location import Dimension, LocKind, MemoryLocationRange
from memrange.utils.config import INVALID_DIMENSION_CODE, SYNTAX_ERROR_CODE


class TestForms:
    """Each location form"""

    def test_scalar(self, loc):
        assert loc("A bytes [0, 40)") == MemoryLocationRange.scalar("A", 0, 40)

    def test_open_bounds(self, loc):
        assert loc("A bytes [, 40)") == MemoryLocationRange.scalar("A", None, 40)
        assert loc("A bytes [8, )") == MemoryLocationRange.scalar("A", 8, None)
        assert loc("A bytes [,)") == MemoryLocationRange.scalar("A", None, None)

    def test_collapsed(self, loc):
        result = loc("A dims(0 step 2 count 5 of 10, 3 count 4 of 8) elem 4")
        assert result.kind is LocKind.COLLAPSED
        assert result.dims == (Dimension(0, 2, 5, 10), Dimension(3, 1, 4, 8))
        assert result.element_size == 4
        assert result.lower_bound is None

    def test_collapsed_without_element_size(self, loc):
        assert loc("A dims(0 count 4 of 0)").element_size is None

    def test_whole(self, loc):
        result = loc("A whole")
        assert result.kind is LocKind.NON_COLLAPSABLE
        assert result.dims == ()
        assert loc("A whole bytes [0, 64)").upper_bound == 64

    def test_names(self, loc):
        assert loc("%arr.1 bytes [0, 4)").ptr == "%arr.1"
        assert loc("_buf whole").ptr == "_buf"

    def test_whitespace_is_free(self, loc):
        assert loc("  A  dims( 0 step 2 count 5 of 10 )\n") == loc("A dims(0 step 2 count 5 of 10)")

    @pytest.mark.parametrize("text", [
        "A bytes [0, 40)",
        "A bytes [8, )",
        "A dims(0 step 2 count 5 of 10, 3 count 4 of 8) elem 4",
        "A dims(1 count 1 of 0)",
        "A whole",
    ])
    def test_str_reads_back(self, loc, text):
        location = loc(text)
        assert loc(str(location)) == location

    @pytest.mark.parametrize("name", ["dims", "of", "whole", "my buffer", "a[i]", 'say "hi"', "back\\slash", "7up"])
    def test_names_needing_quotes_read_back(self, loc, name):
        location = MemoryLocationRange.collapsed(name, [Dimension(0, 2, 5, 10)], 4)
        text = str(location)
        assert text.startswith('"')
        assert loc(text) == location

    def test_quoted_name(self, loc):
        assert loc('"step" whole').ptr == "step"
        assert loc('"A" bytes [0, 4)') == loc("A bytes [0, 4)")
        assert str(MemoryLocationRange.scalar('x"y', 0, 4)) == '"x\\"y" bytes [0, 4)'

    def test_module_level_parser(self):
        assert parse_location("B bytes [1, 2)").ptr == "B"


class TestSyntaxErrors:
    """Malformed text"""

    def test_unknown_keyword(self, loc):
        with pytest.raises(LocationSyntaxError) as exc_info:
            loc("A range [0, 4)")
        assert exc_info.value.error_code == SYNTAX_ERROR_CODE
        assert exc_info.value.location.column == 3

    def test_unexpected_end(self, loc):
        with pytest.raises(LocationSyntaxError) as exc_info:
            loc("A dims(0 count 4 of 8")
        error = exc_info.value
        assert "unexpected end" in error.message
        assert error.location.line == 1
        assert error.location.column == len("A dims(0 count 4 of 8") + 1

    def test_source_name_is_kept(self, session_parser):
        with pytest.raises(LocationSyntaxError) as exc_info:
            session_parser.parse("A bytes 0, 4", "<lhs>")
        assert exc_info.value.location.file == "<lhs>"

    def test_rendered_diagnostic(self, loc, monkeypatch):
        monkeypatch.setenv("NO_COLOR", "1")
        with pytest.raises(LocationSyntaxError) as exc_info:
            loc("A bytes [0; 4)")
        text = str(exc_info.value)
        assert text.startswith("error[E0101]:")
        assert "1 | A bytes [0; 4)" in text


class TestInvalidDimensions:
    """Well-formed text describing an impossible axis"""

    def test_zero_step(self, loc):
        with pytest.raises(LocationSyntaxError) as exc_info:
            loc("A dims(0 step 0 count 4 of 8)")
        error = exc_info.value
        assert error.error_code == INVALID_DIMENSION_CODE
        assert "step must be positive" in error.message
        assert error.location.column == 8

    def test_zero_count(self, loc):
        with pytest.raises(LocationSyntaxError, match="count must be positive"):
            loc("A dims(0 count 0 of 8)")

    def test_past_the_axis(self, loc):
        with pytest.raises(LocationSyntaxError, match="last index 10 is not below the axis size 8"):
            loc("A dims(1 step 3 count 4 of 8)")

    def test_second_axis_is_located(self, loc):
        with pytest.raises(LocationSyntaxError) as exc_info:
            loc("A dims(0 count 4 of 4, 0 count 9 of 8)")
        assert exc_info.value.location.column == 24
