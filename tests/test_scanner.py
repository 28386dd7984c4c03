"""
Tests for the string scanner.
"""

import re

import pytest

from tinymustache.errors import OutOfRange
from tinymustache.scanner import Scanner


class TestScanner:

    def setup_method(self):
        self.scanner = Scanner("This is an example string")

    def test_scan(self):
        """Test anchored scanning advances the cursor"""
        m = self.scanner.scan(r"\w+")
        assert m.text == "This"
        assert self.scanner.pos == 4

        m = self.scanner.scan(r"\s+")
        assert m.text == " "
        assert self.scanner.pos == 5

        assert self.scanner.scan(r"\s+") is None
        assert self.scanner.pos == 5

    def test_scan_is_anchored(self):
        """Test a match further ahead does not count"""
        assert self.scanner.scan(r"example") is None
        assert self.scanner.pos == 0

    def test_scan_groups(self):
        m = self.scanner.scan(re.compile(r"(\w+)( )(x)?"))
        assert m.text == "This "
        assert m.groups == ("This", " ", None)
        assert m.group(0) == "This "
        assert m.group(1) == "This"
        assert m.group(3) is None

    def test_check_does_not_advance(self):
        m = self.scanner.check(r"\w+")
        assert m.text == "This"
        assert self.scanner.pos == 0

    def test_scan_until(self):
        """Test searching forward consumes the prefix and the match"""
        m = self.scanner.scan_until(r"an")
        assert m.consumed == "This is an"
        assert m.text == "an"
        assert m.before == "This is "
        assert self.scanner.pos == 10

        assert self.scanner.scan_until(r"missing") is None
        assert self.scanner.pos == 10

    def test_check_until_does_not_advance(self):
        m = self.scanner.check_until(r"example")
        assert m.consumed == "This is an example"
        assert self.scanner.pos == 0

    def test_scan_until_multiline(self):
        """Test ^ only matches at real line starts"""
        scanner = Scanner("<html>\n  <body>\n  {{")
        pattern = re.compile(r"(^[ \t]*)?(\{\{)", re.MULTILINE)

        m = scanner.check_until(pattern)
        assert m.consumed == "<html>\n  <body>\n  {{"
        assert m.text == "  {{"
        assert m.groups == ("  ", "{{")
        assert scanner.pos == 0

        m = scanner.scan_until(pattern)
        assert m.before == "<html>\n  <body>\n"
        assert scanner.done()

    def test_substring(self):
        assert self.scanner.substring(0, 4) == "This"
        assert self.scanner.substring(19, len(self.scanner)) == "string"

    @pytest.mark.parametrize("start,end", [(-1, 4), (25, 26), (0, 26), (4, 4), (5, 2)])
    def test_substring_out_of_range(self, start, end):
        with pytest.raises(OutOfRange):
            self.scanner.substring(start, end)

    def test_set_pos(self):
        self.scanner.set_pos(25)
        assert self.scanner.done()
        self.scanner.pos = 0
        assert self.scanner.pos == 0

        with pytest.raises(OutOfRange, match="outside the allowed range"):
            self.scanner.set_pos(26)
        with pytest.raises(OutOfRange):
            self.scanner.pos = -1
        assert self.scanner.pos == 0

    def test_out_of_range_is_index_error(self):
        with pytest.raises(IndexError):
            self.scanner.set_pos(100)

    def test_len(self):
        assert len(self.scanner) == 25
        assert len(Scanner("")) == 0

    def test_done(self):
        assert Scanner("").done()
        assert not self.scanner.done()

    def test_at_start_of_line(self):
        scanner = Scanner("ab\ncd")
        assert scanner.at_start_of_line()
        scanner.set_pos(1)
        assert not scanner.at_start_of_line()
        scanner.set_pos(3)
        assert scanner.at_start_of_line()
        scanner.set_pos(5)
        assert not scanner.at_start_of_line()

    def test_line_col(self):
        scanner = Scanner("ab\ncd\nef")
        assert scanner.line_col(0) == (1, 1)
        assert scanner.line_col(4) == (2, 2)
        scanner.set_pos(6)
        assert scanner.line_col() == (3, 1)
