"""Tests for line_scanner.py module.

Tests line splitting, context windows, line numbering and result
formatting.
"""

import sys
import unittest
from pathlib import Path

# Add parent directory to path for module imports
_parent_dir = str(Path(__file__).parent.parent)
if _parent_dir not in sys.path:
    sys.path.insert(0, _parent_dir)

from line_scanner import BLOCK_SEPARATOR, NO_MATCHES, format_result, scan, split_lines
from matcher import InvalidPatternError, MatchOptions


class TestSplitLines(unittest.TestCase):
    """Tests for splitting contents into lines."""

    def test_trailing_newline_yields_empty_last_line(self) -> None:
        """Verify the trailing separator is not special-cased."""
        self.assertEqual(split_lines("a\nb\n"), ["a", "b", ""])

    def test_carriage_return_kept(self) -> None:
        """Verify only line feeds split lines."""
        self.assertEqual(split_lines("a\r\nb"), ["a\r", "b"])

    def test_empty_contents(self) -> None:
        """Verify empty contents is a single empty line."""
        self.assertEqual(split_lines(""), [""])


class TestScan(unittest.TestCase):
    """Tests for finding matches and building blocks."""

    def test_single_match_numbered(self) -> None:
        """Verify a case-insensitive match is numbered from 1."""
        result = scan("ERROR: failed", "error")

        self.assertEqual(result, [["1: ERROR: failed"]])

    def test_without_line_numbers(self) -> None:
        """Verify bare lines when line numbers are disabled."""
        result = scan("ok\nbad thing\nok", "bad", MatchOptions(line_numbers=False))

        self.assertEqual(result, [["bad thing"]])

    def test_no_matches_is_empty(self) -> None:
        """Verify nothing matched gives an empty result."""
        self.assertEqual(scan("alpha\nbeta", "gamma"), [])

    def test_context_window_in_middle(self) -> None:
        """Verify context lines before and after a match, in order."""
        contents = "\n".join(f"line{i}" for i in range(1, 8))

        result = scan(contents, "line4", MatchOptions(context=2))

        self.assertEqual(result, [["2: line2", "3: line3", "4: line4", "5: line5", "6: line6"]])

    def test_context_window_clipped_at_edges(self) -> None:
        """Verify windows hold min(i, c) lines before and min(n-1-i, c) after."""
        contents = "\n".join(f"line{i}" for i in range(5))
        n = 5
        for i in range(n):
            with self.subTest(index=i):
                result = scan(contents, f"line{i}", MatchOptions(context=2))

                block = result[0]
                before = min(i, 2)
                after = min(n - 1 - i, 2)
                self.assertEqual(len(block), before + 1 + after)
                expected = [f"{j + 1}: line{j}" for j in range(i - before, i + after + 1)]
                self.assertEqual(block, expected)

    def test_overlapping_windows_not_merged(self) -> None:
        """Verify nearby matches produce separate blocks repeating shared lines."""
        contents = "hit one\nbetween\nhit two"

        result = scan(contents, "hit", MatchOptions(context=1))

        self.assertEqual(
            result,
            [
                ["1: hit one", "2: between"],
                ["2: between", "3: hit two"],
            ],
        )

    def test_trailing_empty_line_is_scanned(self) -> None:
        """Verify the empty line after a trailing newline can be context."""
        result = scan("a\nb\n", "b", MatchOptions(context=1))

        self.assertEqual(result, [["1: a", "2: b", "3: "]])

    def test_regex_mode(self) -> None:
        """Verify regex patterns are applied per line."""
        contents = "GET /a 200\nGET /b 500\nGET /c 503"

        result = scan(contents, r" 5\d\d$", MatchOptions(regex=True))

        self.assertEqual(result, [["2: GET /b 500"], ["3: GET /c 503"]])

    def test_invalid_regex_raises(self) -> None:
        """Verify an invalid regex is reported to the caller."""
        with self.assertRaises(InvalidPatternError):
            scan("anything", "*bad", MatchOptions(regex=True))


class TestFormatResult(unittest.TestCase):
    """Tests for rendering match blocks."""

    def test_empty_result_is_sentinel(self) -> None:
        """Verify the no-match sentinel text."""
        self.assertEqual(format_result([]), NO_MATCHES)
        self.assertEqual(NO_MATCHES, "No matches found")

    def test_blocks_split_back_losslessly(self) -> None:
        """Verify blocks are separated by a --- line."""
        blocks = [["1: a", "2: b"], ["5: c"]]

        text = format_result(blocks)

        self.assertEqual(text, "1: a\n2: b\n---\n5: c")
        self.assertEqual([b.split("\n") for b in text.split(BLOCK_SEPARATOR)], blocks)


if __name__ == "__main__":
    unittest.main()
