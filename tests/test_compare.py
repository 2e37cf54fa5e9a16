# Copyright Red Hat
#
# tests/test_compare.py - FileComparator tests.
#
# This file is part of the fscmp project.
#
# SPDX-License-Identifier: Apache-2.0
import unittest
from unittest.mock import MagicMock
import errno
import gc
import io

from fscmp import FscmpOpenError
from fscmp.compare import CompareState, FileComparator, compare_file, _next_state
from fscmp.options import CompareOptions
from fscmp.results import FileDiff, LineDiff
from fscmp.treewalk import FileTree, MapTree

from ._util import line_diffs


class TestCompareState(unittest.TestCase):
    def test_next_state(self):
        self.assertEqual(_next_state(True, True), CompareState.SYNCED)
        self.assertEqual(_next_state(True, False), CompareState.DRAIN_EXPECTED)
        self.assertEqual(_next_state(False, True), CompareState.DRAIN_ACTUAL)
        self.assertEqual(_next_state(False, False), CompareState.DONE)


class TestCompareStreams(unittest.TestCase):
    def test_equal(self):
        self.assertEqual(line_diffs("a\nb\nc\n", "a\nb\nc\n"), [])

    def test_both_empty(self):
        self.assertEqual(line_diffs("", ""), [])

    def test_single_line_mismatch(self):
        self.assertEqual(
            line_diffs("this is a text file", "this is a text fil"),
            [LineDiff("this is a text file", "this is a text fil", 1, 1)],
        )

    def test_trailing_newline_only_difference(self):
        # A missing final newline does not produce an extra line.
        self.assertEqual(line_diffs("a\nb\n", "a\nb"), [])

    def test_expected_longer(self):
        self.assertEqual(
            line_diffs("a\nb\nc\n", "a\n"),
            [
                LineDiff(expected_content="b", expected_line_num=2),
                LineDiff(expected_content="c", expected_line_num=3),
            ],
        )

    def test_actual_longer(self):
        self.assertEqual(
            line_diffs("a\n", "a\nb\nc\n"),
            [
                LineDiff(actual_content="b", actual_line_num=2),
                LineDiff(actual_content="c", actual_line_num=3),
            ],
        )

    def test_empty_expected(self):
        self.assertEqual(
            line_diffs("", "x\ny\n"),
            [
                LineDiff(actual_content="x", actual_line_num=1),
                LineDiff(actual_content="y", actual_line_num=2),
            ],
        )

    def test_empty_actual(self):
        self.assertEqual(
            line_diffs("x\n", ""),
            [LineDiff(expected_content="x", expected_line_num=1)],
        )

    def test_mismatch_then_drain(self):
        self.assertEqual(
            line_diffs("a\n\nb\n", "a\nb\n"),
            [
                LineDiff("", "b", 2, 2),
                LineDiff(expected_content="b", expected_line_num=3),
            ],
        )

    def test_undecodable_bytes_differ(self):
        self.assertEqual(
            line_diffs(b"caf\xe9\n", b"caf\xff\n"),
            [LineDiff("caf\\xe9", "caf\\xff", 1, 1)],
        )

    def test_undecodable_bytes_equal(self):
        self.assertEqual(line_diffs(b"caf\xe9\n", b"caf\xe9\n"), [])

    def test_undecodable_bytes_drained(self):
        self.assertEqual(
            line_diffs(b"a\n", b"a\n\xff\n"),
            [LineDiff(actual_content="\\xff", actual_line_num=2)],
        )

    def test_caller_streams_left_open(self):
        expected = io.BytesIO(b"a\nb\n")
        actual = io.BytesIO(b"a\n")
        diffs = FileComparator().compare_streams(expected, actual)
        gc.collect()
        self.assertEqual(len(diffs), 1)
        self.assertFalse(expected.closed)
        self.assertFalse(actual.closed)

    def test_positional_not_aligned(self):
        # An inserted line shifts every following line.
        self.assertEqual(
            line_diffs("a\nb\nc\n", "x\na\nb\nc\n"),
            [
                LineDiff("a", "x", 1, 1),
                LineDiff("b", "a", 2, 2),
                LineDiff("c", "b", 3, 3),
                LineDiff(actual_content="c", actual_line_num=4),
            ],
        )

    def test_whitespace_significant_by_default(self):
        self.assertEqual(
            line_diffs("a\n", " a\n"),
            [LineDiff("a", " a", 1, 1)],
        )

    def test_ignore_line_spaces(self):
        self.assertEqual(
            line_diffs(
                "this is a text file", "    this is a text file    ",
                ignore_line_spaces=True,
            ),
            [],
        )

    def test_ignore_line_spaces_reports_trimmed_text(self):
        self.assertEqual(
            line_diffs("  a  \n", "\tb\n", ignore_line_spaces=True),
            [LineDiff("a", "b", 1, 1)],
        )

    def test_ignore_line_spaces_trims_drained_text(self):
        self.assertEqual(
            line_diffs("a\n", "a\n  extra  \n", ignore_line_spaces=True),
            [LineDiff(actual_content="extra", actual_line_num=2)],
        )

    def test_trailing_blank_lines_reported(self):
        self.assertEqual(
            line_diffs("a\n", "a\n\n  \n"),
            [
                LineDiff(actual_content="", actual_line_num=2),
                LineDiff(actual_content="  ", actual_line_num=3),
            ],
        )

    def test_trailing_blank_lines_ignored(self):
        self.assertEqual(line_diffs("a\n", "a\n\n  \n", ignore_blank_lines=True), [])
        self.assertEqual(line_diffs("a\n\n\n", "a\n", ignore_blank_lines=True), [])

    def test_ignore_blank_lines_insertion(self):
        self.assertEqual(
            line_diffs(
                "a\nb\nc\n", "\n\na\n   \nb\n\n\nc\n\n", ignore_blank_lines=True
            ),
            [],
        )
        self.assertEqual(
            line_diffs(
                "\n\na\n   \nb\n\n\nc\n\n", "a\nb\nc\n", ignore_blank_lines=True
            ),
            [],
        )

    def test_ignore_blank_lines_line_numbers(self):
        self.assertEqual(
            line_diffs("a\nb\n", "\n\na\n\nX\n", ignore_blank_lines=True),
            [LineDiff("b", "X", 2, 5)],
        )

    def test_ignore_blank_lines_exhausts_expected(self):
        self.assertEqual(
            line_diffs("a\n\n\n", "a\nb\n", ignore_blank_lines=True),
            [LineDiff(actual_content="b", actual_line_num=2)],
        )

    def test_ignore_blank_lines_exhausts_actual(self):
        self.assertEqual(
            line_diffs("a\n\n\nb\nc\n", "a\n\n", ignore_blank_lines=True),
            [
                LineDiff(expected_content="b", expected_line_num=4),
                LineDiff(expected_content="c", expected_line_num=5),
            ],
        )

    def test_ignore_blank_and_line_spaces(self):
        self.assertEqual(
            line_diffs(
                "  a  \n\n b\n",
                "a\n\n\nb  \n",
                ignore_blank_lines=True,
                ignore_line_spaces=True,
            ),
            [],
        )


class TestFileComparator(unittest.TestCase):
    def test_equal_files(self):
        tree = MapTree({"a.txt": "same\n"})
        self.assertIsNone(compare_file(tree, MapTree({"a.txt": "same\n"}), "a.txt"))

    def test_different_files(self):
        diff = compare_file(
            MapTree({"a.txt": "one\n"}), MapTree({"a.txt": "two\n"}), "a.txt"
        )
        self.assertEqual(diff, FileDiff("a.txt", diffs=[LineDiff("one", "two", 1, 1)]))

    def test_missing_in_actual(self):
        diff = compare_file(MapTree({"a.txt": "x"}), MapTree({}), "a.txt")
        self.assertEqual(diff.path, "a.txt")
        self.assertEqual(diff.diffs, [])
        self.assertIsInstance(diff.error, FscmpOpenError)
        self.assertEqual(diff.error.tree, "actual")
        self.assertIsInstance(diff.error.err, FileNotFoundError)

    def test_missing_in_expected(self):
        diff = compare_file(MapTree({}), MapTree({"a.txt": "x"}), "a.txt")
        self.assertIsInstance(diff.error, FscmpOpenError)
        self.assertEqual(diff.error.tree, "expected")

    def test_expected_closed_when_actual_open_fails(self):
        stream = io.BytesIO(b"data\n")
        expected_tree = MagicMock(spec=FileTree)
        expected_tree.open.return_value = stream
        actual_tree = MagicMock(spec=FileTree)
        actual_tree.open.side_effect = PermissionError(
            errno.EACCES, "Permission denied", "a.txt"
        )

        diff = FileComparator().compare(expected_tree, actual_tree, "a.txt")

        self.assertTrue(stream.closed)
        self.assertIsInstance(diff.error, FscmpOpenError)
        self.assertIn("Permission denied", str(diff.error))
        self.assertEqual(diff.diffs, [])

    def test_streams_closed_after_compare(self):
        expected_stream = io.BytesIO(b"a\nb\n")
        actual_stream = io.BytesIO(b"a\n")
        expected_tree = MagicMock(spec=FileTree)
        expected_tree.open.return_value = expected_stream
        actual_tree = MagicMock(spec=FileTree)
        actual_tree.open.return_value = actual_stream

        diff = FileComparator().compare(expected_tree, actual_tree, "a.txt")

        self.assertTrue(expected_stream.closed)
        self.assertTrue(actual_stream.closed)
        self.assertEqual(
            diff.diffs, [LineDiff(expected_content="b", expected_line_num=2)]
        )

    def test_options_default(self):
        comparator = FileComparator()
        self.assertEqual(comparator.options, CompareOptions())
