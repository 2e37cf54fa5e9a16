# Copyright Red Hat
#
# tests/test_results.py - Comparison result formatting tests.
#
# This file is part of the fscmp project.
#
# SPDX-License-Identifier: Apache-2.0
import unittest
import errno
import json

from fscmp import FscmpOpenError
from fscmp.results import FileDiff, FsDiff, LineDiff


def _open_error(path="etc/gone"):
    err = FileNotFoundError(errno.ENOENT, "No such file or directory", path)
    return FscmpOpenError(path, "actual", err)


class TestLineDiff(unittest.TestCase):
    def test__str__(self):
        diff = LineDiff("a b", "a c", 3, 4)
        self.assertEqual(str(diff), "\tExpected@3: a b ; Actual@4: a c\n")

    def test__str__one_sided(self):
        diff = LineDiff(expected_content="gone", expected_line_num=7)
        self.assertEqual(str(diff), "\tExpected@7: gone ; Actual@0: \n")

    def test_to_dict(self):
        diff = LineDiff("x", "y", 1, 2)
        self.assertEqual(
            diff.to_dict(),
            {
                "expected_content": "x",
                "actual_content": "y",
                "expected_line_num": 1,
                "actual_line_num": 2,
            },
        )


class TestFileDiff(unittest.TestCase):
    def test__str__empty(self):
        self.assertEqual(str(FileDiff("a.txt")), "")

    def test__str__(self):
        diff = FileDiff("a.txt", diffs=[LineDiff("x", "y", 1, 1)])
        self.assertEqual(
            str(diff), "File a.txt:\n\tExpected@1: x ; Actual@1: y\n"
        )

    def test__str__error(self):
        diff = FileDiff("etc/gone", error=_open_error())
        self.assertEqual(
            str(diff),
            "File etc/gone:\n"
            "Failed to open file: actual etc/gone: No such file or directory\n",
        )

    def test_summary(self):
        diff = FileDiff(
            "f",
            diffs=[
                LineDiff("a", "b", 1, 1),
                LineDiff(expected_content="c", expected_line_num=2),
                LineDiff(actual_content="d", actual_line_num=2),
                LineDiff(actual_content="e", actual_line_num=3),
            ],
        )
        self.assertEqual(diff.summary(), "f: 1 changed, 1 missing, 2 extra")

    def test_summary_error(self):
        diff = FileDiff("etc/gone", error=_open_error())
        self.assertEqual(
            diff.summary(),
            "etc/gone: open failed: actual etc/gone: No such file or directory",
        )

    def test_to_dict_error(self):
        data = FileDiff("etc/gone", error=_open_error()).to_dict()
        self.assertEqual(data["path"], "etc/gone")
        self.assertEqual(data["diffs"], [])
        self.assertIn("No such file", data["error"])

    def test_to_dict_no_error(self):
        self.assertNotIn("error", FileDiff("a").to_dict())

    def test_json(self):
        diff = FileDiff("a.txt", diffs=[LineDiff("x", "y", 1, 1)])
        self.assertEqual(json.loads(diff.json()), diff.to_dict())
        self.assertIn("\n    ", diff.json(pretty=True))


class TestFsDiff(unittest.TestCase):
    def setUp(self):
        self.file_a = FileDiff("a.txt", diffs=[LineDiff("x", "y", 1, 1)])
        self.file_b = FileDiff("etc/gone", error=_open_error())
        self.diff = FsDiff([self.file_a, self.file_b])

    def test_empty(self):
        diff = FsDiff()
        self.assertEqual(str(diff), "")
        self.assertEqual(len(diff), 0)
        self.assertEqual(diff.paths(), [])
        self.assertEqual(diff.short(), "")
        self.assertEqual(diff.json(), "[]")

    def test__str__(self):
        self.assertEqual(
            str(self.diff),
            "Differences found in filesystem\n\n"
            "File a.txt:\n"
            "\tExpected@1: x ; Actual@1: y\n"
            "File etc/gone:\n"
            "Failed to open file: actual etc/gone: No such file or directory\n",
        )
        self.assertEqual(self.diff.full(), str(self.diff))

    def test_list_interface(self):
        self.assertEqual(len(self.diff), 2)
        self.assertIs(self.diff[1], self.file_b)
        self.assertEqual(list(self.diff), [self.file_a, self.file_b])
        diff = FsDiff()
        diff.append(self.file_a)
        self.assertEqual(diff, FsDiff([self.file_a]))
        self.assertNotEqual(diff, self.diff)

    def test_summary_properties(self):
        self.assertEqual(self.diff.errors, [self.file_b])
        self.assertEqual(self.diff.total_line_diffs, 1)

    def test_paths(self):
        self.assertEqual(self.diff.paths(), ["a.txt", "etc/gone"])

    def test_short(self):
        self.assertEqual(
            self.diff.short(),
            "a.txt: 1 changed, 0 missing, 0 extra\n"
            "etc/gone: open failed: actual etc/gone: No such file or directory",
        )

    def test_json(self):
        data = json.loads(self.diff.json(pretty=True))
        self.assertEqual(len(data), 2)
        self.assertEqual(data[0]["path"], "a.txt")
        self.assertEqual(data[0]["diffs"][0]["actual_content"], "y")
        self.assertIn("error", data[1])

    def test__repr__(self):
        self.assertEqual(repr(FsDiff()), "FsDiff([])")
