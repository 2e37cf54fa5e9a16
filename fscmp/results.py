# Copyright Red Hat
#
# fscmp/results.py - File tree comparison results
#
# This file is part of the fscmp project.
#
# SPDX-License-Identifier: Apache-2.0
"""
File tree comparison result records and their string formats.
"""
from typing import Any, ClassVar, Dict, Iterator, List, Optional
from dataclasses import dataclass, field
import json


@dataclass(frozen=True)
class LineDiff:
    """
    A single positional line mismatch.

    A one-sided mismatch (a line present in only one file) leaves the other
    side's content empty and its line number set to 0.
    """

    #: The (normalised) expected line text
    expected_content: str = ""
    #: The (normalised) actual line text
    actual_content: str = ""
    #: Physical line number in the expected file, or 0 if absent
    expected_line_num: int = 0
    #: Physical line number in the actual file, or 0 if absent
    actual_line_num: int = 0

    def __str__(self) -> str:
        """
        Return a report line for this ``LineDiff``.

        :returns: A tab indented, newline terminated report line.
        :rtype: ``str``
        """
        return (
            f"\tExpected@{self.expected_line_num}: {self.expected_content} ; "
            f"Actual@{self.actual_line_num}: {self.actual_content}\n"
        )

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert this ``LineDiff`` object into a dictionary representation
        suitable for encoding as JSON.

        :returns: A dictionary mapping this instance's keys to values.
        :rtype: ``Dict[str, Any]``
        """
        return {
            "expected_content": self.expected_content,
            "actual_content": self.actual_content,
            "expected_line_num": self.expected_line_num,
            "actual_line_num": self.actual_line_num,
        }


@dataclass(frozen=True)
class FileDiff:
    """
    The differences found for one path present in the expected tree.

    When ``error`` is set one of the files could not be opened and no line
    comparison was attempted.
    """

    path: str
    error: Optional[Exception] = None
    diffs: List[LineDiff] = field(default_factory=list)

    def __str__(self) -> str:
        """
        Return the report block for this ``FileDiff``.

        :returns: A human readable report, or the empty string if there is
                  nothing to report.
        :rtype: ``str``
        """
        if not self.diffs and self.error is None:
            return ""
        out = f"File {self.path}:\n"
        if self.error is not None:
            out += f"Failed to open file: {self.error}\n"
        return out + "".join(str(diff) for diff in self.diffs)

    def summary(self) -> str:
        """
        Return a one line summary of this ``FileDiff``.

        :rtype: ``str``
        """
        if self.error is not None:
            return f"{self.path}: open failed: {self.error}"
        expected_only = len([d for d in self.diffs if not d.actual_line_num])
        actual_only = len([d for d in self.diffs if not d.expected_line_num])
        changed = len(self.diffs) - expected_only - actual_only
        return (
            f"{self.path}: {changed} changed, "
            f"{expected_only} missing, {actual_only} extra"
        )

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert this ``FileDiff`` object into a dictionary representation
        suitable for encoding as JSON.

        :returns: A dictionary mapping this instance's keys to values.
        :rtype: ``Dict[str, Any]``
        """
        out = {
            "path": self.path,
            "diffs": [diff.to_dict() for diff in self.diffs],
        }
        if self.error is not None:
            out["error"] = str(self.error)
        return out

    def json(self, pretty=False) -> str:
        """
        Return a string representation of this ``FileDiff`` in JSON
        notation.

        :param pretty: Indent JSON to be human readable.
        :type pretty: ``bool``
        :returns: A JSON representation of this instance.
        :rtype: ``str``
        """
        return json.dumps(self.to_dict(), indent=4 if pretty else None)


class FsDiff:
    """Container for file tree comparison results with formatting methods."""

    #: Constant for the names of the string diff formats
    DIFF_FORMATS: ClassVar[List[str]] = [
        "full",
        "paths",
        "short",
        "json",
    ]

    def __init__(self, diffs: Optional[List[FileDiff]] = None):
        self.diffs: List[FileDiff] = diffs if diffs is not None else []

    def __repr__(self) -> str:
        """
        Return a machine-readable representation of this instance.

        :returns: ``FsDiff`` constructor style string.
        :rtype: ``str``
        """
        return f"FsDiff({self.diffs!r})"

    def __eq__(self, other) -> bool:
        if not isinstance(other, FsDiff):
            return NotImplemented
        return self.diffs == other.diffs

    def __str__(self) -> str:
        """
        Return the full human readable report for this ``FsDiff``.

        :returns: The report, or the empty string if the trees are equal.
        :rtype: ``str``
        """
        if not self.diffs:
            return ""
        return "Differences found in filesystem\n\n" + "".join(
            str(diff) for diff in self.diffs
        )

    # List-like interface
    def __iter__(self) -> Iterator[FileDiff]:
        """
        Implement iter(self).
        """
        return iter(self.diffs)

    def __len__(self):
        """
        Implement len(self).
        """
        return len(self.diffs)

    def __getitem__(self, index: int) -> FileDiff:
        """
        Return self[index]

        :param index: The index to return.
        :type index: ``int``
        """
        return self.diffs[index]

    def append(self, diff: FileDiff):
        """
        Append a ``FileDiff`` to this ``FsDiff`` instance.
        """
        self.diffs.append(diff)

    # Summary properties
    @property
    def errors(self) -> List[FileDiff]:
        """
        Return the file diffs that record an open error.

        :rtype: ``List[FileDiff]``
        """
        return [diff for diff in self.diffs if diff.error is not None]

    @property
    def total_line_diffs(self) -> int:
        """
        Return the total number of line mismatches over all files.

        :rtype: ``int``
        """
        return sum(len(diff.diffs) for diff in self.diffs)

    # Output formats
    def full(self) -> str:
        """
        Return the full report: equivalent to ``str(self)``.

        :rtype: ``str``
        """
        return str(self)

    def paths(self) -> List[str]:
        """
        Return a list of paths that differ in this ``FsDiff``.

        :returns: Path list.
        :rtype: ``List[str]``
        """
        return [diff.path for diff in self.diffs]

    def short(self) -> str:
        """
        Return a brief summary with one line per differing file.

        :rtype: ``str``
        """
        return "\n".join(diff.summary() for diff in self.diffs)

    def json(self, pretty: bool = False) -> str:
        """
        Return JSON representation of ``FileDiff`` content for this
        instance.

        :returns: JSON string description of file differences.
        :rtype: ``str``
        """
        dicts = [diff.to_dict() for diff in self.diffs]
        return json.dumps(dicts, indent=4 if pretty else None)
