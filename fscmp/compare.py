# Copyright Red Hat
#
# fscmp/compare.py - File tree comparison file comparator
#
# This file is part of the fscmp project.
#
# SPDX-License-Identifier: Apache-2.0
"""
Positional, line by line comparison of one file present in two trees.
"""
from typing import BinaryIO, List, Optional, Tuple, TYPE_CHECKING
from enum import Enum
import logging

from ._fscmp import FSCMP_SUBSYSTEM_COMPARE, FscmpOpenError
from .options import CompareOptions
from .results import FileDiff, LineDiff
from .scanner import LineScanner
from .treewalk import FileTree

if TYPE_CHECKING:
    from .filetypes import EncodingDetector

_log = logging.getLogger(__name__)

_log_debug = _log.debug
_log_info = _log.info
_log_warn = _log.warning
_log_error = _log.error


def _log_debug_compare(msg, *args, **kwargs):
    """A wrapper for compare subsystem debug logs."""
    _log.debug(msg, *args, extra={"subsystem": FSCMP_SUBSYSTEM_COMPARE}, **kwargs)


def _printable(text: str) -> str:
    """
    Return ``text`` with undecodable bytes, kept as surrogate escapes by
    the scanner, rendered as ``\\xNN`` escapes.
    """
    return text.encode("utf8", "surrogateescape").decode("utf8", "backslashreplace")


class CompareState(Enum):
    """
    States of a single file comparison.
    """

    #: Both files are producing lines
    SYNCED = "synced"
    #: The actual file is exhausted: remaining expected lines are missing
    DRAIN_EXPECTED = "drain_expected"
    #: The expected file is exhausted: remaining actual lines are extra
    DRAIN_ACTUAL = "drain_actual"
    #: Both files are exhausted
    DONE = "done"


def _next_state(expected_ok: bool, actual_ok: bool) -> CompareState:
    """
    Return the state that follows a lockstep step in which the expected
    and actual scanners reported ``expected_ok`` and ``actual_ok``.
    """
    if expected_ok and actual_ok:
        return CompareState.SYNCED
    if expected_ok:
        return CompareState.DRAIN_EXPECTED
    if actual_ok:
        return CompareState.DRAIN_ACTUAL
    return CompareState.DONE


class FileComparator:
    """
    Compare the lines of a file in an expected tree with the lines of the
    file at the same path in an actual tree.
    """

    def __init__(self, options: Optional[CompareOptions] = None):
        """
        Initialise a new ``FileComparator``.

        :param options: The normalisation and decoding options to apply.
        :type options: ``Optional[CompareOptions]``
        """
        self.options: CompareOptions = options or CompareOptions()
        self._detector: Optional["EncodingDetector"] = None
        if self.options.detect_encoding:
            # libmagic is only loaded when encoding detection is requested.
            from .filetypes import EncodingDetector  # pylint: disable=import-outside-toplevel

            self._detector = EncodingDetector(self.options.encoding)

    def _normalise(self, text: str) -> str:
        return text.strip() if self.options.ignore_line_spaces else text

    def _select(self, scanner: LineScanner) -> str:
        """
        Select the text to compare from ``scanner`` after a successful
        ``advance()``.
        """
        if self.options.ignore_blank_lines:
            text = scanner.next_non_empty_line()
        else:
            text = scanner.text
        return self._normalise(text)

    def _step(
        self, expected: LineScanner, actual: LineScanner, diffs: List[LineDiff]
    ) -> CompareState:
        """
        Advance both scanners by one line and compare the selected text.

        If skipping blank lines exhausts one side, the line selected on the
        other side is left pending for the drain phase and reported as a
        one-sided difference, never as a mismatch against an empty line.

        :returns: The next comparison state. When a drain state is returned
                  the scanner being drained holds a line that has not been
                  reported yet.
        :rtype: ``CompareState``
        """
        state = _next_state(expected.advance(), actual.advance())
        if state is not CompareState.SYNCED:
            return state

        expected_text = self._select(expected)
        actual_text = self._select(actual)

        if expected.exhausted or actual.exhausted:
            return _next_state(not expected.exhausted, not actual.exhausted)

        if expected_text != actual_text:
            _log_debug_compare(
                "Mismatch at expected@%d/actual@%d: %r != %r",
                expected.line_num,
                actual.line_num,
                expected_text,
                actual_text,
            )
            diffs.append(
                LineDiff(
                    expected_content=_printable(expected_text),
                    actual_content=_printable(actual_text),
                    expected_line_num=expected.line_num,
                    actual_line_num=actual.line_num,
                )
            )
        return CompareState.SYNCED

    def _drain(self, scanner: LineScanner, is_expected: bool, diffs: List[LineDiff]):
        """
        Report the pending line of ``scanner`` and every line remaining in
        it as one-sided differences.
        """
        has_line = True
        while has_line:
            text = self._normalise(scanner.text)
            if self.options.ignore_blank_lines and not text.strip():
                _log_debug_compare(
                    "Ignoring trailing blank line %d in %s",
                    scanner.line_num,
                    scanner.name,
                )
            elif is_expected:
                diffs.append(
                    LineDiff(
                        expected_content=_printable(text),
                        expected_line_num=scanner.line_num,
                    )
                )
            else:
                diffs.append(
                    LineDiff(
                        actual_content=_printable(text),
                        actual_line_num=scanner.line_num,
                    )
                )
            has_line = scanner.advance()

    def compare_streams(
        self,
        expected: BinaryIO,
        actual: BinaryIO,
        path: str = "",
        encodings: Optional[Tuple[str, str]] = None,
    ) -> List[LineDiff]:
        """
        Compare two open binary streams line by line.

        :param expected: The expected content.
        :type expected: ``BinaryIO``
        :param actual: The actual content.
        :type actual: ``BinaryIO``
        :param path: The path being compared, used in log messages.
        :type path: ``str``
        :param encodings: Optional (expected, actual) codec names. The
                          configured encoding is used if unset.
        :type encodings: ``Optional[Tuple[str, str]]``
        :returns: The differences found in discovery order.
        :rtype: ``List[LineDiff]``
        """
        expected_encoding, actual_encoding = encodings or (
            self.options.encoding,
            self.options.encoding,
        )
        expected_scanner = LineScanner(
            expected, expected_encoding, name=f"expected {path}".rstrip()
        )
        actual_scanner = LineScanner(
            actual, actual_encoding, name=f"actual {path}".rstrip()
        )

        diffs: List[LineDiff] = []
        try:
            state = CompareState.SYNCED
            while state is CompareState.SYNCED:
                state = self._step(expected_scanner, actual_scanner, diffs)

            _log_debug_compare(
                "Lockstep comparison of '%s' ended in state %s", path, state.value
            )
            if state is CompareState.DRAIN_EXPECTED:
                self._drain(expected_scanner, True, diffs)
            elif state is CompareState.DRAIN_ACTUAL:
                self._drain(actual_scanner, False, diffs)
        finally:
            expected_scanner.detach()
            actual_scanner.detach()
        return diffs

    def _encodings(
        self, expected_tree: FileTree, actual_tree: FileTree, path: str
    ) -> Optional[Tuple[str, str]]:
        if self._detector is None:
            return None
        return (
            expected_tree.detect_encoding(path, self._detector),
            actual_tree.detect_encoding(path, self._detector),
        )

    def compare(
        self, expected_tree: FileTree, actual_tree: FileTree, path: str
    ) -> Optional[FileDiff]:
        """
        Compare the file at ``path`` in ``expected_tree`` and ``actual_tree``.

        A failure to open either file is recorded in the returned
        ``FileDiff`` and never raised.

        :param expected_tree: The reference tree.
        :type expected_tree: ``FileTree``
        :param actual_tree: The tree under test.
        :type actual_tree: ``FileTree``
        :param path: The relative path to compare.
        :type path: ``str``
        :returns: A ``FileDiff`` describing the differences, or ``None`` if
                  the files are equal under the configured options.
        :rtype: ``Optional[FileDiff]``
        """
        try:
            expected = expected_tree.open(path)
        except OSError as err:
            _log_debug_compare("Failed to open expected '%s': %s", path, err)
            return FileDiff(path, error=FscmpOpenError(path, "expected", err))

        with expected:
            try:
                actual = actual_tree.open(path)
            except OSError as err:
                _log_debug_compare("Failed to open actual '%s': %s", path, err)
                return FileDiff(path, error=FscmpOpenError(path, "actual", err))

            with actual:
                diffs = self.compare_streams(
                    expected,
                    actual,
                    path=path,
                    encodings=self._encodings(expected_tree, actual_tree, path),
                )

        if not diffs:
            _log_debug_compare("No differences found in '%s'", path)
            return None

        _log_debug_compare("Found %d differences in '%s'", len(diffs), path)
        return FileDiff(path, diffs=diffs)


def compare_file(
    expected_tree: FileTree,
    actual_tree: FileTree,
    path: str,
    options: Optional[CompareOptions] = None,
) -> Optional[FileDiff]:
    """
    Compare the file at ``path`` in two trees.

    :param expected_tree: The reference tree.
    :type expected_tree: ``FileTree``
    :param actual_tree: The tree under test.
    :type actual_tree: ``FileTree``
    :param path: The relative path to compare.
    :type path: ``str``
    :param options: Comparison options.
    :type options: ``Optional[CompareOptions]``
    :returns: A ``FileDiff`` or ``None`` if the files are equal.
    :rtype: ``Optional[FileDiff]``
    """
    return FileComparator(options).compare(expected_tree, actual_tree, path)
