# Copyright Red Hat
#
# fscmp/scanner.py - File tree comparison line scanner
#
# This file is part of the fscmp project.
#
# SPDX-License-Identifier: Apache-2.0
"""
Counted, sequential line access to a binary stream.
"""
from typing import BinaryIO, Optional
import logging
import io

from ._fscmp import FSCMP_SUBSYSTEM_COMPARE
from .options import DEFAULT_ENCODING

_log = logging.getLogger(__name__)

_log_debug = _log.debug
_log_info = _log.info
_log_warn = _log.warning
_log_error = _log.error


def _log_debug_compare(msg, *args, **kwargs):
    """A wrapper for compare subsystem debug logs."""
    _log.debug(msg, *args, extra={"subsystem": FSCMP_SUBSYSTEM_COMPARE}, **kwargs)


class LineScanner:
    """
    Line scanner over a binary stream.

    ``line_num`` counts physical lines: it is incremented once for every
    call to ``advance()``, including the call that finds the end of the
    stream.
    """

    def __init__(
        self, stream: BinaryIO, encoding: str = DEFAULT_ENCODING, name: str = ""
    ):
        """
        Initialise a new ``LineScanner`` object.

        :param stream: The binary stream to read lines from. The caller
                       retains ownership of the stream and must close it.
                       The stream is released by ``detach()`` or when the
                       scanner reaches the end of the stream.
        :type stream: ``BinaryIO``
        :param encoding: The codec used to decode the stream. Undecodable
                         bytes are kept as surrogate escapes so that lines
                         with different bytes never compare equal.
        :type encoding: ``str``
        :param name: An optional name for this stream used in log messages.
        :type name: ``str``
        """
        self._reader: Optional[io.TextIOWrapper] = io.TextIOWrapper(
            stream, encoding=encoding, errors="surrogateescape", newline="\n"
        )
        self._text: Optional[str] = None
        self._line_num: int = 0
        self._exhausted: bool = False
        self.name: str = name

    def __repr__(self) -> str:
        return (
            f"LineScanner(name={self.name!r}, line_num={self._line_num}, "
            f"exhausted={self._exhausted})"
        )

    @property
    def line_num(self) -> int:
        """
        The number of physical lines visited by ``advance()``.

        :returns: The current 1-based line number.
        :rtype: ``int``
        """
        return self._line_num

    @property
    def text(self) -> Optional[str]:
        """
        The most recently read line with its line terminator removed, or
        ``None`` if no line has been read or the stream is exhausted.

        :rtype: ``Optional[str]``
        """
        return self._text

    @property
    def exhausted(self) -> bool:
        """
        ``True`` once ``advance()`` has reached the end of the stream.

        :rtype: ``bool``
        """
        return self._exhausted

    def _readline(self) -> str:
        """
        Read one raw line from the stream. A read error is reported as the
        end of the stream.
        """
        if self._reader is None:
            return ""
        try:
            return self._reader.readline()
        except OSError as err:
            _log_warn(
                "Error reading %s at line %d, treating as end of file: %s",
                self.name or "stream",
                self._line_num,
                err,
            )
            return ""

    def advance(self) -> bool:
        """
        Read the next physical line from the stream.

        :returns: ``True`` if a line was read or ``False`` if the stream is
                  exhausted.
        :rtype: ``bool``
        """
        self._line_num += 1
        if self._exhausted:
            return False

        line = self._readline()
        if not line:
            _log_debug_compare(
                "End of %s after %d lines", self.name or "stream", self._line_num - 1
            )
            self._exhausted = True
            self._text = None
            self.detach()
            return False

        if line.endswith("\n"):
            line = line[:-1]
            if line.endswith("\r"):
                line = line[:-1]
        self._text = line
        return True

    def next_non_empty_line(self) -> str:
        """
        Return the current line if it is not blank, otherwise advance to the
        next line that is not blank after stripping whitespace and return
        its stripped text.

        :returns: The next non-blank line, or the empty string if the stream
                  was exhausted first.
        :rtype: ``str``
        """
        text = self._text or ""
        if text.strip():
            return text

        start = self._line_num
        while self.advance():
            text = self._text.strip()
            if text:
                if self._line_num > start:
                    _log_debug_compare(
                        "Skipped blank lines %d-%d in %s",
                        start,
                        self._line_num - 1,
                        self.name or "stream",
                    )
                return text
        return ""

    def detach(self):
        """
        Release the underlying binary stream without closing it. Once
        detached the scanner behaves as if the stream were exhausted.
        """
        if self._reader is None:
            return
        reader, self._reader = self._reader, None
        if not reader.buffer.closed:
            reader.detach()
