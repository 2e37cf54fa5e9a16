# Copyright Red Hat
#
# fscmp/filetypes.py - File tree comparison encoding detection
#
# This file is part of the fscmp project.
#
# SPDX-License-Identifier: Apache-2.0
"""
File encoding detection support.
"""
from typing import Optional
from pathlib import Path
import logging
import codecs
import magic

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


#: Encodings reported by libmagic that do not name a text codec.
_NON_TEXT_ENCODINGS = ("binary", "unknown-8bit", "ebcdic")

# c9s magic does not have magic.error
if hasattr(magic, "error"):
    _MAGIC_ERRORS = (magic.error, OSError, ValueError)
else:
    _MAGIC_ERRORS = (OSError, ValueError)


class EncodingDetector:
    """
    Detect text encodings using ``magic`` from python3-file-magic.
    """

    def __init__(self, default: str = DEFAULT_ENCODING):
        """
        Initialise a new ``EncodingDetector``.

        :param default: The codec returned when detection fails or yields
                        something that is not a usable text codec.
        :type default: ``str``
        """
        self.default = default

    def _to_codec(self, what: str, encoding: Optional[str]) -> str:
        """
        Map a libmagic encoding name to a Python codec name.

        :param what: A description of the inspected object for logging.
        :param encoding: The encoding reported by libmagic.
        :returns: A codec name accepted by ``codecs.lookup()``.
        :rtype: ``str``
        """
        if not encoding or encoding.lower() in _NON_TEXT_ENCODINGS:
            _log_debug_compare(
                "No text encoding detected for %s (%s): using %s",
                what,
                encoding,
                self.default,
            )
            return self.default
        try:
            return codecs.lookup(encoding).name
        except LookupError:
            _log_debug_compare(
                "Unknown codec '%s' detected for %s: using %s",
                encoding,
                what,
                self.default,
            )
            return self.default

    def detect_from_file(self, file_path: Path) -> str:
        """
        Detect the encoding of the file at ``file_path``.

        :param file_path: The path to the file to inspect.
        :type file_path: ``Path``
        :returns: A codec name for decoding the file.
        :rtype: ``str``
        """
        try:
            fm = magic.detect_from_filename(str(file_path))
        except _MAGIC_ERRORS as err:
            _log_warn("Error detecting encoding for %s: %s", str(file_path), err)
            return self.default
        return self._to_codec(str(file_path), fm.encoding)

    def detect_from_content(self, content: bytes, name: str = "<content>") -> str:
        """
        Detect the encoding of an in-memory byte string.

        :param content: The bytes to inspect.
        :type content: ``bytes``
        :param name: A name for ``content`` used in log messages.
        :type name: ``str``
        :returns: A codec name for decoding ``content``.
        :rtype: ``str``
        """
        if not content:
            return self.default
        try:
            fm = magic.detect_from_content(content)
        except _MAGIC_ERRORS as err:
            _log_warn("Error detecting encoding for %s: %s", name, err)
            return self.default
        return self._to_codec(name, fm.encoding)
