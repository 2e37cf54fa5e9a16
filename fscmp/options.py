# Copyright Red Hat
#
# fscmp/options.py - File tree comparison options
#
# This file is part of the fscmp project.
#
# SPDX-License-Identifier: Apache-2.0
"""
File tree comparison options.
"""
from dataclasses import dataclass, field, fields
from typing import Tuple, Union
from argparse import Namespace
import logging
import codecs

from ._fscmp import FscmpArgumentError

_log = logging.getLogger(__name__)

_log_debug = _log.debug
_log_info = _log.info
_log_warn = _log.warning
_log_error = _log.error

#: Default codec used to decode file content into lines.
DEFAULT_ENCODING = "utf8"


@dataclass(frozen=True)
class CompareOptions:
    """
    File tree comparison options.

    ``ignore_line_spaces`` and ``ignore_blank_lines`` form the
    normalisation policy applied to every compared line; the remaining
    options control how the expected tree is walked and how file content
    is decoded.
    """

    #: Strip leading and trailing whitespace from lines before comparing
    ignore_line_spaces: bool = False
    #: Skip lines that are empty after stripping whitespace
    ignore_blank_lines: bool = False
    #: File patterns to include (glob notation)
    file_patterns: Tuple[str, ...] = field(default_factory=tuple)
    #: File patterns to exclude (glob notation)
    exclude_patterns: Tuple[str, ...] = field(default_factory=tuple)
    #: Compare the targets of symbolic links to regular files
    follow_symlinks: bool = False
    #: Codec used to decode file content
    encoding: str = DEFAULT_ENCODING
    #: Detect the encoding of each file using libmagic
    detect_encoding: bool = False

    def __post_init__(self):
        try:
            codecs.lookup(self.encoding)
        except LookupError as err:
            raise FscmpArgumentError(f"Unknown encoding: {self.encoding}") from err

    def __str__(self):
        """
        Return a human readable string representation of this
        ``CompareOptions`` instance.

        :returns: A human readable string.
        :rtype: ``str``
        """
        items = [
            (key, val) if not isinstance(val, tuple) else (key, " ".join(val))
            for key, val in self.__dict__.items()
        ]
        return "\n".join(f"{key}={val}" for key, val in items)

    @classmethod
    def from_cmd_args(cls, cmd_args: Namespace) -> "CompareOptions":
        """
        Initialise CompareOptions from command line arguments.

        Construct a new ``CompareOptions`` object from the command line
        arguments in ``cmd_args``. Arguments that do not name an option
        are ignored and missing options take their default value.

        :param cmd_args: The command line selection arguments.
        :type cmd_args: ``Namespace``
        :returns: A new ``CompareOptions`` instance
        :rtype: ``CompareOptions``
        """

        def get_value(name: str) -> Union[bool, str, Tuple[str, ...]]:
            """
            Get a value from ``cmd_args``, converting lists to tuples.

            :param name: The name of the argument.
            :type name: ``str``
            :returns: The argument converted to a tuple if appropriate.
            :rtype: ``Union[bool, str, Tuple[str, ...]]``
            """
            attr = getattr(cmd_args, name)
            if isinstance(attr, list):
                return tuple(attr)
            if attr is None and name in ("file_patterns", "exclude_patterns"):
                return ()
            if attr is None and name == "encoding":
                return DEFAULT_ENCODING
            return attr

        field_names = {f.name for f in fields(cls)}
        kwargs = {
            name: get_value(name) for name in field_names if hasattr(cmd_args, name)
        }
        options = cls(**kwargs)
        _log_debug("Initialised CompareOptions from arguments: %s", repr(options))
        return options
