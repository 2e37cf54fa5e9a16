# Copyright Red Hat
#
# fscmp/_fscmp.py - File tree comparison global definitions
#
# This file is part of the fscmp project.
#
# SPDX-License-Identifier: Apache-2.0
"""
Global definitions for the top-level fscmp package.
"""
import logging

_log = logging.getLogger("fscmp")

_log_debug = _log.debug
_log_info = _log.info
_log_warn = _log.warning
_log_error = _log.error

# Fscmp debugging subsystem mask
FSCMP_DEBUG_COMPARE = 1
FSCMP_DEBUG_TREEWALK = 2
FSCMP_DEBUG_COMMAND = 4
FSCMP_DEBUG_ALL = FSCMP_DEBUG_COMPARE | FSCMP_DEBUG_TREEWALK | FSCMP_DEBUG_COMMAND

# Fscmp debugging subsystem names
FSCMP_SUBSYSTEM_COMPARE = "fscmp.compare"
FSCMP_SUBSYSTEM_TREEWALK = "fscmp.treewalk"
FSCMP_SUBSYSTEM_COMMAND = "fscmp.command"

_DEBUG_MASK_TO_SUBSYSTEM = {
    FSCMP_DEBUG_COMPARE: FSCMP_SUBSYSTEM_COMPARE,
    FSCMP_DEBUG_TREEWALK: FSCMP_SUBSYSTEM_TREEWALK,
    FSCMP_DEBUG_COMMAND: FSCMP_SUBSYSTEM_COMMAND,
}

_debug_subsystems = set()


class SubsystemFilter(logging.Filter):
    """
    Filters DEBUG records based on a set of enabled subsystem names.
    Non-DEBUG records or DEBUG records without a 'subsystem' attribute
    are always passed through.
    """

    def __init__(self, name=""):
        super().__init__(name)
        self.enabled_subsystems = set(_debug_subsystems)

    def filter(self, record):
        if record.levelno != logging.DEBUG:
            return True

        if not hasattr(record, "subsystem"):
            return True

        return record.subsystem in self.enabled_subsystems

    def set_debug_subsystems(self, subsystems):
        """Sets the collection of subsystems to allow."""
        self.enabled_subsystems = set(subsystems)


def set_debug_mask(mask):
    """
    Set the debug mask for the ``fscmp`` package.

    :param mask: the logical OR of the ``FSCMP_DEBUG_*``
                 values to log.
    :rtype: None
    """
    # pylint: disable=global-statement
    global _debug_subsystems

    if mask < 0 or mask > FSCMP_DEBUG_ALL:
        raise ValueError(f"Invalid fscmp debug mask: {mask}")

    enabled_subsystems = [
        subsystem_name
        for flag, subsystem_name in _DEBUG_MASK_TO_SUBSYSTEM.items()
        if mask & flag
    ]

    fscmp_log = logging.getLogger("fscmp")
    for handler in fscmp_log.handlers:
        for f in handler.filters:
            if isinstance(f, SubsystemFilter):
                f.set_debug_subsystems(enabled_subsystems)

    _debug_subsystems = set(enabled_subsystems)


#
# Fscmp exception types
#


class FscmpError(Exception):
    """
    Base class for file tree comparison errors.
    """


class FscmpOpenError(FscmpError):
    """
    A file could not be opened for reading in one of the compared trees.
    """

    def __init__(self, path: str, tree: str, err: OSError):
        """
        Initialise a new ``FscmpOpenError`` exception.

        :param path: The relative path that failed to open.
        :param tree: The name of the tree ("expected" or "actual").
        :param err: The underlying ``OSError``.
        """
        self.path, self.tree, self.err = path, tree, err
        msg = f"{tree} {path}: {err.strerror or err}"
        super().__init__(msg)


class FscmpTraversalError(FscmpError):
    """
    The expected tree could not be enumerated.
    """


class FscmpArgumentError(FscmpError):
    """
    An invalid argument was passed to a fscmp API call.
    """


__all__ = [
    "FSCMP_DEBUG_COMPARE",
    "FSCMP_DEBUG_TREEWALK",
    "FSCMP_DEBUG_COMMAND",
    "FSCMP_DEBUG_ALL",
    "FSCMP_SUBSYSTEM_COMPARE",
    "FSCMP_SUBSYSTEM_TREEWALK",
    "FSCMP_SUBSYSTEM_COMMAND",
    "SubsystemFilter",
    "set_debug_mask",
    "FscmpError",
    "FscmpOpenError",
    "FscmpTraversalError",
    "FscmpArgumentError",
]
