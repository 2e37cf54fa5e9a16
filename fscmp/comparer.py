# Copyright Red Hat
#
# fscmp/comparer.py - File tree comparison top-level interface
#
# This file is part of the fscmp project.
#
# SPDX-License-Identifier: Apache-2.0
"""
Top-level file tree comparison interface.
"""
from typing import Optional, Union
from datetime import datetime
from pathlib import Path
import logging

from ._fscmp import FSCMP_SUBSYSTEM_COMPARE
from .compare import FileComparator
from .options import CompareOptions
from .results import FsDiff
from .treewalk import DirTree, FileTree

_log = logging.getLogger(__name__)

_log_debug = _log.debug
_log_info = _log.info
_log_warn = _log.warning
_log_error = _log.error


def _log_debug_compare(msg, *args, **kwargs):
    """A wrapper for compare subsystem debug logs."""
    _log.debug(msg, *args, extra={"subsystem": FSCMP_SUBSYSTEM_COMPARE}, **kwargs)


#: Types accepted wherever a tree is expected.
TreeArg = Union[FileTree, str, Path]


def _as_tree(tree: TreeArg) -> FileTree:
    """
    Return ``tree`` as a ``FileTree``, wrapping directory paths in a
    ``DirTree``.
    """
    if isinstance(tree, FileTree):
        return tree
    return DirTree(tree)


class FsComparer:
    """
    Top-level interface for comparing an expected tree with an actual tree.
    """

    def __init__(self, options: Optional[CompareOptions] = None):
        """
        Initialise a new ``FsComparer``.

        :param options: Options to control this ``FsComparer`` instance.
        :type options: ``Optional[CompareOptions]``
        """
        self.options: CompareOptions = options or CompareOptions()
        self.file_comparator: FileComparator = FileComparator(self.options)

    def compare_trees(self, expected: TreeArg, actual: TreeArg) -> FsDiff:
        """
        Compare every regular file of ``expected`` with the file at the same
        path in ``actual``.

        Files that compare equal are omitted from the result. A file that
        cannot be opened in either tree is reported with its open error.

        :param expected: The reference tree or the path to its root.
        :type expected: ``Union[FileTree, str, Path]``
        :param actual: The tree under test or the path to its root.
        :type actual: ``Union[FileTree, str, Path]``
        :returns: The differences found, in traversal order.
        :rtype: ``FsDiff``
        :raises FscmpTraversalError: If ``expected`` cannot be enumerated.
        """
        expected_tree = _as_tree(expected)
        actual_tree = _as_tree(actual)

        _log_debug_compare(
            "Comparing %s with %s using options: %s",
            expected_tree.name,
            actual_tree.name,
            repr(self.options),
        )

        start_time = datetime.now()
        results = FsDiff()
        count = 0
        for path in expected_tree.walk(self.options):
            count += 1
            file_diff = self.file_comparator.compare(expected_tree, actual_tree, path)
            if file_diff is not None:
                results.append(file_diff)
        end_time = datetime.now()

        _log_info(
            "Compared %d files in %s (%d differ)",
            count,
            end_time - start_time,
            len(results),
        )
        return results


def equal_filesystems(
    expected: TreeArg,
    actual: TreeArg,
    options: Optional[CompareOptions] = None,
) -> FsDiff:
    """
    Compare two file trees.

    An empty result means the trees are equivalent under ``options``.

    :param expected: The reference tree or the path to its root.
    :type expected: ``Union[FileTree, str, Path]``
    :param actual: The tree under test or the path to its root.
    :type actual: ``Union[FileTree, str, Path]``
    :param options: Comparison options.
    :type options: ``Optional[CompareOptions]``
    :returns: The differences found.
    :rtype: ``FsDiff``
    :raises FscmpTraversalError: If ``expected`` cannot be enumerated.
    """
    return FsComparer(options).compare_trees(expected, actual)
