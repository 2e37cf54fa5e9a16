# Copyright Red Hat
#
# fscmp/__init__.py - File tree comparison package initialisation
#
# This file is part of the fscmp project.
#
# SPDX-License-Identifier: Apache-2.0
"""
Fscmp top-level package.

Compares an expected file tree with an actual file tree line by line. The
main entry points are ``equal_filesystems()``, ``FsComparer`` and
``CompareOptions``.
"""
from ._fscmp import *  # noqa: F401, F403
from ._fscmp import __all__ as _fscmp_all

from .options import CompareOptions
from .results import FileDiff, FsDiff, LineDiff
from .scanner import LineScanner
from .compare import FileComparator, compare_file
from .treewalk import DirTree, FileTree, MapTree
from .comparer import FsComparer, equal_filesystems

__version__ = "0.1.0"

__all__ = _fscmp_all + [
    "CompareOptions",
    "FileDiff",
    "FsDiff",
    "LineDiff",
    "LineScanner",
    "FileComparator",
    "compare_file",
    "DirTree",
    "FileTree",
    "MapTree",
    "FsComparer",
    "equal_filesystems",
]
