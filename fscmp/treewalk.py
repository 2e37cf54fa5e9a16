# Copyright Red Hat
#
# fscmp/treewalk.py - File tree comparison tree walk
#
# This file is part of the fscmp project.
#
# SPDX-License-Identifier: Apache-2.0
"""
File tree abstractions: enumerate regular files and open them for reading.
"""
from typing import BinaryIO, Dict, Iterator, Optional, Union, TYPE_CHECKING
from abc import ABC, abstractmethod
from fnmatch import fnmatch
from pathlib import Path, PurePosixPath
import logging
import errno
import stat
import io
import os

from ._fscmp import FSCMP_SUBSYSTEM_TREEWALK, FscmpTraversalError
from .options import CompareOptions

if TYPE_CHECKING:
    from .filetypes import EncodingDetector

_log = logging.getLogger(__name__)

_log_debug = _log.debug
_log_info = _log.info
_log_warn = _log.warning
_log_error = _log.error


def _log_debug_treewalk(msg, *args, **kwargs):
    """A wrapper for treewalk subsystem debug logs."""
    _log.debug(msg, *args, extra={"subsystem": FSCMP_SUBSYSTEM_TREEWALK}, **kwargs)


def _is_excluded(path: str, options: CompareOptions) -> bool:
    """
    Return ``True`` if ``path`` matches one of the exclude patterns.
    """
    return any(fnmatch(path, pat) for pat in options.exclude_patterns)


def _is_selected(path: str, options: CompareOptions) -> bool:
    """
    Return ``True`` if the regular file at ``path`` should be compared
    according to the include and exclude patterns in ``options``.

    :param path: A relative path using '/' as the separator.
    :type path: ``str``
    :param options: The options for this comparison.
    :type options: ``CompareOptions``
    :rtype: ``bool``
    """
    if _is_excluded(path, options):
        return False
    if options.file_patterns and not any(
        fnmatch(path, pat) for pat in options.file_patterns
    ):
        return False
    return True


class FileTree(ABC):
    """
    Base class for a tree of files that can be compared.

    Paths are relative to the root of the tree and use '/' as the
    separator on all platforms.
    """

    #: A name for this tree used in log messages
    name: str = ""

    @abstractmethod
    def open(self, path: str) -> BinaryIO:
        """
        Open the file at ``path`` for binary reading.

        :param path: The relative path to open.
        :type path: ``str``
        :returns: A readable binary stream owned by the caller.
        :rtype: ``BinaryIO``
        :raises OSError: If the file cannot be opened.
        """

    @abstractmethod
    def walk(self, options: Optional[CompareOptions] = None) -> Iterator[str]:
        """
        Enumerate the regular files in this tree.

        Paths are yielded lazily, depth first, in lexical order of the
        entry names within each directory.

        :param options: Options selecting the files to enumerate.
        :type options: ``Optional[CompareOptions]``
        :returns: An iterator over relative file paths.
        :rtype: ``Iterator[str]``
        :raises FscmpTraversalError: If the tree cannot be enumerated.
        """

    @abstractmethod
    def detect_encoding(self, path: str, detector: "EncodingDetector") -> str:
        """
        Detect the encoding of the file at ``path``.

        :param path: The relative path to inspect.
        :type path: ``str``
        :param detector: The encoding detector to use.
        :type detector: ``EncodingDetector``
        :returns: A codec name.
        :rtype: ``str``
        """


class DirTree(FileTree):
    """
    A file tree rooted at a directory in the host file system.
    """

    def __init__(self, root: Union[str, Path]):
        """
        Initialise a new ``DirTree`` object.

        :param root: The path to the root directory of this tree.
        :type root: ``Union[str, Path]``
        """
        self.root: Path = Path(root)
        self.name: str = str(root)

    def __repr__(self):
        return f"DirTree({str(self.root)!r})"

    def _full_path(self, path: str) -> Path:
        return self.root.joinpath(*PurePosixPath(path).parts)

    def open(self, path: str) -> BinaryIO:
        return open(self._full_path(path), "rb")

    def detect_encoding(self, path: str, detector: "EncodingDetector") -> str:
        return detector.detect_from_file(self._full_path(path))

    def _scan(self, dir_path: Path, rel_path: str, options: CompareOptions):
        """
        Recursively yield the selected regular files below ``dir_path``.
        """
        try:
            with os.scandir(dir_path) as it:
                entries = sorted(it, key=lambda e: e.name)
        except OSError as err:
            raise FscmpTraversalError(
                f"Cannot read directory {dir_path}: {err.strerror or err}"
            ) from err

        for entry in entries:
            child = f"{rel_path}/{entry.name}" if rel_path else entry.name
            try:
                path_stat = os.lstat(entry.path)
            except FileNotFoundError:
                # Path vanished between discovery and stat; skip it.
                continue
            except OSError as err:
                raise FscmpTraversalError(
                    f"Cannot stat {entry.path}: {err.strerror or err}"
                ) from err

            if stat.S_ISDIR(path_stat.st_mode):
                if _is_excluded(child, options):
                    _log_debug_treewalk("Excluding directory '%s'", child)
                    continue
                yield from self._scan(Path(entry.path), child, options)
                continue

            if stat.S_ISLNK(path_stat.st_mode):
                if not options.follow_symlinks:
                    _log_info("Skipping symbolic link '%s': not following links", child)
                    continue
                try:
                    path_stat = os.stat(entry.path)
                except OSError:
                    _log_debug_treewalk("Found dangling symbolic link '%s'", child)
                    continue

            if not stat.S_ISREG(path_stat.st_mode):
                _log_debug_treewalk("Skipping non-regular file '%s'", child)
                continue

            if _is_selected(child, options):
                yield child

    def walk(self, options: Optional[CompareOptions] = None) -> Iterator[str]:
        options = options or CompareOptions()
        if not self.root.is_dir():
            raise FscmpTraversalError(f"Tree root {self.root} is not a directory")
        _log_info("Gathering paths to compare from %s", self.root)
        return self._scan(self.root, "", options)


class MapTree(FileTree):
    """
    An in-memory file tree built from a mapping of relative paths to
    file content.
    """

    def __init__(self, files: Dict[str, Union[bytes, str]], name: str = "<map>"):
        """
        Initialise a new ``MapTree`` object.

        :param files: A mapping of relative paths to file content. ``str``
                      content is encoded as UTF-8.
        :type files: ``Dict[str, Union[bytes, str]]``
        :param name: A name for this tree used in log messages.
        :type name: ``str``
        """
        self.files: Dict[str, bytes] = {
            str(PurePosixPath(path)): (
                data.encode("utf8") if isinstance(data, str) else bytes(data)
            )
            for path, data in files.items()
        }
        self.name: str = name

    def __repr__(self):
        return f"MapTree({sorted(self.files)!r}, name={self.name!r})"

    def _content(self, path: str) -> bytes:
        key = str(PurePosixPath(path))
        if key not in self.files:
            if any(other.startswith(key + "/") for other in self.files):
                raise IsADirectoryError(errno.EISDIR, os.strerror(errno.EISDIR), path)
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), path)
        return self.files[key]

    def open(self, path: str) -> BinaryIO:
        return io.BytesIO(self._content(path))

    def detect_encoding(self, path: str, detector: "EncodingDetector") -> str:
        try:
            return detector.detect_from_content(self._content(path), name=path)
        except OSError:
            return detector.default

    def walk(self, options: Optional[CompareOptions] = None) -> Iterator[str]:
        options = options or CompareOptions()
        for path in sorted(self.files, key=lambda p: PurePosixPath(p).parts):
            parents = PurePosixPath(path).parents
            if any(_is_excluded(str(p), options) for p in parents if str(p) != "."):
                continue
            if _is_selected(path, options):
                yield path
