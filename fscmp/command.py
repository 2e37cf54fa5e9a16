# Copyright Red Hat
#
# fscmp/command.py - File tree comparison command interface
#
# This file is part of the fscmp project.
#
# SPDX-License-Identifier: Apache-2.0
"""The ``fscmp.command`` module provides the fscmp command line
interface infrastructure, and a simple procedural interface to the
``fscmp`` library modules.
"""
from argparse import ArgumentParser
from os.path import basename
import logging

from fscmp import (
    FSCMP_DEBUG_COMPARE,
    FSCMP_DEBUG_TREEWALK,
    FSCMP_DEBUG_COMMAND,
    FSCMP_DEBUG_ALL,
    FSCMP_SUBSYSTEM_COMMAND,
    FscmpError,
    SubsystemFilter,
    set_debug_mask,
    __version__,
)
from .comparer import FsComparer
from .options import CompareOptions, DEFAULT_ENCODING
from .results import FsDiff

DIFF_FORMATS = FsDiff.DIFF_FORMATS

#: Exit status when the trees are equal
EXIT_EQUAL = 0
#: Exit status when differences were found
EXIT_DIFFERENT = 1
#: Exit status when the comparison could not be performed
EXIT_ERROR = 2

_log = logging.getLogger(__name__)

_log_debug = _log.debug
_log_info = _log.info
_log_warn = _log.warning
_log_error = _log.error


def _log_debug_command(msg, *args, **kwargs):
    """A wrapper for command subsystem debug logs."""
    _log.debug(msg, *args, extra={"subsystem": FSCMP_SUBSYSTEM_COMMAND}, **kwargs)


_DEFAULT_LOG_LEVEL = logging.WARNING
_CONSOLE_HANDLER = None


def compare_trees(expected, actual, options=None):
    """
    Compare the directory trees rooted at ``expected`` and ``actual``.

    :param expected: Path to the root of the reference tree.
    :param actual: Path to the root of the tree under test.
    :param options: ``CompareOptions`` for the comparison.
    :returns: The differences found.
    :rtype: ``FsDiff``
    """
    return FsComparer(options).compare_trees(expected, actual)


def format_results(results, output_formats, pretty=False):
    """
    Render ``results`` in each of ``output_formats``.

    :param results: The comparison results to format.
    :type results: ``FsDiff``
    :param output_formats: A list of ``DIFF_FORMATS`` names.
    :param pretty: Indent JSON output.
    :returns: The rendered output, formats separated by a blank line.
    :rtype: ``str``
    """
    rendered = []
    for output_format in output_formats:
        if output_format == "paths":
            rendered.append("\n".join(results.paths()))
        elif output_format == "full":
            rendered.append(results.full().rstrip("\n"))
        elif output_format == "short":
            rendered.append(results.short())
        elif output_format == "json":
            rendered.append(results.json(pretty=pretty))
        else:
            raise ValueError(f"Unknown diff format: {output_format}")
    return "\n\n".join(rendered)


def _compare_cmd(cmd_args):
    """
    Compare command handler.

    :param cmd_args: Command line arguments for the command
    :returns: integer status code returned from ``main()``
    """
    output_formats = cmd_args.output_format or ["full"]

    if cmd_args.pretty and "json" not in output_formats:
        _log_error("Option --pretty only supported with --output-format=json")
        return EXIT_ERROR

    try:
        options = CompareOptions.from_cmd_args(cmd_args)
    except FscmpError as err:
        _log_error("Invalid options: %s", err)
        return EXIT_ERROR

    _log_debug_command("Comparing with options:\n%s", options)

    try:
        results = compare_trees(cmd_args.expected, cmd_args.actual, options)
    except FscmpError as err:
        _log_error("Comparison failed: %s", err)
        return EXIT_ERROR

    if results:
        print(format_results(results, output_formats, pretty=cmd_args.pretty))
        return EXIT_DIFFERENT
    if "json" in output_formats:
        print(results.json(pretty=cmd_args.pretty))
    return EXIT_EQUAL


def setup_logging(cmd_args):
    """
    Set up fscmp logging.
    """
    # pylint: disable=global-statement
    global _CONSOLE_HANDLER
    level = _DEFAULT_LOG_LEVEL
    if cmd_args.verbose and cmd_args.verbose > 1:
        level = logging.DEBUG
    elif cmd_args.verbose and cmd_args.verbose > 0:
        level = logging.INFO

    fscmp_log = logging.getLogger("fscmp")
    formatter = logging.Formatter("%(levelname)s - %(message)s")
    fscmp_log.setLevel(level)
    if fscmp_log.hasHandlers():
        fscmp_log.handlers.clear()

    # Subsystem log filtering
    _fscmp_subsystem_filter = SubsystemFilter("fscmp")

    _CONSOLE_HANDLER = logging.StreamHandler()
    _CONSOLE_HANDLER.setLevel(level)
    _CONSOLE_HANDLER.setFormatter(formatter)
    _CONSOLE_HANDLER.addFilter(_fscmp_subsystem_filter)

    fscmp_log.addHandler(_CONSOLE_HANDLER)


def shutdown_logging():
    """
    Shut down fscmp logging.
    """
    logging.shutdown()


def set_debug(debug_arg):
    """
    Set debugging mask from command line argument.
    """
    if not debug_arg:
        return

    mask_map = {
        "compare": FSCMP_DEBUG_COMPARE,
        "treewalk": FSCMP_DEBUG_TREEWALK,
        "command": FSCMP_DEBUG_COMMAND,
        "all": FSCMP_DEBUG_ALL,
    }

    mask = 0
    for name in debug_arg.split(","):
        if name not in mask_map:
            raise ValueError(f"Unknown debug option: {name}")
        mask |= mask_map[name]
    set_debug_mask(mask)


def _add_compare_args(parser):
    parser.add_argument(
        "-l",
        "--ignore-line-spaces",
        action="store_true",
        help="Ignore leading and trailing whitespace on each line",
    )
    parser.add_argument(
        "-b",
        "--ignore-blank-lines",
        action="store_true",
        help="Ignore lines that are empty or contain only whitespace",
    )
    parser.add_argument(
        "-i",
        "--include-pattern",
        type=str,
        action="append",
        metavar="PATTERN",
        dest="file_patterns",
        default=None,
        help="File patterns to include (glob notation)",
    )
    parser.add_argument(
        "-x",
        "--exclude-pattern",
        type=str,
        action="append",
        metavar="PATTERN",
        dest="exclude_patterns",
        default=None,
        help="File patterns to exclude (glob notation)",
    )
    parser.add_argument(
        "-F",
        "--follow-symlinks",
        action="store_true",
        help="Compare the targets of symbolic links to regular files",
    )
    parser.add_argument(
        "-e",
        "--encoding",
        type=str,
        metavar="ENCODING",
        default=DEFAULT_ENCODING,
        help=f"Encoding used to decode files (default: {DEFAULT_ENCODING})",
    )
    parser.add_argument(
        "-E",
        "--detect-encoding",
        action="store_true",
        help="Detect the encoding of each file using libmagic",
    )
    parser.add_argument(
        "-o",
        "--output-format",
        type=str,
        action="append",
        metavar="FORMAT",
        choices=DIFF_FORMATS,
        default=None,
        help=f"Output format for differences ({', '.join(DIFF_FORMATS)})",
    )
    parser.add_argument(
        "-p",
        "--pretty",
        action="store_true",
        help="Pretty print output if supported by output format",
    )
    parser.add_argument(
        "expected",
        metavar="EXPECTED",
        type=str,
        help="Root directory of the reference tree",
    )
    parser.add_argument(
        "actual",
        metavar="ACTUAL",
        type=str,
        help="Root directory of the tree to check",
    )


def main(args):
    """
    Main entry point for fscmp.
    """
    parser = ArgumentParser(
        description="Compare file trees line by line", prog=basename(args[0])
    )

    # Global arguments
    parser.add_argument(
        "-d",
        "--debug",
        metavar="DEBUGOPTS",
        type=str,
        help="A list of debug options to enable (compare, treewalk, command, all)",
    )
    parser.add_argument("-v", "--verbose", help="Enable verbose output", action="count")
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        help="Report the version number of fscmp",
        version=__version__,
    )
    _add_compare_args(parser)

    cmd_args = parser.parse_args(args[1:])

    status = EXIT_ERROR

    try:
        set_debug(cmd_args.debug)
    except ValueError as err:
        print(err)
        parser.print_help()
        return status

    setup_logging(cmd_args)

    _log_debug_command("Parsed %s", " ".join(args[1:]))

    if cmd_args.debug:
        status = _compare_cmd(cmd_args)
    else:
        try:
            status = _compare_cmd(cmd_args)
        # pylint: disable=broad-except
        except KeyboardInterrupt:  # pragma: no cover
            _log_info("Exiting on user cancel")
        except Exception as err:
            _log_error("Command failed: %s", err)

    shutdown_logging()
    return status


# vim: set et ts=4 sw=4 :
