# Copyright Red Hat
#
# fscmp/__main__.py - File tree comparison command line driver
#
# This file is part of the fscmp project.
#
# SPDX-License-Identifier: Apache-2.0
"""
Run the fscmp command line interface: ``python -m fscmp``.
"""
import sys

from fscmp.command import main


def run():
    """Console script entry point."""
    sys.exit(main(sys.argv))


if __name__ == "__main__":
    run()
