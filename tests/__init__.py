# Copyright Red Hat
#
# tests/__init__.py - File tree comparison test package
#
# This file is part of the fscmp project.
#
# SPDX-License-Identifier: Apache-2.0
import logging

log = logging.getLogger()
log.setLevel(logging.DEBUG)
formatter = logging.Formatter('%(asctime)s %(levelname)s %(name)s %(message)s')
file_handler = logging.FileHandler("test.log")
file_handler.setFormatter(formatter)
console_handler = logging.StreamHandler()
console_handler.setFormatter(formatter)
log.addHandler(file_handler)
log.addHandler(console_handler)


class MockArgs(object):
    debug = None
    verbose = 0
    version = False
    ignore_line_spaces = False
    ignore_blank_lines = False
    file_patterns = None
    exclude_patterns = None
    follow_symlinks = False
    encoding = None
    detect_encoding = False
    output_format = None
    pretty = False
    expected = None
    actual = None
