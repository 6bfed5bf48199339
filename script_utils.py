#!/usr/bin/python3
"""Utility functions shared by the line selection scripts.

This module contains common utilities such as wrappers for
error/warning reporting, debug tracing, opening of input sources
and decoding of raw input lines.

"""

import os
import sys

# Debugging verbosity level (0 -> no output)
flag_debug = 0

# Unit testing mode. If set to 1, throw exception instead of calling exit()
flag_unittest = 0


def verbose(level, msg):
  """Print debug trace output of verbosity level is >= value in 'level'."""
  if level <= flag_debug:
    sys.stderr.write(msg + "\n")


def verbosity_level():
  """Return debug trace level."""
  return flag_debug


def increment_verbosity():
  """Increment debug trace level by 1."""
  global flag_debug
  flag_debug += 1


def decrement_verbosity():
  """Lower debug trace level by 1."""
  global flag_debug
  flag_debug -= 1


def unit_test_enable():
  """Set unit testing mode."""
  global flag_unittest
  sys.stderr.write("+++ unit testing mode enabled +++\n")
  flag_unittest = 1


def warning(msg):
  """Issue a warning to stderr."""
  sys.stderr.write("warning: " + msg + "\n")


def error(msg):
  """Issue an error to stderr, then exit."""
  errm = "error: " + msg + "\n"
  sys.stderr.write(errm)
  if flag_unittest:
    raise Exception(errm)
  else:
    sys.exit(1)


# perform default locale setup if needed
def setdeflanglocale():
  if "LANG" not in os.environ:
    warning("no env setting for LANG -- using default values")
    os.environ["LANG"] = "en_US.UTF-8"
    os.environ["LANGUAGE"] = "en_US:"


def open_input(path):
  """Open 'path' for binary reading; '-' means stdin."""
  if path == "-":
    verbose(2, "+ open_input: using stdin")
    return sys.stdin.buffer
  verbose(2, "+ open_input: opening %s" % path)
  try:
    return open(path, "rb")
  except IOError as e:
    error("unable to open %s for reading: %s" % (path, e.strerror))


def chomp(line):
  """Strip a trailing \\n or \\r\\n from line (bytes or str)."""
  nl = b"\n" if isinstance(line, bytes) else "\n"
  cr = b"\r" if isinstance(line, bytes) else "\r"
  if line.endswith(nl):
    line = line[:-1]
    if line.endswith(cr):
      line = line[:-1]
  return line


def decode_line(raw):
  """Convert a raw line read from a source into text.

  Byte lines are decoded as UTF-8 (UnicodeDecodeError propagates to the
  caller); str lines from text streams are passed through. The line
  terminator is removed in either case.
  """
  if isinstance(raw, bytes):
    raw = raw.decode("utf-8")
  return chomp(raw)
