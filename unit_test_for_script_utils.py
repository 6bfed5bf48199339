#!/usr/bin/python3
"""Unit tests for script utils.

"""

import io
import os
import tempfile
import unittest

import script_utils as u


class TestScriptUtilsMethods(unittest.TestCase):

  @classmethod
  def setUpClass(cls):
    u.unit_test_enable()
    u.setdeflanglocale()

  def test_error(self):
    with self.assertRaises(Exception):
      u.error("something bad")

  def test_verbosity(self):
    lev = u.verbosity_level()
    u.increment_verbosity()
    self.assertEqual(u.verbosity_level(), lev + 1)
    u.decrement_verbosity()
    self.assertEqual(u.verbosity_level(), lev)

  def test_chomp(self):
    self.assertEqual(u.chomp("foo\n"), "foo")
    self.assertEqual(u.chomp("foo\r\n"), "foo")
    self.assertEqual(u.chomp("foo\r"), "foo\r")
    self.assertEqual(u.chomp(b"foo\r\n"), b"foo")
    self.assertEqual(u.chomp("foo"), "foo")
    self.assertEqual(u.chomp("\n"), "")

  def test_decode_line(self):
    self.assertEqual(u.decode_line(b"caf\xc3\xa9\n"), "café")
    self.assertEqual(u.decode_line("plain\r\n"), "plain")
    with self.assertRaises(UnicodeDecodeError):
      u.decode_line(b"\xff\n")

  def test_open_input(self):
    outf = tempfile.NamedTemporaryFile(mode="wb", delete=False)
    try:
      outf.write(b"foo\n")
      outf.close()
      inf = u.open_input(outf.name)
      self.assertEqual(inf.readline(), b"foo\n")
      inf.close()
    finally:
      os.unlink(outf.name)

  def test_open_input_fail(self):
    with self.assertRaises(Exception):
      u.open_input("/nonexistent/dir/glarp")

  def test_open_input_stdin(self):
    stdin = u.sys.stdin
    try:
      u.sys.stdin = io.TextIOWrapper(io.BytesIO(b"x\n"))
      self.assertEqual(u.open_input("-").readline(), b"x\n")
    finally:
      u.sys.stdin = stdin


if __name__ == "__main__":
  unittest.main()
