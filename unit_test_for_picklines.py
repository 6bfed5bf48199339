#!/usr/bin/python3
"""Unit tests for the picklines script.

"""

import os
import shutil
import tempfile
import unittest

import bedmap
import picklines as p
import script_utils as u


class TestPicklines(unittest.TestCase):

  @classmethod
  def setUpClass(cls):
    u.unit_test_enable()
    u.setdeflanglocale()

  def setUp(self):
    self.tmpdir = tempfile.mkdtemp()

  def tearDown(self):
    shutil.rmtree(self.tmpdir)

  def mkfile(self, name, data):
    path = os.path.join(self.tmpdir, name)
    mode = "wb" if isinstance(data, bytes) else "w"
    with open(path, mode) as wf:
      wf.write(data)
    return path

  def readout(self, path):
    with open(path, "r") as rf:
      return rf.read()

  def test_rangefile(self):
    rf = self.mkfile("ranges", "2\n4-6\n8\n")
    lf = self.mkfile("lines", "a\nb\nc\nd\ne\nf\ng\nh\n")
    of = os.path.join(self.tmpdir, "out")
    rc = p.main(["-o", of, rf, lf])
    self.assertEqual(rc, 0)
    self.assertEqual(self.readout(of), "b\nd\ne\nf\nh\n")

  def test_range_options(self):
    lf = self.mkfile("lines", "a\nb\nc\nd\n")
    of = os.path.join(self.tmpdir, "out")
    p.main(["-r", "1", "-r", "3-4", "-o", of, lf])
    self.assertEqual(self.readout(of), "a\nc\nd\n")

  def test_flags_reset(self):
    lf = self.mkfile("lines", "a\nb\nc\n")
    of = os.path.join(self.tmpdir, "out")
    p.main(["-r", "1", "-o", of, lf])
    p.main(["-r", "3", "-o", of, lf])
    self.assertEqual(p.flag_ranges, ["3"])
    self.assertEqual(self.readout(of), "c\n")

  def test_bad_range_aborts(self):
    rf = self.mkfile("ranges", "1\n5-3\n")
    lf = self.mkfile("lines", "a\nb\n")
    of = os.path.join(self.tmpdir, "out")
    with self.assertRaises(Exception) as cm:
      p.main(["-o", of, rf, lf])
    self.assertIn("bad range format", str(cm.exception))
    self.assertEqual(self.readout(of), "a\n")

  def test_missing_file(self):
    lf = self.mkfile("lines", "a\n")
    with self.assertRaises(Exception):
      p.main([os.path.join(self.tmpdir, "nonexistent"), lf])

  def test_usage(self):
    with self.assertRaises(SystemExit):
      p.main([])
    with self.assertRaises(SystemExit):
      p.main(["-q", "x"])
    with self.assertRaises(SystemExit):
      p.main(["-r", "1", "a", "b"])

  def test_describe_decode_error(self):
    raw = "café crème brûlée\n".encode("latin-1")
    lf = self.mkfile("lines", b"ok\n" + raw)
    with self.assertRaises(Exception) as cm:
      p.main(["-r", "1-2", lf])
    self.assertIn("failed to read target", str(cm.exception))
    self.assertIn("input looks like", str(cm.exception))

  def test_describe_encoding_hint(self):
    raw = "café crème brûlée\n".encode("latin-1")
    try:
      raw.decode("utf-8")
    except UnicodeDecodeError as e:
      err = bedmap.TargetReadError(e)
    msg = p.describe_error(err)
    self.assertTrue(msg.startswith("failed to read target: "))
    self.assertTrue(msg.endswith(", expected utf-8)"))
    self.assertIn("(input looks like ", msg)

  def test_sources_closed_on_open_failure(self):
    rf = self.mkfile("ranges", "1\n")
    opened = []
    real_open_input = u.open_input

    def recording_open_input(path):
      f = real_open_input(path)
      opened.append(f)
      return f

    u.open_input = recording_open_input
    try:
      with self.assertRaises(Exception):
        p.main([rf, os.path.join(self.tmpdir, "nonexistent")])
    finally:
      u.open_input = real_open_input
    self.assertEqual(len(opened), 1)
    self.assertTrue(opened[0].closed)

  def test_describe_plain_error(self):
    err = bedmap.TargetReadError(OSError("disk on fire"))
    self.assertEqual(p.describe_error(err),
                     "failed to read target: disk on fire")


if __name__ == "__main__":
  unittest.main()
