#!/usr/bin/python3
"""Unit tests for bedmap.

"""

import io
import unittest

import bedmap as b
import script_utils as u


def src(text):
  return io.BytesIO(text.encode("utf-8"))


class FailingSource(object):
  """Byte source that raises an I/O error on a given line."""

  def __init__(self, lines, failat):
    self.lines = list(lines)
    self.failat = failat
    self.reads = 0

  def readline(self):
    self.reads += 1
    if self.reads == self.failat:
      raise OSError("simulated read failure")
    if not self.lines:
      return b""
    return self.lines.pop(0).encode("utf-8") + b"\n"


class TestParseRange(unittest.TestCase):

  def test_single(self):
    self.assertEqual(b.parse_range("1"), (1, 2))
    self.assertEqual(b.parse_range("17"), (17, 18))

  def test_pair(self):
    self.assertEqual(b.parse_range("1-3"), (1, 4))
    self.assertEqual(b.parse_range("5-5"), (5, 6))
    self.assertEqual(b.parse_range("10-200"), (10, 201))

  def test_format_errors(self):
    for tok in ["", "-1", "1-", "1-2-3", "0", "0-3", "5-3", "1--2"]:
      with self.assertRaises(b.RangeFormatError, msg=tok):
        b.parse_range(tok)

  def test_parse_errors(self):
    for tok in ["x", "1-x", " 1", "1 ", "1.5", "+", "4-y7", "1_0", "\uff11"]:
      with self.assertRaises(b.RangeParseError, msg=tok) as cm:
        b.parse_range(tok)
      self.assertIsInstance(cm.exception.cause, ValueError)

  def test_error_message(self):
    with self.assertRaises(b.RangeFormatError) as cm:
      b.parse_range("5-3")
    self.assertEqual(str(cm.exception), "bad range format '5-3'")


class TestBedMap(unittest.TestCase):

  @classmethod
  def setUpClass(cls):
    u.increment_verbosity()
    u.increment_verbosity()

  @classmethod
  def tearDownClass(cls):
    u.decrement_verbosity()
    u.decrement_verbosity()

  def test_select(self):
    res = list(b.bed_map(src("2\n4-6\n8\n"), src("a\nb\nc\nd\ne\nf\ng\nh\n")))
    self.assertEqual(res, ["b", "d", "e", "f", "h"])

  def test_select_lines(self):
    res = b.select_lines(src("2\n4-6\n8"), src("a\nb\nc\nd\ne\nf\ng\nh"))
    self.assertEqual(res, ["b", "d", "e", "f", "h"])

  def test_crlf(self):
    res = list(b.bed_map(src("1-2\r\n"), src("a\r\nb\r\nc\r\n")))
    self.assertEqual(res, ["a", "b"])

  def test_text_sources(self):
    res = list(b.bed_map(io.StringIO("3\n"), io.StringIO("x\ny\nz\n")))
    self.assertEqual(res, ["z"])

  def test_redrain(self):
    it = b.bed_map(src("1\n"), src("a\nb\n"))
    self.assertEqual(list(it), ["a"])
    self.assertTrue(it.exhausted)
    self.assertEqual(list(it), [])
    self.assertEqual(list(it), [])
    self.assertIsNone(it.error)

  def test_abutting_ranges(self):
    res = list(b.bed_map(src("1-2\n3-4\n"), src("a\nb\nc\nd\ne\n")))
    self.assertEqual(res, ["a", "b", "c", "d"])

  def test_single_line_source(self):
    res = list(b.bed_map(src("1\n"), src("only\n")))
    self.assertEqual(res, ["only"])

  def test_range_past_end(self):
    it = b.bed_map(src("9\n"), src("a\nb\n"))
    self.assertEqual(list(it), [])
    self.assertIsNone(it.error)

  def test_range_overhangs_end(self):
    res = list(b.bed_map(src("2-10\n"), src("a\nb\nc\n")))
    self.assertEqual(res, ["b", "c"])

  def test_empty_ranges(self):
    self.assertEqual(list(b.bed_map(src(""), src("a\n"))), [])

  def test_empty_lines(self):
    self.assertEqual(list(b.bed_map(src("1\n"), src(""))), [])

  def test_blank_selected_line(self):
    res = list(b.bed_map(src("1-3\n"), src("a\n\nc\n")))
    self.assertEqual(res, ["a", "", "c"])

  def test_bad_range_mid_stream(self):
    it = b.bed_map(src("1\n3-x\n5\n"), src("a\nb\nc\nd\ne\n"))
    res = list(it)
    self.assertEqual(res[0], "a")
    self.assertEqual(len(res), 2)
    self.assertIsInstance(res[1], b.RangeParseError)
    self.assertIs(it.error, res[1])
    self.assertEqual(list(it), [])

  def test_bad_format_stops(self):
    res = list(b.bed_map(src("0\n2\n"), src("a\nb\n")))
    self.assertEqual(len(res), 1)
    self.assertIsInstance(res[0], b.RangeFormatError)

  def test_select_lines_raises(self):
    with self.assertRaises(b.RangeFormatError):
      b.select_lines(src("2\n\n4\n"), src("a\nb\nc\nd\n"))

  def test_target_read_error(self):
    lines = FailingSource(["a", "b", "c", "d"], 3)
    it = b.bed_map(src("1-4\n"), lines)
    res = list(it)
    self.assertEqual(res[:2], ["a", "b"])
    self.assertEqual(len(res), 3)
    self.assertIsInstance(res[2], b.TargetReadError)
    self.assertIsInstance(res[2].cause, OSError)
    self.assertIs(res[2].__cause__, res[2].cause)
    self.assertEqual(lines.reads, 3)
    self.assertEqual(list(it), [])

  def test_range_read_error(self):
    ranges = FailingSource(["1", "2"], 2)
    res = list(b.bed_map(ranges, src("a\nb\nc\n")))
    self.assertEqual(res[0], "a")
    self.assertEqual(len(res), 2)
    self.assertIsInstance(res[1], b.RangeReadError)
    self.assertEqual(str(res[1]),
                     "failed to read range: simulated read failure")

  def test_invalid_utf8(self):
    lines = io.BytesIO(b"a\n\xff\xfe\n")
    res = list(b.bed_map(src("1-2\n"), lines))
    self.assertEqual(res[0], "a")
    self.assertIsInstance(res[1], b.TargetReadError)
    self.assertIsInstance(res[1].cause, UnicodeDecodeError)

  def test_lazy(self):
    lines = FailingSource(["a", "b", "c", "d"], 99)
    it = b.bed_map(src("1\n3\n"), lines)
    self.assertEqual(next(it), "a")
    self.assertEqual(lines.reads, 1)
    self.assertEqual(next(it), "c")
    self.assertEqual(lines.reads, 3)

  def test_cursor_states(self):
    it = b.bed_map(src("2\n"), src("a\nb\nc\n"))
    self.assertEqual(it.cursor.state(), b.NEED_RANGE)
    self.assertEqual(next(it), "b")
    self.assertEqual(it.cursor.range, (2, 3))
    self.assertEqual(it.cursor.state(), b.NEED_LINE)
    self.assertEqual(list(it), [])
    self.assertEqual(it.cursor.state(), b.NEED_RANGE)
    self.assertEqual(it.cursor.line, (3, "c"))

  def test_independent_iterators(self):
    ranges = "1\n"
    it1 = b.bed_map(src(ranges), src("a\n"))
    it2 = b.bed_map(src(ranges), src("b\n"))
    self.assertEqual(next(it2), "b")
    self.assertEqual(next(it1), "a")


if __name__ == "__main__":
  unittest.main()
