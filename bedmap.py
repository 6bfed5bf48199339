#!/usr/bin/python3
"""Select lines from a stream using a stream of sorted line ranges.

A ranges source supplies one token per line, either "N" (a single
line) or "N-M" (lines N through M inclusive), with 1-based line
numbers. bed_map() walks the ranges and the numbered lines of a
second source in lockstep and produces only the lines that fall
inside a range. Ranges must be sorted and non-overlapping; this is
not checked.

Items produced by the iterator are either selected line text or a
BedMapError instance. An error item is always the last item.

"""

import re

import script_utils as u

# Merge cursor states
NEED_RANGE = "need-range"
NEED_LINE = "need-line"
COMPARE = "compare"

# Unsigned decimal: optional '+', then ASCII digits only. Stricter than
# int(), which also takes whitespace, '_' and non-ASCII digits.
_uint_re = re.compile(r"^\+?[0-9]+\Z")


class BedMapError(Exception):
  """Base class for range selection failures."""

  message = "range selection failed"

  def __init__(self, cause=None, token=None):
    super().__init__(self.message)
    self.cause = cause
    self.token = token
    self.__cause__ = cause

  def __str__(self):
    msg = self.message
    if self.token is not None:
      msg += " '%s'" % self.token
    if self.cause is not None:
      msg += ": %s" % self.cause
    return msg


class RangeReadError(BedMapError):
  message = "failed to read range"


class RangeParseError(BedMapError):
  message = "failed to parse range element"


class RangeFormatError(BedMapError):
  message = "bad range format"


class TargetReadError(BedMapError):
  message = "failed to read target"


def _parse_uint(field, token):
  if not _uint_re.match(field):
    raise RangeParseError(ValueError("invalid digit in '%s'" % field), token)
  return int(field)


def parse_range(token):
  """Convert a range token into a (start, end_exclusive) pair."""
  fields = token.split("-", 2)
  if not fields or not fields[0] or len(fields) > 2:
    raise RangeFormatError(token=token)
  start = _parse_uint(fields[0], token)
  if len(fields) > 1:
    if not fields[1]:
      raise RangeFormatError(token=token)
    end = _parse_uint(fields[1], token)
  else:
    end = start
  if start == 0 or end < start:
    raise RangeFormatError(token=token)
  return (start, end + 1)


def _readline(source, errclass):
  """Read and decode the next line of source; None at end of input."""
  try:
    raw = source.readline()
    if not raw:
      return None
    return u.decode_line(raw)
  except (OSError, UnicodeDecodeError) as e:
    raise errclass(e)


class MergeCursor(object):
  """Pending range and numbered line of a merge in progress."""

  def __init__(self):
    self.range = None
    self.line = None

  def state(self):
    if self.range is None:
      return NEED_RANGE
    if self.line is None:
      return NEED_LINE
    return COMPARE


class BedMap(object):
  """Lazy iterator over the lines selected by a ranges source.

  Each call to next() runs the merge until a line is selected, a
  source runs dry, or a read/parse failure occurs. A failure is
  returned (not raised) as a BedMapError item, after which the
  iterator is exhausted. Instances are single-pass and must not be
  shared between threads.
  """

  def __init__(self, ranges_source, lines_source):
    self.ranges_source = ranges_source
    self.lines_source = lines_source
    self.cursor = MergeCursor()
    self.nline = 0
    self.error = None
    self._done = False

  @property
  def exhausted(self):
    return self._done

  def __iter__(self):
    return self

  def __next__(self):
    if self._done:
      raise StopIteration
    try:
      text = self._step()
    except BedMapError as e:
      self._done = True
      self.error = e
      u.verbose(1, "bedmap: stopping after error: %s" % e)
      return e
    if text is None:
      self._done = True
      u.verbose(1, "bedmap: input exhausted at line %d" % self.nline)
      raise StopIteration
    return text

  def _step(self):
    cursor = self.cursor
    while True:
      state = cursor.state()
      if state == NEED_RANGE:
        token = _readline(self.ranges_source, RangeReadError)
        if token is None:
          return None
        cursor.range = parse_range(token)
        u.verbose(2, "bedmap: range %d-%d" % (cursor.range[0],
                                              cursor.range[1] - 1))
      elif state == NEED_LINE:
        text = _readline(self.lines_source, TargetReadError)
        if text is None:
          return None
        self.nline += 1
        cursor.line = (self.nline, text)
      else:
        start, end = cursor.range
        nline, text = cursor.line
        if nline >= end:
          # Range used up; the line may still match a later one.
          cursor.range = None
        elif nline >= start:
          cursor.line = None
          return text
        else:
          cursor.line = None


def bed_map(ranges_source, lines_source):
  """Return an iterator over the lines selected by ranges_source."""
  return BedMap(ranges_source, lines_source)


def select_lines(ranges_source, lines_source):
  """Return a list of all selected lines, raising the first error."""
  result = []
  for item in bed_map(ranges_source, lines_source):
    if isinstance(item, BedMapError):
      raise item
    result.append(item)
  return result
