#!/usr/bin/python3
"""Pick the lines of a file selected by a list of line ranges.

Reads range tokens ("N" or "N-M", 1-based, sorted, one per line)
from RANGEFILE or from -r options, then emits the selected lines of
LINESFILE (or stdin). Any malformed range or read failure aborts the
run with a non-zero exit status.

"""

import getopt
import io
import os
import sys

import chardet

import bedmap
import script_utils as u


# Range tokens given with -r
flag_ranges = []

# Output file instead of stdout
flag_outfile = None

# Ranges file path
flag_rangefile = None

# Lines file path ("-" for stdin)
flag_linesfile = "-"


def usage(msgarg):
  """Print usage and exit."""
  if msgarg:
    sys.stderr.write("error: %s\n" % msgarg)
  print("""\
    usage:  %s [options] RANGEFILE [LINESFILE]
            %s [options] -r RANGE [-r RANGE ...] [LINESFILE]

    options:
    -d    increase debug msg verbosity level
    -r R  select range R ("N" or "N-M"); may be repeated
    -o F  write selected lines to file F instead of stdout

    Ranges must be in ascending order and must not overlap.
    LINESFILE defaults to stdin.

    """ % (os.path.basename(sys.argv[0]), os.path.basename(sys.argv[0])))
  sys.exit(1)


def parse_args(argv):
  """Command line argument parsing."""
  global flag_ranges, flag_outfile, flag_rangefile, flag_linesfile

  flag_ranges = []
  flag_outfile = None
  flag_rangefile = None
  flag_linesfile = "-"

  try:
    optlist, args = getopt.getopt(argv, "dr:o:")
  except getopt.GetoptError as err:
    # unrecognized option
    usage(str(err))

  for opt, arg in optlist:
    if opt == "-d":
      u.increment_verbosity()
    elif opt == "-r":
      flag_ranges.append(arg)
    elif opt == "-o":
      if flag_outfile:
        usage("specify at most one output file")
      flag_outfile = arg

  if not flag_ranges:
    if not args:
      usage("no ranges file or -r option given")
    flag_rangefile = args.pop(0)
  if len(args) > 1:
    usage("extra arguments: %s" % " ".join(args[1:]))
  if args:
    flag_linesfile = args[0]


def describe_error(err):
  """Return error message text, with an encoding hint for decode errors."""
  msg = str(err)
  cause = err.cause
  if isinstance(cause, UnicodeDecodeError):
    guess = chardet.detect(cause.object)
    if guess["encoding"]:
      msg += " (input looks like %s, expected utf-8)" % guess["encoding"]
  return msg


def perform(outf):
  """Select lines, writing them to outf."""
  owned = []
  count = 0
  try:
    if flag_ranges:
      u.verbose(1, "ranges from command line: %s" % " ".join(flag_ranges))
      rangesrc = io.BytesIO("\n".join(flag_ranges).encode("utf-8"))
    else:
      rangesrc = u.open_input(flag_rangefile)
      if flag_rangefile != "-":
        owned.append(rangesrc)
    linesrc = u.open_input(flag_linesfile)
    if flag_linesfile != "-":
      owned.append(linesrc)
    for item in bedmap.bed_map(rangesrc, linesrc):
      if isinstance(item, bedmap.BedMapError):
        u.error(describe_error(item))
      outf.write("%s\n" % item)
      count += 1
  finally:
    for src in owned:
      src.close()
  u.verbose(1, "emitted %d lines" % count)
  return count


def main(argv=None):
  """Script entry point."""
  if argv is None:
    argv = sys.argv[1:]
  u.setdeflanglocale()
  parse_args(argv)
  if flag_outfile:
    try:
      outf = open(flag_outfile, "w", encoding="utf-8")
    except IOError as e:
      u.error("unable to open output file %s: "
              "%s" % (flag_outfile, e.strerror))
    with outf:
      perform(outf)
  else:
    perform(sys.stdout)
  return 0


# Main portion of script
if __name__ == "__main__":
  sys.exit(main())
