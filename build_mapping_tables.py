#!/usr/bin/env python3

"""
Generates the packed codepoint table and mapping blob used for transliteration and writes them to a directory.

Writing them to "deunicode/data" before installing bundles them with the package; Otherwise they are generated each
time a process first transliterates non-ASCII text.
"""

__author__ = "Todd Shore <errantlinguist+github@gmail.com>"
__copyright__ = "Copyright (C) 2018 Todd Shore"
__license__ = "Apache License, Version 2.0"

import argparse
import logging
import sys

from deunicode.build import DEFAULT_MAX_CODEPOINT, build_tables, write_tables


def __create_argparser() -> argparse.ArgumentParser:
	result = argparse.ArgumentParser(
		description="Generates the packed codepoint table and mapping blob used for transliteration and writes them to a directory.")
	result.add_argument("-o", "--outdir", metavar="PATH",
						help="The directory to write the table and blob files to.", required=True)
	result.add_argument("-m", "--max-codepoint", dest="max_codepoint", metavar="CODEPOINT",
						type=lambda value: int(value, 0), default=DEFAULT_MAX_CODEPOINT,
						help="The highest codepoint to look up a transliteration for, e.g. \"0x2FFFF\".")
	log_args = result.add_mutually_exclusive_group()
	log_args.add_argument("-i", "--info", help="increase output verbosity to INFO.",
						  action="store_true")
	log_args.add_argument("-d", "--debug", help="increase output verbosity to DEBUG.",
						  action="store_true")
	return result


def __main(args):
	if args.debug:
		logging.basicConfig(level=logging.DEBUG)
	elif args.info:
		logging.basicConfig(level=logging.INFO)

	max_codepoint = args.max_codepoint
	print("Generating transliterations for codepoints up to U+{:04X}.".format(max_codepoint), file=sys.stderr)
	tables = build_tables(max_codepoint)
	table_path, blob_path = write_tables(tables, args.outdir)
	print("Wrote {} table entries to \"{}\" and a blob of {} byte(s) to \"{}\".".format(len(tables), table_path,
																						   len(tables.blob),
																						   blob_path),
		  file=sys.stderr)


if __name__ == "__main__":
	__main(__create_argparser().parse_args())
