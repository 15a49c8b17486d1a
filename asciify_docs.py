#!/usr/bin/env python3

"""
Replaces each Unicode character in text files with its ASCII transliteration.

Use with e.g. "find . -type f -iname "*.txt" -exec ./asciify_docs.py {} +"
"""

__author__ = "Todd Shore <errantlinguist+github@gmail.com>"
__copyright__ = "Copyright (C) 2018 Todd Shore"
__license__ = "Apache License, Version 2.0"

import argparse
import logging
import sys

from deunicode import DEFAULT_PLACEHOLDER
from deunicode.io import MimetypeFileWalker, asciify_file, asciify_stream, is_text_mimetype, natural_keys


def __create_argparser() -> argparse.ArgumentParser:
	result = argparse.ArgumentParser(
		description="Replaces each Unicode character in text files with its ASCII transliteration.")
	result.add_argument("inpaths", metavar="PATH", nargs="*",
						help="The files or directories to rewrite; If none are given, standard input is transliterated to standard output.")
	result.add_argument("-p", "--placeholder", metavar="TEXT", default=DEFAULT_PLACEHOLDER.decode("ascii"),
						help="The text to write for each character without a transliteration.")
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

	placeholder = args.placeholder.encode("utf-8")
	inpaths = args.inpaths
	if inpaths:
		print("Will look for text files under {}.".format(inpaths), file=sys.stderr)
		file_walker = MimetypeFileWalker(is_text_mimetype)
		infiles = tuple(sorted(frozenset(file_walker(inpaths)), key=natural_keys))
		logging.info("Will rewrite %d file(s).", len(infiles))
		changed_count = 0
		for infile in infiles:
			print("Reading \"{}\".".format(infile), file=sys.stderr)
			if asciify_file(infile, placeholder):
				changed_count += 1
		print("Finished; Changed {} of {} file(s).".format(changed_count, len(infiles)), file=sys.stderr)
	else:
		asciify_stream(sys.stdin.buffer, sys.stdout.buffer, placeholder)


if __name__ == "__main__":
	__main(__create_argparser().parse_args())
