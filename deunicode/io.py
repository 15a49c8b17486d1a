"""
Functionalities for finding text files and transliterating them to ASCII.
"""

__author__ = "Todd Shore <errantlinguist+github@gmail.com>"
__copyright__ = "Copyright (C) 2018 Todd Shore"
__license__ = "Apache License, Version 2.0"

import logging
import os
import re
from typing import IO, Callable, Iterable, Iterator, List, Optional, Union

import magic

from .engine import DEFAULT_PLACEHOLDER, transliterate_custom
from .tables import MappingTables

TEXT_MIMETYPE_PREFIX = "text/"

_DIGITS_PATTERN = re.compile("(\\d+)")


class MimetypeFileWalker(object):

	def __init__(self, mimetype_matcher: Callable[[str], bool]):
		self.mimetype_matcher = mimetype_matcher
		self.__mime = magic.Magic(mime=True)

	def __call__(self, inpaths: Iterable[str]) -> Iterator[str]:
		for inpath in inpaths:
			if os.path.isdir(inpath):
				for root, _, files in os.walk(inpath, followlinks=True):
					for file in files:
						filepath = os.path.join(root, file)
						if self.__matches(filepath):
							yield filepath
			elif self.__matches(inpath):
				yield inpath

	def __matches(self, filepath: str) -> bool:
		mimetype = self.__mime.from_file(filepath)
		result = self.mimetype_matcher(mimetype)
		if not result:
			logging.debug("Skipping \"%s\" with MIME type \"%s\".", filepath, mimetype)
		return result


def asciify_file(infile_path: str, placeholder: bytes = DEFAULT_PLACEHOLDER,
				 tables: Optional[MappingTables] = None) -> bool:
	"""
	Replaces the contents of a UTF-8 text file with their ASCII transliteration.

	:param infile_path: The file to rewrite.
	:param placeholder: The bytes to write for each character without a mapping.
	:param tables: The tables to look characters up in; Defaults to the process-wide tables.
	:return: True iff the file contents changed.
	"""
	with open(infile_path, 'rb') as inf:
		lines = inf.readlines()
	asciified_lines = [transliterate_custom(line, placeholder, tables) for line in lines]
	result = asciified_lines != lines
	if result:
		logging.debug("Writing \"%s\".", infile_path)
		with open(infile_path, 'wb') as outf:
			outf.writelines(asciified_lines)
	else:
		logging.debug("\"%s\" is already ASCII; Leaving it as is.", infile_path)
	return result


def asciify_stream(inf: IO[bytes], out: IO[bytes], placeholder: bytes = DEFAULT_PLACEHOLDER,
				   tables: Optional[MappingTables] = None):
	# Lines keep their line breaks, so transliterating them one by one gives the same output as doing so at once
	for line in inf:
		out.write(transliterate_custom(line, placeholder, tables))


def is_text_mimetype(mimetype: str) -> bool:
	return mimetype.startswith(TEXT_MIMETYPE_PREFIX)


def natural_keys(text: str) -> List[Union[int, str]]:
	"""
	Creates a sort key which orders numbers in text by their value, e.g. "file2" before "file10".
	"""
	return [int(token) if token.isdigit() else token for token in _DIGITS_PATTERN.split(text)]
