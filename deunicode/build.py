"""
Generates the packed codepoint table and mapping blob from the transliteration data of "unidecode" and the emoji
short names of "emoji".
"""


__author__ = "Todd Shore <errantlinguist+github@gmail.com>"
__copyright__ = "Copyright (C) 2018 Todd Shore"
__license__ = "Apache License, Version 2.0"

import logging
import os
from collections import defaultdict
from typing import DefaultDict, Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple

import emoji
import unidecode

from .tables import BLOB_FILENAME, MAX_BLOB_LENGTH, MAX_INLINE_LENGTH, TABLE_FILENAME, MappingTables, \
	TableFormatError, create_entry

DEFAULT_MAX_CODEPOINT = 0x2FFFF
SURROGATES = range(0xD800, 0xE000)
VARIATION_SELECTOR_16 = "\ufe0f"


def build_tables(max_codepoint: int = DEFAULT_MAX_CODEPOINT) -> MappingTables:
	return pack_tables(collect_replacements(max_codepoint))


def collect_replacements(max_codepoint: int = DEFAULT_MAX_CODEPOINT) -> Dict[int, str]:
	"""
	Finds the ASCII replacement for every codepoint up to and including the given one which has one.

	:param max_codepoint: The highest codepoint to consider.
	:return: A mapping of codepoints to their replacements; Unmapped codepoints are absent.
	"""
	result = dict((codepoint, chr(codepoint)) for codepoint in range(min(0x80, max_codepoint + 1)))
	for codepoint in range(0x80, max_codepoint + 1):
		if codepoint not in SURROGATES:
			replacement = _transliterate_char(chr(codepoint))
			if replacement is not None:
				result[codepoint] = replacement
	logging.debug("Found %d codepoint(s) with a transliteration.", len(result))

	emoji_count = 0
	for codepoint, name in _emoji_names():
		if codepoint <= max_codepoint and not result.get(codepoint):
			# Names are separate words, so they carry a separator like e.g. Han syllables do
			result[codepoint] = name + " "
			emoji_count += 1
	logging.debug("Used the short names of %d emoji.", emoji_count)
	return result


def pack_tables(replacements: Mapping[int, str]) -> MappingTables:
	"""
	Packs replacement strings into a dense codepoint table and a blob holding all replacements longer than two bytes.

	:param replacements: A mapping of codepoints to their ASCII replacements.
	:return: The packed tables.
	"""
	entry_count = max(replacements) + 1 if replacements else 0
	encoded_replacements = dict((codepoint, replacement.encode("ascii")) for codepoint, replacement in
								replacements.items())
	blob = _create_blob(
		frozenset(encoded for encoded in encoded_replacements.values() if len(encoded) > MAX_INLINE_LENGTH))
	if len(blob) > MAX_BLOB_LENGTH:
		raise TableFormatError(
			"Blob is {} bytes long but at most {} bytes are addressable.".format(len(blob), MAX_BLOB_LENGTH))

	offsets = {}  # type: Dict[bytes, int]
	records = []
	for codepoint in range(entry_count):
		encoded = encoded_replacements.get(codepoint)
		if encoded is None or len(encoded) <= MAX_INLINE_LENGTH:
			records.append(create_entry(encoded))
		else:
			try:
				offset = offsets[encoded]
			except KeyError:
				offset = blob.find(encoded)
				offsets[encoded] = offset
			records.append(create_entry(encoded, offset))

	logging.info("Packed %d table entries; Blob is %d byte(s) long.", entry_count, len(blob))
	return MappingTables(b"".join(records), blob)


def write_tables(tables: MappingTables, outdir: str) -> Tuple[str, str]:
	"""
	Writes the table and blob artifacts to a directory.

	:return: The paths of the table file and the blob file.
	"""
	os.makedirs(outdir, exist_ok=True)
	table_path = os.path.join(outdir, TABLE_FILENAME)
	blob_path = os.path.join(outdir, BLOB_FILENAME)
	with open(table_path, 'wb') as outf:
		outf.write(tables.table)
	with open(blob_path, 'wb') as outf:
		outf.write(tables.blob)
	return table_path, blob_path


def _create_blob(strings: Iterable[bytes]) -> bytes:
	"""
	Lays out strings in as short a blob as possible so that every one of them is a slice of it.

	Strings contained in a longer one are not stored at all; The rest are greedily chained so that each one starts
	with as long a suffix of the one before it as possible.
	"""
	pieces = []
	contained = set()
	for string in sorted(strings, key=lambda s: (-len(s), s)):
		if string not in contained:
			pieces.append(string)
			contained.update(string[start:end] for start in range(len(string))
							 for end in range(start + MAX_INLINE_LENGTH + 1, len(string) + 1))

	pieces_by_prefix = defaultdict(list)  # type: DefaultDict[bytes, List[int]]
	for idx in range(len(pieces) - 1, -1, -1):
		piece = pieces[idx]
		for prefix_length in range(1, len(piece)):
			pieces_by_prefix[piece[:prefix_length]].append(idx)

	used = [False] * len(pieces)
	result = bytearray()
	next_unused_idx = 0
	last_piece = b""
	for _ in range(len(pieces)):
		overlap, idx = _find_overlapping_piece(last_piece, pieces_by_prefix, used)
		if idx is None:
			while used[next_unused_idx]:
				next_unused_idx += 1
			idx = next_unused_idx
			overlap = 0
		used[idx] = True
		last_piece = pieces[idx]
		result.extend(last_piece[overlap:])
	return bytes(result)


def _emoji_names() -> Iterator[Tuple[int, str]]:
	for sequence, data in emoji.EMOJI_DATA.items():
		stripped = sequence.replace(VARIATION_SELECTOR_16, "")
		if len(stripped) == 1:
			name = _normalize_emoji_name(data["en"])
			if name:
				yield ord(stripped), name


def _find_overlapping_piece(last_piece: bytes, pieces_by_prefix: Mapping[bytes, List[int]],
							used: Sequence[bool]) -> Tuple[int, Optional[int]]:
	result = 0, None
	for overlap in range(len(last_piece) - 1, 0, -1):
		candidates = pieces_by_prefix.get(last_piece[-overlap:])
		if candidates:
			# Candidates are only ever taken from the end, so used ones can be dropped lazily
			while candidates and used[candidates[-1]]:
				candidates.pop()
			if candidates:
				result = overlap, candidates.pop()
				break
	return result


def _is_printable_ascii(text: str) -> bool:
	return text.isascii() and "\x7f" not in text


def _normalize_emoji_name(name: str) -> Optional[str]:
	# e.g. ":hand_with_index_finger_and_thumb_crossed:"
	result = unidecode.unidecode(name.strip(":").replace("_", " ")).strip()
	if not result or not _is_printable_ascii(result):
		result = None
	return result


def _transliterate_char(char: str) -> Optional[str]:
	try:
		result = unidecode.unidecode(char, errors="strict")
	except unidecode.UnidecodeError:
		result = None
	else:
		if not _is_printable_ascii(result):
			result = None
	return result
