"""
The packed codepoint table and mapping blob which all transliteration is looked up in.

Each codepoint has one fixed-width record in the table; Short replacements are stored inline in the record itself
while longer ones point into a flat blob of ASCII text.
"""

__author__ = "Todd Shore <errantlinguist+github@gmail.com>"
__copyright__ = "Copyright (C) 2018 Todd Shore"
__license__ = "Apache License, Version 2.0"

import logging
import os
import struct
import threading
from typing import Optional

ENTRY = struct.Struct("<HBx")
"""One record: A two-byte literal/offset field, a one-byte length and one byte of padding."""
MAX_BLOB_LENGTH = 0xFFFF
MAX_INLINE_LENGTH = 2
MAX_REPLACEMENT_LENGTH = 0xFF
TABLE_DIR_ENV_VAR = "DEUNICODE_TABLE_DIR"
TABLE_FILENAME = "pointers.bin"
BLOB_FILENAME = "mapping.txt"
UNKNOWN_OFFSET = 0xFFFF
UNKNOWN_LENGTH = 0xFF

_BUNDLED_DATA_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "data")


class TableFormatError(ValueError):
	pass


class MappingTables(object):
	"""
	An immutable pair of a codepoint table and the blob its long entries point into.
	"""

	__slots__ = ("__blob", "__entry_count", "__table")

	def __init__(self, table: bytes, blob: bytes):
		table = bytes(table)
		blob = bytes(blob)
		if len(table) % ENTRY.size != 0:
			raise TableFormatError(
				"Table length {} is not a multiple of the record size {}.".format(len(table), ENTRY.size))
		if len(blob) > MAX_BLOB_LENGTH:
			raise TableFormatError(
				"Blob length {} exceeds the addressable maximum of {}.".format(len(blob), MAX_BLOB_LENGTH))
		if not blob.isascii() or b"\x7f" in blob:
			raise TableFormatError("Blob contains bytes outside of the range 0x00-0x7E.")
		self.__table = table
		self.__blob = blob
		self.__entry_count = len(table) // ENTRY.size

	def __len__(self) -> int:
		return self.__entry_count

	def __repr__(self) -> str:
		return "{}(entries={}, blob_length={})".format(type(self).__name__, self.__entry_count, len(self.__blob))

	@property
	def blob(self) -> bytes:
		return self.__blob

	@property
	def table(self) -> bytes:
		return self.__table

	@classmethod
	def from_bytes(cls, table: bytes, blob: bytes) -> "MappingTables":
		return cls(table, blob)

	@classmethod
	def from_dir(cls, dirpath: str) -> "MappingTables":
		return cls.from_files(os.path.join(dirpath, TABLE_FILENAME), os.path.join(dirpath, BLOB_FILENAME))

	@classmethod
	def from_files(cls, table_path: str, blob_path: str) -> "MappingTables":
		logging.debug("Reading codepoint table from \"%s\" and mapping blob from \"%s\".", table_path, blob_path)
		with open(table_path, 'rb') as inf:
			table = inf.read()
		with open(blob_path, 'rb') as inf:
			blob = inf.read()
		return cls(table, blob)

	def lookup(self, codepoint: int) -> Optional[bytes]:
		"""
		Finds the ASCII replacement for a single Unicode scalar value.

		:param codepoint: The scalar value to look up.
		:return: The replacement, which may be empty, or None if the codepoint is not mapped.
		"""
		if codepoint >= self.__entry_count:
			return None

		record_offset = codepoint * ENTRY.size
		literal, length = ENTRY.unpack_from(self.__table, record_offset)
		if length <= MAX_INLINE_LENGTH:
			result = self.__table[record_offset:record_offset + length]
		else:
			# Unknown codepoints are deliberately encoded as pointing past the end of the blob
			blob = self.__blob
			end = literal + length
			if literal >= len(blob) or end > len(blob):
				result = None
			else:
				result = blob[literal:end]
		return result


def create_entry(replacement: Optional[bytes], offset: int = UNKNOWN_OFFSET) -> bytes:
	"""
	Packs a single table record.

	:param replacement: The replacement bytes or None for an unmapped codepoint.
	:param offset: The position of the replacement in the blob; Only used for replacements longer than two bytes.
	:return: The packed record.
	"""
	if replacement is None:
		result = ENTRY.pack(UNKNOWN_OFFSET, UNKNOWN_LENGTH)
	elif len(replacement) <= MAX_INLINE_LENGTH:
		literal = replacement.ljust(MAX_INLINE_LENGTH, b"\x00")
		result = literal + bytes((len(replacement), 0))
	elif len(replacement) > MAX_REPLACEMENT_LENGTH:
		raise TableFormatError(
			"Replacement {!r} is longer than {} bytes.".format(replacement, MAX_REPLACEMENT_LENGTH))
	else:
		result = ENTRY.pack(offset, len(replacement))
	return result


_tables = None  # type: Optional[MappingTables]
_tables_lock = threading.Lock()


def get_tables() -> MappingTables:
	"""
	Gets the process-wide mapping tables, loading them the first time this is called.

	The tables are read from the directory named by the environment variable "DEUNICODE_TABLE_DIR" if it is set,
	from the data bundled with the package if it was built with it, or else generated in memory.
	"""
	global _tables
	result = _tables
	if result is None:
		with _tables_lock:
			result = _tables
			if result is None:
				result = _load_tables()
				_tables = result
	return result


def set_tables(tables: MappingTables):
	"""
	Installs the process-wide mapping tables; Must be called before the first call to "get_tables()".
	"""
	global _tables
	with _tables_lock:
		if _tables is not None and _tables is not tables:
			raise RuntimeError("Mapping tables have already been initialized.")
		_tables = tables


def _load_tables() -> MappingTables:
	table_dir = os.environ.get(TABLE_DIR_ENV_VAR)
	if table_dir:
		logging.info("Loading mapping tables from \"%s\" as set by %s.", table_dir, TABLE_DIR_ENV_VAR)
		result = MappingTables.from_dir(table_dir)
	elif os.path.isfile(os.path.join(_BUNDLED_DATA_DIR, TABLE_FILENAME)):
		logging.debug("Loading bundled mapping tables from \"%s\".", _BUNDLED_DATA_DIR)
		result = MappingTables.from_dir(_BUNDLED_DATA_DIR)
	else:
		# Only pulled in when there are no pre-built artifacts
		from .build import build_tables
		logging.info("No pre-built mapping tables found; Generating them in memory.")
		result = build_tables()
	logging.debug("Loaded %s.", result)
	return result
