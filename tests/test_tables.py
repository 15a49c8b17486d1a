import struct

import pytest

from deunicode.tables import ENTRY, UNKNOWN_LENGTH, UNKNOWN_OFFSET, MappingTables, TableFormatError, create_entry, \
	get_tables, set_tables


def _entry(literal: int, length: int) -> bytes:
	return struct.pack("<HBx", literal, length)


def test_create_entry_inline_literal():
	assert create_entry(b"AE") == b"AE\x02\x00"
	assert create_entry(b"e") == b"e\x00\x01\x00"
	assert create_entry(b"") == b"\x00\x00\x00\x00"


def test_create_entry_offset_is_little_endian():
	assert create_entry(b"Yuan ", 0x0102) == b"\x02\x01\x05\x00"


def test_create_entry_unknown():
	assert ENTRY.unpack(create_entry(None)) == (UNKNOWN_OFFSET, UNKNOWN_LENGTH)


def test_create_entry_too_long():
	with pytest.raises(TableFormatError):
		create_entry(b"x" * 256, 0)


def test_lookup_inline():
	tables = MappingTables(b"".join((create_entry(b"a"), create_entry(b"AE"), create_entry(b""))), b"")
	assert len(tables) == 3
	assert tables.lookup(0) == b"a"
	assert tables.lookup(1) == b"AE"
	assert tables.lookup(2) == b""


def test_lookup_blob():
	blob = b"Qi Yuan "
	tables = MappingTables(_entry(0, 3) + _entry(3, 5) + _entry(0, 8), blob)
	assert tables.lookup(0) == b"Qi "
	assert tables.lookup(1) == b"Yuan "
	assert tables.lookup(2) == b"Qi Yuan "


def test_lookup_past_end_of_table():
	tables = MappingTables(create_entry(b"a"), b"")
	assert tables.lookup(1) is None
	assert tables.lookup(0x10FFFF) is None


@pytest.mark.parametrize("offset,length", [
	(UNKNOWN_OFFSET, UNKNOWN_LENGTH),
	# Offset in range but end past the blob
	(6, 3),
	# Offset exactly at the end of the blob
	(8, 3),
])
def test_lookup_out_of_bounds_pointer_is_unknown(offset: int, length: int):
	tables = MappingTables(_entry(offset, length), b"Qi Yuan ")
	assert tables.lookup(0) is None


def test_lookup_pointer_ending_at_end_of_blob():
	tables = MappingTables(_entry(3, 5), b"Qi Yuan ")
	assert tables.lookup(0) == b"Yuan "


def test_invalid_table_length():
	with pytest.raises(TableFormatError):
		MappingTables(b"\x00" * 5, b"")


def test_blob_too_long():
	with pytest.raises(TableFormatError):
		MappingTables(b"", b"a" * 0x10000)


@pytest.mark.parametrize("blob", [b"caf\xc3\xa9", b"del\x7f"])
def test_blob_not_ascii(blob: bytes):
	with pytest.raises(TableFormatError):
		MappingTables(b"", blob)


def test_from_dir(tmp_path, small_tables):
	(tmp_path / "pointers.bin").write_bytes(small_tables.table)
	(tmp_path / "mapping.txt").write_bytes(small_tables.blob)
	loaded = MappingTables.from_dir(str(tmp_path))
	assert len(loaded) == len(small_tables)
	assert loaded.lookup(0x101) == b"Yuan "
	assert loaded.lookup(0x106) is None


def test_get_tables_is_singleton():
	assert get_tables() is get_tables()


def test_set_tables_after_initialization(small_tables):
	tables = get_tables()
	# Installing the same tables again is harmless
	set_tables(tables)
	with pytest.raises(RuntimeError):
		set_tables(small_tables)
	assert get_tables() is tables
