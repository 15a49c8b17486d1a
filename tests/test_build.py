import pytest

from deunicode.build import _create_blob, collect_replacements, pack_tables, write_tables
from deunicode.tables import MAX_BLOB_LENGTH, MappingTables, TableFormatError


def test_create_blob_contains_every_string():
	strings = frozenset((b"Qi ", b"Yuan ", b"Qi Yuan ", b"gag", b"gagg", b"ggag", b"agg", b"unicorn "))
	blob = _create_blob(strings)
	for string in strings:
		assert string in blob


def test_create_blob_skips_contained_strings():
	blob = _create_blob(frozenset((b"Qi ", b"Yuan ", b"Qi Yuan ")))
	assert blob == b"Qi Yuan "


def test_create_blob_overlaps_pieces():
	blob = _create_blob(frozenset((b"abcd", b"cdef")))
	assert blob == b"abcdef"


def test_create_blob_empty():
	assert _create_blob(frozenset()) == b""


def test_pack_tables(small_tables):
	assert len(small_tables) == 0x109
	assert small_tables.lookup(ord("a")) == b"a"
	assert small_tables.lookup(0x100) == b"Qi "
	assert small_tables.lookup(0x102) == b""
	assert small_tables.lookup(0x105) == b"ab"
	assert small_tables.lookup(0x106) is None
	assert small_tables.lookup(0x108) == b"Qi Yuan "
	assert small_tables.lookup(0x109) is None
	# Long replacements share the same bytes of the blob
	assert len(small_tables.blob) < len(b"Qi Yuan end  lead ")


def test_pack_tables_empty():
	tables = pack_tables({})
	assert len(tables) == 0
	assert tables.lookup(0) is None


def test_pack_tables_blob_overflow():
	# Neither contained in nor overlapping each other
	replacements = dict((codepoint, "<{:06d}>".format(codepoint)) for codepoint in range(MAX_BLOB_LENGTH // 8 + 1))
	with pytest.raises(TableFormatError):
		pack_tables(replacements)


def test_collect_replacements_latin1():
	replacements = collect_replacements(0xFF)
	assert max(replacements) <= 0xFF
	assert replacements[ord("a")] == "a"
	assert replacements[0x7F] == "\x7f"
	assert replacements[0xC6] == "AE"
	assert replacements[0xE9] == "e"
	for replacement in replacements.values():
		assert replacement.isascii()


def test_write_tables(tmp_path, small_tables):
	table_path, blob_path = write_tables(small_tables, str(tmp_path / "data"))
	loaded = MappingTables.from_files(table_path, blob_path)
	assert loaded.table == small_tables.table
	assert loaded.blob == small_tables.blob


def test_collect_replacements_prefers_unidecode_over_emoji_names():
	replacements = collect_replacements(0x1F984)
	# Both are also emoji but unidecode already has a transliteration for them
	assert replacements[0xA9] == "(c)"
	assert replacements[0x1F170] == "[A]"
	assert replacements[0x1F984] == "unicorn "
