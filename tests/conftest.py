import pytest

from deunicode.build import pack_tables
from deunicode.tables import MappingTables

SMALL_REPLACEMENTS = dict((codepoint, chr(codepoint)) for codepoint in range(0x80))
SMALL_REPLACEMENTS.update({
	0x100: "Qi ",
	0x101: "Yuan ",
	0x102: "",
	0x103: "x",
	0x104: " lead ",
	0x105: "ab",
	# 0x106 is left unmapped
	0x107: "end ",
	0x108: "Qi Yuan ",
})


@pytest.fixture(scope="session")
def small_tables() -> MappingTables:
	return pack_tables(SMALL_REPLACEMENTS)
