"""
Transliterates arbitrary Unicode text to ASCII using a precomputed, context-free mapping of each codepoint.
"""

__author__ = "Todd Shore <errantlinguist+github@gmail.com>"
__copyright__ = "Copyright (C) 2018 Todd Shore"
__license__ = "Apache License, Version 2.0"

from .engine import DEFAULT_PLACEHOLDER, AllocationError, CapacityExceededError, InvalidEncodingError, \
	transliterate, transliterate_custom, transliterate_custom_into, transliterate_into
from .tables import MappingTables, TableFormatError, get_tables, set_tables

__all__ = [
	"AllocationError",
	"CapacityExceededError",
	"DEFAULT_PLACEHOLDER",
	"InvalidEncodingError",
	"MappingTables",
	"TableFormatError",
	"deunicode",
	"get_tables",
	"set_tables",
	"transliterate",
	"transliterate_custom",
	"transliterate_custom_into",
	"transliterate_into",
]


def deunicode(text: str, placeholder: str = DEFAULT_PLACEHOLDER.decode("ascii")) -> str:
	"""
	Transliterates a string to ASCII.

	>>> deunicode("Æneid")
	'AEneid'

	:param text: The string to transliterate.
	:param placeholder: The string to use for each character without a mapping, e.g. "\\ufffd".
	:return: The transliterated string, which is pure ASCII unless the placeholder isn't.
	"""
	return transliterate_custom(text, placeholder.encode("utf-8")).decode("utf-8")
