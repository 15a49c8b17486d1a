"""
Transliterates UTF-8 text to ASCII one codepoint at a time using the packed mapping tables.
"""

__author__ = "Todd Shore <errantlinguist+github@gmail.com>"
__copyright__ = "Copyright (C) 2018 Todd Shore"
__license__ = "Apache License, Version 2.0"

import re
from typing import Optional, Union

from .tables import MappingTables, get_tables

DEFAULT_PLACEHOLDER = b"[?]"
NON_ASCII_PATTERN = re.compile(b"[\x7f-\xff]")
"""Matches the first byte which can't be copied verbatim; DEL (0x7F) is deliberately looked up in the table."""
SPACE = ord(" ")

_MIN_CAPACITY_MASK = 15

Text = Union[bytes, bytearray, memoryview, str]


class AllocationError(MemoryError):
	pass


class CapacityExceededError(ValueError):

	def __init__(self, capacity: int, required: int):
		super().__init__(
			"Output buffer has a capacity of {} byte(s) but at least {} are required.".format(capacity, required))
		self.capacity = capacity
		self.required = required


class InvalidEncodingError(ValueError):
	pass


class _BoundedWriter(object):
	"""
	Writes into a fixed-capacity buffer owned by the caller.
	"""

	def __init__(self, output):
		view = memoryview(output).cast("B")
		if view.readonly:
			raise TypeError("Output buffer is read-only.")
		self.__view = view
		self.__length = 0

	def pop(self):
		self.__length -= 1

	def result(self) -> memoryview:
		return self.__view[:self.__length]

	def release(self):
		self.__view.release()

	def write(self, data: bytes):
		end = self.__length + len(data)
		if end > len(self.__view):
			raise CapacityExceededError(len(self.__view), end)
		self.__view[self.__length:end] = data
		self.__length = end


class _GrowableWriter(object):
	"""
	Writes into a buffer which is grown as needed and is handed over to the caller once finished.
	"""

	def __init__(self, initial_capacity: int):
		try:
			self.__buf = bytearray(initial_capacity)
		except MemoryError as e:
			raise AllocationError("Could not allocate {} byte(s).".format(initial_capacity)) from e
		self.__length = 0

	def pop(self):
		self.__length -= 1

	def result(self) -> bytes:
		buf = self.__buf
		self.__buf = None
		del buf[self.__length:]
		result = bytes(buf)
		return result

	def write(self, data: bytes):
		end = self.__length + len(data)
		if end > len(self.__buf):
			self.__grow(end)
		self.__buf[self.__length:end] = data
		self.__length = end

	def __grow(self, required: int):
		capacity = max(len(self.__buf) * 2, required)
		try:
			self.__buf.extend(bytes(capacity - len(self.__buf)))
		except MemoryError as e:
			self.__buf = None
			raise AllocationError("Could not grow output buffer to {} byte(s).".format(capacity)) from e


def transliterate(text: Text, tables: Optional[MappingTables] = None) -> bytes:
	"""
	Transliterates UTF-8 text to ASCII, replacing unmapped codepoints with "[?]".

	:param text: The text to transliterate; If a str is given, it is encoded as UTF-8 first.
	:param tables: The tables to look codepoints up in; Defaults to the process-wide tables.
	:return: A new bytes object holding only ASCII.
	:raises InvalidEncodingError: If the text is not valid UTF-8.
	"""
	return transliterate_custom(text, DEFAULT_PLACEHOLDER, tables)


def transliterate_custom(text: Text, placeholder: bytes, tables: Optional[MappingTables] = None) -> bytes:
	"""
	Transliterates UTF-8 text to ASCII, replacing unmapped codepoints with the given placeholder.

	:param text: The text to transliterate; If a str is given, it is encoded as UTF-8 first.
	:param placeholder: The bytes to write for each codepoint without a mapping.
	:param tables: The tables to look codepoints up in; Defaults to the process-wide tables.
	:return: A new bytes object.
	:raises InvalidEncodingError: If the text is not valid UTF-8.
	:raises AllocationError: If the output buffer could not be allocated.
	"""
	text = _as_bytes(text)
	# Rounding up to a multiple of 16 minus one keeps short outputs from needing to grow
	writer = _GrowableWriter(len(text) | _MIN_CAPACITY_MASK)
	_transliterate(text, placeholder, writer, tables)
	return writer.result()


def transliterate_custom_into(output, text: Text, placeholder: bytes,
							  tables: Optional[MappingTables] = None) -> memoryview:
	"""
	Transliterates UTF-8 text to ASCII into a caller-supplied buffer, replacing unmapped codepoints with the given
	placeholder.

	:param output: A writable buffer, e.g. a bytearray; Its length is the capacity available.
	:param text: The text to transliterate; If a str is given, it is encoded as UTF-8 first.
	:param placeholder: The bytes to write for each codepoint without a mapping.
	:param tables: The tables to look codepoints up in; Defaults to the process-wide tables.
	:return: A view of the prefix of the output buffer which was written to. The buffer can't be resized while this
		view is alive; Call "release()" on it first.
	:raises CapacityExceededError: If the output does not fit into the buffer; The buffer contents are then undefined.
	:raises InvalidEncodingError: If the text is not valid UTF-8.
	"""
	writer = _BoundedWriter(output)
	try:
		_transliterate(_as_bytes(text), placeholder, writer, tables)
	except Exception:
		# The caller's buffer is resizable again as soon as this raises
		writer.release()
		raise
	return writer.result()


def transliterate_into(output, text: Text, tables: Optional[MappingTables] = None) -> memoryview:
	"""
	Like "transliterate_custom_into(...)" using "[?]" as the placeholder.
	"""
	return transliterate_custom_into(output, text, DEFAULT_PLACEHOLDER, tables)


def _as_bytes(text: Text) -> Union[bytes, bytearray, memoryview]:
	if isinstance(text, str):
		try:
			result = text.encode("utf-8")
		except UnicodeEncodeError as e:
			raise InvalidEncodingError("Text cannot be encoded as UTF-8: {}".format(e)) from e
	else:
		result = text
	return result


def _transliterate(text: Union[bytes, bytearray, memoryview], placeholder: bytes,
				   writer: Union[_BoundedWriter, _GrowableWriter], tables: Optional[MappingTables]):
	non_ascii_match = NON_ASCII_PATTERN.search(text)
	if non_ascii_match is None:
		writer.write(text)
		return

	ascii_length = non_ascii_match.start()
	try:
		rest = bytes(text[ascii_length:]).decode("utf-8")
	except UnicodeDecodeError as e:
		raise InvalidEncodingError(
			"Invalid UTF-8 at byte {}: {}".format(ascii_length + e.start, e.reason)) from e
	writer.write(text[:ascii_length])

	if tables is None:
		tables = get_tables()
	lookup = tables.lookup

	chars = iter(rest)
	char = next(chars, None)
	# The replacement of the next char if it was already looked up while deciding whether to drop a separator
	has_peeked = False
	peeked = None
	while char is not None:
		if has_peeked:
			replacement = peeked
		else:
			replacement = lookup(ord(char))
		char = next(chars, None)
		has_peeked = False

		if replacement is None:
			writer.write(placeholder)
			continue

		writer.write(replacement)
		if len(replacement) > 1 and replacement[-1] == SPACE:
			# A trailing space only separates two known replacements; It is dropped at the end of the text, before
			# an unknown char and before a replacement starting with a space of its own
			if char is None:
				drop_separator = True
			else:
				peeked = lookup(ord(char))
				has_peeked = True
				drop_separator = peeked is None or peeked[:1] == b" "
			if drop_separator:
				writer.pop()
