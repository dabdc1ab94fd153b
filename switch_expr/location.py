"""
Python's syntax tree records where each node came from as (line, column) pairs,
with the columns counted in UTF-8 bytes. Whatever prints error messages wants
character offsets into the text instead, so this translates.
"""
import ast
import re
from pathlib import Path
from typing import NamedTuple, Optional

_LINE_BREAK = re.compile(r"\r\n?|\n")

class Span(NamedTuple):
	""" Aimed at whatever prints error messages """
	path: Optional[Path]
	slice: slice

class SourceIndex:
	"""
	One per compilation unit. Knows where each line starts,
	so it can turn node positions into spans of characters.
	"""
	def __init__(self, text:str, path:Optional[Path]=None):
		self.text, self.path = text, path
		self._starts = [0] + [m.end() for m in _LINE_BREAK.finditer(text)]

	def _line(self, lineno:int) -> str:
		start = self._starts[lineno-1]
		stop = self._starts[lineno] if lineno < len(self._starts) else len(self.text)
		return self.text[start:stop]

	def offset(self, lineno:int, col_offset:int) -> int:
		lineno = max(1, min(lineno, len(self._starts)))
		prefix = self._line(lineno).encode("utf-8")[:col_offset]
		return self._starts[lineno-1] + len(prefix.decode("utf-8", errors="ignore"))

	def span_of(self, node:ast.AST) -> Optional[Span]:
		if getattr(node, "lineno", None) is None: return None
		start = self.offset(node.lineno, node.col_offset)
		if getattr(node, "end_lineno", None) is None: stop = start
		else: stop = self.offset(node.end_lineno, node.end_col_offset)
		if isinstance(node, ast.Attribute):
			# Point at the member name, not the whole chain leading up to it.
			start = max(start, stop - len(node.attr))
		return Span(self.path, slice(start, stop))
