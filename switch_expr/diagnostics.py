"""
Everything that can go wrong while expanding a Switch-chain gets a stable code,
a message for humans, and (where the tree knows where it came from) a picture
of the offending bit of source text.

Nothing here is recoverable: the first problem aborts the pass.
"""
import ast
import sys
from enum import Enum
from pathlib import Path
from typing import NoReturn, Optional
from boozetools.support.failureprone import SourceText, illustration

from .location import SourceIndex, Span

class Code(Enum):
	NotInvoked = 1
	ArityError = 2
	CaseAfterDefault = 3
	DuplicateDefault = 4
	UnexpectedChainMember = 5
	UnterminatedChain = 6
	NonCallQualifier = 7
	NonExpressionArgument = 8
	InvalidImport = 9
	UnbindableTarget = 10

	def qualified(self) -> str:
		return "ERR:SwitchExpr:%d" % self.value

class SwitchExprError(Exception):
	"""
	Raised to abort an expansion pass.
	`code` is for machines, `message` for people, `frame` for people looking at the source.
	"""
	kind: Code
	code: str
	message: str
	frame: str

	def __init__(self, kind:Code, message:str, frame:str=""):
		super().__init__("%s: %s" % (kind.qualified(), message))
		self.kind = kind
		self.code = kind.qualified()
		self.message = message
		self.frame = frame

class Report:
	"""
	The expansion pass tells this object what it is doing, and what went wrong.
	It knows the source text of the unit being expanded, if anyone bothered to say.
	"""
	_issues : list["Pic"]

	def __init__(self, *, verbose:int=0):
		self._verbose = verbose or 0   # Because None is incomparable.
		self._issues = []
		self._index = None
		self._text = None

	def ok(self): return not self._issues
	def sick(self): return bool(self._issues)

	def set_source(self, text:str, path:Optional[Path]=None):
		self._index = SourceIndex(text, path)
		self._text = SourceText(text) if path is None else SourceText(text, filename=str(path))

	def info(self, *args):
		if self._verbose:
			print(*args, file=sys.stderr)

	def fail(self, kind:Code, node:ast.AST, message:str, hint:Optional[str]=None) -> NoReturn:
		""" Make a picture of the problem, keep it, and abort the pass. """
		footer = ["Hint: "+hint] if hint else []
		pic = Pic("%s: %s" % (kind.qualified(), message), self._annotate(node), footer)
		self._issues.append(pic)
		raise SwitchExprError(kind, message, pic.frame())

	def _annotate(self, node:ast.AST) -> list["Annotation"]:
		if self._index is None: return []
		span = self._index.span_of(node)
		if span is None: return []
		return [Annotation(self._text, span)]

	def complain_to_console(self):
		""" Emit all the issues to the console. """
		for pic in self._issues:
			print(pic.as_text(), file=sys.stderr)
		sys.stderr.flush()

class Annotation:
	path: Optional[Path]
	slice: slice
	caption: str
	def __init__(self, source:SourceText, span:Span, caption:str=""):
		self._source = source
		self.path = span.path
		self.slice = span.slice
		self.caption = caption
	def illustrate(self):
		row, col = self._source.find_row_col(self.slice.start)
		single_line = self._source.line_of_text(row)
		# Multi-line spans get illustrated on their first line only.
		room = len(single_line.rstrip("\r\n")) - col
		width = max(1, min(self.slice.stop - self.slice.start, room))
		return illustration(single_line, col, width, prefix='% 6d |' % row, caption=self.caption)

class Pic:
	def __init__(self, intro:str, anns:list[Annotation], footer=()):
		self._intro, self._anns, self._footer = intro, anns, footer
	def frame(self):
		lines = []
		path = None
		for ann in self._anns:
			if ann.path != path:
				path = ann.path
				lines.append(str(path))
			lines.append(ann.illustrate())
		return '\n'.join(lines)
	def as_text(self):
		lines = [self._intro, ""]
		if self._anns: lines.append(self.frame())
		lines.extend(self._footer)
		return '\n'.join(lines)
