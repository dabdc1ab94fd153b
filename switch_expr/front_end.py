"""
Glue between source text and the expansion pass:
parse with Python's own parser, find the references, expand, unparse.
"""
import ast
from pathlib import Path
from typing import Optional

from .diagnostics import Report
from .options import DEFAULT, Options
from .references import find_references
from .scheduler import expand_references

def expand_tree(module:ast.Module, report:Report, options:Options=DEFAULT) -> int:
	""" Expand every chain in the module, in place, and drop the macro import. """
	found = find_references(module, report, options)
	count = expand_references(module, found.references, report, options)
	found.remove_imports(module)
	return count

def expand_text(text:str, path:Optional[Path], report:Report, options:Options=DEFAULT) -> str:
	""" Source text in, expanded source text out. SyntaxError is the parser's to raise. """
	report.set_source(text, path)
	module = ast.parse(text, filename="<unknown>" if path is None else str(path))
	count = expand_tree(module, report, options)
	report.info("Expanded", count, "Switch-chain(s) in", path)
	return ast.unparse(module)

def expand_file(path:Path, report:Report, options:Options=DEFAULT) -> str:
	with open(path, "r", encoding="utf-8") as fh:
		text = fh.read()
	return expand_text(text, path, report, options)
