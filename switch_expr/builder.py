"""
Turn a finished chain into nested conditional expressions.
"""
import ast
import copy
from typing import Optional, Sequence

Case = tuple[ast.expr, ast.expr]

def build(cases:Sequence[Case], default:Optional[ast.expr], target:ast.expr, first:Optional[ast.expr]=None) -> ast.expr:
	"""
	Right-fold the cases into `outcome if target == match else ...`.
	First match wins. Duplicate matches are not an error, just dead.
	With nothing left to test, the default applies, or else None.

	If given, `first` stands in for the target in the first comparison only.
	"""
	if not cases:
		return _otherwise(default)
	(match, outcome), rest = cases[0], cases[1:]
	left = copy.deepcopy(target) if first is None else first
	test = ast.Compare(left=left, ops=[ast.Eq()], comparators=[match])
	return ast.IfExp(test=test, body=outcome, orelse=build(rest, default, target))

def evaluate_then(target:ast.expr, default:Optional[ast.expr]) -> ast.Subscript:
	""" With no cases, the target is evaluated for its effect: `(target, default)[1]` """
	pair = ast.Tuple(elts=[target, _otherwise(default)], ctx=ast.Load())
	return ast.Subscript(value=pair, slice=ast.Constant(value=1), ctx=ast.Load())

def _otherwise(default:Optional[ast.expr]) -> ast.expr:
	return ast.Constant(value=None) if default is None else default
