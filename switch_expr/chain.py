"""
Parsing a Switch-chain means walking outward from the reference:

	Switch(target)      -- the entry call
	.case(match, outcome)
	.default(outcome)
	()                  -- the terminator (or .end() under that convention)

Each step outward must be one of a small number of shapes.
The first shape that doesn't fit aborts the pass with a diagnostic.
"""
import ast
from enum import Enum, auto
from typing import Callable, NoReturn, Optional

from .builder import Case
from .diagnostics import Code, Report
from .options import CALL, END, Options
from .tree import Tree

class State(Enum):
	EXPECT_ENTRY_CALL = auto()
	CHAIN_LOOP = auto()
	TERMINATED = auto()
	FAILED = auto()

class Chain:
	""" What a parsed chain says to do. Lives just long enough to get built. """
	target: ast.expr
	cases: list[Case]
	default: Optional[ast.expr]
	def __init__(self, target:ast.expr):
		self.target = target
		self.cases = []
		self.default = None
	def __repr__(self):
		return "<Chain %d case(s)%s>" % (len(self.cases), "" if self.default is None else " + default")

def _nothing_to_settle(args:list[ast.expr]): pass

_HINTS = {
	CALL: "Finish a Switch-chain by calling it with no arguments, as in Switch(x).case(1, 2)()",
	END: "Finish a Switch-chain with .end(), as in Switch(x).case(1, 2).end()",
}

class ChainParser:
	"""
	One parser per chain. The `state` attribute tells where it got to.

	The `settle` callback gets each argument list before the parser
	commits to its contents, giving the scheduler the chance to expand
	any chains nested within. It may replace elements of the list in place.
	"""
	state: State

	def __init__(self, tree:Tree, report:Report, options:Options, settle:Callable[[list[ast.expr]], None]=_nothing_to_settle):
		self.tree = tree
		self.report = report
		self.options = options
		self.settle = settle
		self.state = State.EXPECT_ENTRY_CALL

	def parse(self, reference:ast.Name) -> tuple[ast.expr, Chain]:
		""" Returns the topmost node of the chain (to get replaced) and what the chain says. """
		assert self.state is State.EXPECT_ENTRY_CALL
		entry = self.tree.parent_of(reference)
		if not (isinstance(entry, ast.Call) and entry.func is reference):
			self._fail(Code.NotInvoked, reference, "Expected %s to be invoked as a function" % reference.id)
		args = self._arguments(entry, 1, "%s()" % reference.id)
		chain = Chain(args[0])
		self.state = State.CHAIN_LOOP
		current = entry
		while self.state is State.CHAIN_LOOP:
			current = self._step(current, chain)
		return current, chain

	def _step(self, current:ast.expr, chain:Chain) -> ast.expr:
		parent = self.tree.parent_of(current)
		terminator = self.options.terminator
		if isinstance(parent, ast.Attribute) and parent.value is current:
			member = parent.attr
			if member == "case": return self._case(parent, chain)
			if member == "default": return self._default(parent, chain)
			if member == "end" and terminator == END: return self._terminate(self._invocation(parent))
			self._fail(Code.UnexpectedChainMember, parent, "Unexpected member %r on Switch-chain" % member, _HINTS[terminator])
		if isinstance(parent, ast.Call) and parent.func is current and terminator == CALL:
			return self._terminate(parent)
		self._fail(Code.UnterminatedChain, current, "Unterminated Switch-chain", _HINTS[terminator])

	def _case(self, member:ast.Attribute, chain:Chain) -> ast.Call:
		if chain.default is not None:
			self._fail(Code.CaseAfterDefault, member, "Cases can not be added after the default case")
		call = self._invocation(member)
		match, outcome = self._arguments(call, 2, ".case()")
		self.report.info("Encountered case:", ast.unparse(match))
		chain.cases.append((match, outcome))
		return call

	def _default(self, member:ast.Attribute, chain:Chain) -> ast.Call:
		if chain.default is not None:
			self._fail(Code.DuplicateDefault, member, "Default case has already been specified")
		call = self._invocation(member)
		chain.default, = self._arguments(call, 1, ".default()")
		self.report.info("Encountered default case:", ast.unparse(chain.default))
		return call

	def _terminate(self, call:ast.Call) -> ast.Call:
		if call.args or call.keywords:
			self._fail(Code.ArityError, call, "The end of a Switch-chain takes no arguments")
		self.state = State.TERMINATED
		return call

	def _invocation(self, member:ast.Attribute) -> ast.Call:
		call = self.tree.parent_of(member)
		if not (isinstance(call, ast.Call) and call.func is member):
			self._fail(Code.NonCallQualifier, member, "Expected member %s to have been invoked as a function" % member.attr)
		return call

	def _arguments(self, call:ast.Call, arity:int, what:str) -> list[ast.expr]:
		for kw in call.keywords:
			self._fail(Code.NonExpressionArgument, kw, "Expected plain positional arguments to %s but found a keyword argument" % what)
		for arg in call.args:
			if isinstance(arg, ast.Starred):
				self._fail(Code.NonExpressionArgument, arg, "Expected plain positional arguments to %s but found *%s" % (what, ast.unparse(arg.value)))
		self.settle(call.args)
		if len(call.args) != arity:
			plural = '' if arity == 1 else 's'
			self._fail(Code.ArityError, call, "Expected %s to take %d argument%s, but got %d" % (what, arity, plural, len(call.args)))
		return call.args

	def _fail(self, kind:Code, node:ast.AST, message:str, hint:Optional[str]=None) -> NoReturn:
		self.state = State.FAILED
		self.report.fail(kind, node, message, hint)
