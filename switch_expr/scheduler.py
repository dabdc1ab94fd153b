"""
The expansion pass proper: every reference to Switch gets its chain
replaced by plain conditional expressions, exactly once, innermost first.

Innermost-first happens without a separate fixed-point pass: before the
parser commits to any argument list, each unexpanded reference inside
those arguments is expanded first. By the time an outer chain captures
its arguments, any chains inside them are already conditionals.
"""
import ast
from typing import Sequence

from .builder import build, evaluate_then
from .chain import Chain, ChainParser
from .diagnostics import Code, Report
from .hygiene import NameAllocator, bind, identifiers_in, lambda_hazard, needs_binding, site_of
from .options import DEFAULT, Options
from .tree import Tree

_UNBINDABLE_HINT = "Assign the target to a variable before the comprehension, and switch on that."

class Expansion:
	"""
	Everything one pass over one compilation unit needs to remember.
	Nothing here outlives the pass, nor is shared between units.
	"""
	processed: set[ast.Name]

	def __init__(self, module:ast.Module, report:Report, options:Options=DEFAULT):
		self.tree = Tree(module)
		self.report = report
		self.options = options
		self.processed = set()
		self.names = NameAllocator(identifiers_in(module), options.binding_prefix, report)
		self._references: Sequence[ast.Name] = ()

	def expand_all(self, references:Sequence[ast.Name]) -> int:
		""" Returns how many chains got expanded. """
		self._references = references
		for reference in references:
			self._expand(reference)
		ast.fix_missing_locations(self.tree.root)
		return len(self.processed)

	def _expand(self, reference:ast.Name):
		if reference in self.processed: return
		parser = ChainParser(self.tree, self.report, self.options, settle=self._settle)
		top, chain = parser.parse(reference)
		self.report.info("Expanding", chain, "at line", getattr(top, "lineno", "?"))
		self.tree.replace(top, self._conditional(top, chain))
		self.processed.add(reference)

	def _conditional(self, top:ast.expr, chain:Chain) -> ast.expr:
		if not needs_binding(chain.target):
			return build(chain.cases, chain.default, chain.target)
		if not chain.cases:
			return evaluate_then(chain.target, chain.default)
		site = site_of(self.tree, top)
		if site.may_assign:
			binding = bind(self.names, chain.target)
			return build(chain.cases, chain.default, binding.reference(), first=binding.assignment())
		parts = [e for case in chain.cases for e in case]
		if chain.default is not None: parts.append(chain.default)
		hazard = lambda_hazard(site, parts)
		if hazard is not None:
			message = "Here the target can only be bound by a lambda, which would break %s" % hazard
			self.report.fail(Code.UnbindableTarget, chain.target, message, _UNBINDABLE_HINT)
		binding = bind(self.names, chain.target)
		return binding.wrap(build(chain.cases, chain.default, binding.reference()))

	def _settle(self, args:list[ast.expr]):
		# Expanding a nested chain may replace args[i] itself, so look it up fresh each time.
		for i in range(len(args)):
			for reference in self._references:
				if reference not in self.processed and self.tree.contains(args[i], reference):
					self._expand(reference)

def expand_references(module:ast.Module, references:Sequence[ast.Name], report:Report, options:Options=DEFAULT) -> int:
	""" Rewrite the module in place. Either every chain gets expanded, or this raises. """
	return Expansion(module, report, options).expand_all(references)
