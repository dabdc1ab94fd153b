"""
Hygienic binding of a Switch target.

When the target is something like `f(x)`, comparing it against every case
would call `f` once per case. Instead the target gets bound once, to a name
nobody else in the module uses, and the comparisons refer to that name.

The binding happens right where the target is first needed, in the first
comparison, so matches and outcomes stay in the scope the author wrote them in:

	'a' if (_switch_target := f(x)) == 1 else 'b' if _switch_target == 2 else None

Python forbids `:=` in the iterable of a comprehension, and within a
comprehension in a class body. There, and only there, the binding is
the default value of a zero-argument lambda called on the spot:

	(lambda _switch_target=f(x): 'a' if _switch_target == 1 else None)()

That lambda is a new scope, so some things cannot survive inside it.
`lambda_hazard` says what, if anything, a given chain would lose.
"""
import ast
from enum import Enum, auto
from typing import NamedTuple, Optional, Sequence

from .diagnostics import Report
from .tree import Tree

_NAME_FIELDS = ("id", "arg", "name", "asname", "attr")

def identifiers_in(tree:ast.AST) -> set[str]:
	""" Every identifier occurring anywhere in the tree, whatever role it plays. """
	found = set()
	for node in ast.walk(tree):
		for field in _NAME_FIELDS:
			text = getattr(node, field, None)
			if isinstance(text, str): found.add(text)
		if isinstance(node, (ast.Global, ast.Nonlocal)):
			found.update(node.names)
	return found

class NameAllocator:
	"""
	Hands out names guaranteed fresh within one compilation unit.
	Every name handed out is also remembered as taken.
	"""
	def __init__(self, taken:set[str], prefix:str, report:Optional[Report]=None):
		self._taken = set(taken)
		self._prefix = prefix
		self._report = report

	def fresh(self) -> str:
		candidate, counter = self._prefix, 0
		while candidate in self._taken:
			counter += 1
			candidate = self._prefix + str(counter)
		self._taken.add(candidate)
		if self._report: self._report.info("Binding Switch target to", candidate)
		return candidate

def needs_binding(target:ast.expr) -> bool:
	# Names and constants may be evaluated as often as we like.
	return not isinstance(target, (ast.Name, ast.Constant))

class Binding(NamedTuple):
	name: str
	value: ast.expr

	def reference(self) -> ast.Name:
		return ast.Name(id=self.name, ctx=ast.Load())

	def assignment(self) -> ast.NamedExpr:
		return ast.NamedExpr(target=ast.Name(id=self.name, ctx=ast.Store()), value=self.value)

	def wrap(self, body:ast.expr) -> ast.Call:
		params = ast.arguments(
			posonlyargs=[], args=[ast.arg(arg=self.name, annotation=None)], vararg=None,
			kwonlyargs=[], kw_defaults=[], kwarg=None, defaults=[self.value],
		)
		return ast.Call(func=ast.Lambda(args=params, body=body), args=[], keywords=[])

def bind(names:NameAllocator, target:ast.expr) -> Binding:
	return Binding(names.fresh(), target)

class Scope(Enum):
	MODULE = auto()
	CLASS = auto()
	FUNCTION = auto()
	COMPREHENSION = auto()

class Site(NamedTuple):
	""" What matters about where a chain sits, for binding its target. """
	scope: Scope          # The scope the chain's own expressions evaluate in
	may_assign: bool      # Whether `:=` is legal here

_COMPREHENSIONS = (ast.ListComp, ast.SetComp, ast.GeneratorExp, ast.DictComp)

def site_of(tree:Tree, node:ast.AST) -> Site:
	"""
	Walk outward to the nearest function, class or module body.
	The first iterable of a comprehension belongs to the enclosing scope;
	everything else in a comprehension belongs to the comprehension.
	"""
	scope = None
	in_comprehension = in_iterable = False
	child, parent = node, tree.parent_of(node)
	while parent is not None:
		if isinstance(parent, ast.comprehension) and child is parent.iter:
			in_iterable = True
		elif isinstance(parent, _COMPREHENSIONS):
			first = parent.generators[0]
			if not (child is first and tree.contains(first.iter, node)):
				in_comprehension = True
				scope = scope or Scope.COMPREHENSION
		elif isinstance(parent, ast.Lambda) and child is parent.body:
			scope = scope or Scope.FUNCTION
			break
		elif isinstance(parent, (ast.FunctionDef, ast.AsyncFunctionDef)) and child in parent.body:
			scope = scope or Scope.FUNCTION
			break
		elif isinstance(parent, ast.ClassDef) and child in parent.body:
			scope = scope or Scope.CLASS
			break
		child, parent = parent, tree.parent_of(parent)
	scope = scope or Scope.MODULE
	# A comprehension in a class body may not assign to the class.
	class_comprehension = in_comprehension and isinstance(parent, ast.ClassDef)
	return Site(scope, not (in_iterable or class_comprehension))

_NESTED_FUNCTIONS = (ast.Lambda, ast.FunctionDef, ast.AsyncFunctionDef, ast.ClassDef)

def _own_nodes(node:ast.AST):
	""" Like ast.walk, but without descending into nested functions or classes. """
	stack = [node]
	while stack:
		node = stack.pop()
		yield node
		stack.extend(c for c in ast.iter_child_nodes(node) if not isinstance(c, _NESTED_FUNCTIONS))

def lambda_hazard(site:Site, parts:Sequence[ast.expr]) -> Optional[str]:
	"""
	Says why moving these matches and outcomes into a lambda would change
	what they mean, or returns None if it would not.
	"""
	if site.scope is Scope.CLASS:
		return "names defined in the class body"
	for part in parts:
		for node in _own_nodes(part):
			if isinstance(node, (ast.Yield, ast.YieldFrom)): return "yield"
			if isinstance(node, ast.Await): return "await"
			if isinstance(node, ast.NamedExpr): return "the assignment to %s" % node.target.id
			if isinstance(node, ast.Call) and isinstance(node.func, ast.Name) and node.func.id == "super" and not node.args:
				return "super()"
	return None
