"""
Finding the references to Switch is properly the host's business, but Python
offers no such service, so here it is: a modest scope analysis.

The macro module must be imported as `from switch_expr.macro import Switch`,
optionally under another name, at module level or in a function body.
The local name so bound is visible in that scope and the scopes nested
within it. Every load of it there is a reference, except where a function,
lambda or comprehension rebinds the name for itself. Class bodies and the
module itself are not considered to shadow anything.
"""
import ast
from typing import Iterable, NamedTuple
from boozetools.support.foundation import Visitor

from .diagnostics import Code, Report
from .options import DEFAULT, Options

class MacroImport(NamedTuple):
	scope: ast.AST          # The module or function whose body holds the import
	block: list[ast.stmt]   # The statement list holding the import
	statement: ast.ImportFrom

class MacroImports(NamedTuple):
	imports: list[MacroImport]
	references: list[ast.Name]

	def aliases(self, scope:ast.AST) -> frozenset[str]:
		""" The local names a scope binds to the macro itself """
		return frozenset(a.asname or a.name for m in self.imports if m.scope is scope for a in m.statement.names)

	def remove_imports(self, module:ast.Module):
		"""
		Once every chain is expanded, the output should not depend on the macro module.
		A block left empty gets a `pass`, except at module level where empty is fine.
		"""
		for scope, block, statement in self.imports:
			block.remove(statement)
			if not block and block is not module.body:
				block.append(ast.Pass())

def find_references(module:ast.Module, report:Report, options:Options=DEFAULT) -> MacroImports:
	imports = list(_macro_imports(module, report, options))
	found = MacroImports(imports, [])
	finder = ReferenceFinder(found, options.macro_module)
	finder.visit(module, found.aliases(module))
	report.info("Found", len(found.references), "reference(s) to", options.entry_name)
	return found

_SCOPES = (ast.FunctionDef, ast.AsyncFunctionDef, ast.ClassDef)

def _each_block(module:ast.Module) -> Iterable[tuple[ast.AST, list[ast.stmt]]]:
	""" Every statement list in the module, with the module, function or class it belongs to. """
	stack = [(module, module)]
	while stack:
		node, scope = stack.pop()
		if isinstance(node, _SCOPES): scope = node
		for field, value in ast.iter_fields(node):
			if isinstance(value, list) and value and isinstance(value[0], ast.stmt):
				yield scope, value
		stack.extend((child, scope) for child in ast.iter_child_nodes(node))

def _macro_imports(module:ast.Module, report:Report, options:Options) -> Iterable[MacroImport]:
	macro = options.macro_module
	for scope, block in _each_block(module):
		for statement in block:
			if isinstance(statement, ast.ImportFrom) and statement.level == 0 and statement.module == macro:
				for alias in statement.names:
					if alias.name != options.entry_name:
						where = alias if hasattr(alias, "lineno") else statement
						report.fail(Code.InvalidImport, where, "Invalid import from %s: %s" % (macro, alias.name))
				if isinstance(scope, ast.ClassDef):
					report.fail(Code.InvalidImport, statement, "Import %s at module level or in a function, not in a class body" % options.entry_name)
				yield MacroImport(scope, block, statement)
			elif isinstance(statement, ast.Import):
				for alias in statement.names:
					if alias.name == macro or alias.name.startswith(macro+"."):
						where = alias if hasattr(alias, "lineno") else statement
						message = "Import the macro by name, as in: from %s import %s" % (macro, options.entry_name)
						report.fail(Code.InvalidImport, where, message)

class ReferenceFinder(Visitor):
	"""
	Top-down walk carrying the set of macro aliases visible at each point.
	Anything that gets evaluated in the enclosing scope (decorators,
	default values, annotations, the first iterable of a comprehension)
	is visited with the enclosing scope's aliases. A function body adds
	whatever macro aliases it imports for itself.
	"""
	def __init__(self, found:MacroImports, macro_module:str):
		self.found = found
		self.references = found.references
		self._macro_module = macro_module

	def visit_AST(self, node:ast.AST, env:frozenset[str]):
		for child in ast.iter_child_nodes(node):
			self.visit(child, env)

	def visit_Name(self, node:ast.Name, env:frozenset[str]):
		if isinstance(node.ctx, ast.Load) and node.id in env:
			self.references.append(node)

	def visit_FunctionDef(self, node:ast.FunctionDef, env:frozenset[str]):
		for d in node.decorator_list:
			self.visit(d, env)
		self._visit_signature(node.args, env)
		if node.returns is not None:
			self.visit(node.returns, env)
		inner = env - _parameters(node.args) - _local_stores(node.body, self._macro_module)
		inner |= self.found.aliases(node)
		for statement in node.body:
			self.visit(statement, inner)

	visit_AsyncFunctionDef = visit_FunctionDef

	def visit_Lambda(self, node:ast.Lambda, env:frozenset[str]):
		self._visit_signature(node.args, env)
		self.visit(node.body, env - _parameters(node.args))

	def visit_ListComp(self, node, env:frozenset[str]):
		generators = node.generators
		self.visit(generators[0].iter, env)
		inner = env - frozenset(_stores(g.target for g in generators))
		self.visit(generators[0].target, inner)
		for g in generators[0].ifs:
			self.visit(g, inner)
		for gen in generators[1:]:
			self.visit(gen, inner)
		if isinstance(node, ast.DictComp):
			self.visit(node.key, inner)
			self.visit(node.value, inner)
		else:
			self.visit(node.elt, inner)

	visit_SetComp = visit_GeneratorExp = visit_DictComp = visit_ListComp

	def _visit_signature(self, args:ast.arguments, env:frozenset[str]):
		for default in args.defaults + [d for d in args.kw_defaults if d is not None]:
			self.visit(default, env)
		for a in _each_arg(args):
			if a.annotation is not None:
				self.visit(a.annotation, env)

def _each_arg(args:ast.arguments) -> list[ast.arg]:
	every = args.posonlyargs + args.args + args.kwonlyargs
	if args.vararg: every.append(args.vararg)
	if args.kwarg: every.append(args.kwarg)
	return every

def _parameters(args:ast.arguments) -> frozenset[str]:
	return frozenset(a.arg for a in _each_arg(args))

def _stores(targets:Iterable[ast.AST]) -> Iterable[str]:
	for target in targets:
		for node in ast.walk(target):
			if isinstance(node, ast.Name) and isinstance(node.ctx, ast.Store):
				yield node.id

_NESTED_SCOPES = (ast.FunctionDef, ast.AsyncFunctionDef, ast.ClassDef, ast.Lambda, ast.ListComp, ast.SetComp, ast.GeneratorExp, ast.DictComp)
_CAPTURES = tuple(getattr(ast, kind) for kind in ("MatchAs", "MatchStar") if hasattr(ast, kind))

def _local_stores(body:list[ast.stmt], macro_module:str) -> frozenset[str]:
	""" Names a function body binds for itself, not counting nested scopes or global/nonlocal declarations. """
	bound, declared = set(), set()
	stack = list(body)
	while stack:
		node = stack.pop()
		if isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef, ast.ClassDef)):
			bound.add(node.name)
			stack.extend(node.decorator_list)
			continue
		if isinstance(node, _NESTED_SCOPES):
			continue
		if isinstance(node, ast.Name) and isinstance(node.ctx, (ast.Store, ast.Del)):
			bound.add(node.id)
		elif isinstance(node, ast.ImportFrom) and node.module == macro_module:
			pass  # The macro itself, not a shadow of it.
		elif isinstance(node, (ast.Import, ast.ImportFrom)):
			bound.update((a.asname or a.name).split(".")[0] for a in node.names)
		elif isinstance(node, (ast.Global, ast.Nonlocal)):
			declared.update(node.names)
		elif isinstance(node, ast.ExceptHandler) and node.name:
			bound.add(node.name)
		elif isinstance(node, _CAPTURES) and node.name:
			bound.add(node.name)
		stack.extend(ast.iter_child_nodes(node))
	return frozenset(bound - declared)
