"""
Python's syntax tree only points downward. The expansion pass walks
outward from each reference, so this keeps an index of parent links.

Replacing a node is the only way the pass changes the tree, and it
goes through here so the index stays truthful for the new subtree.
"""
import ast
from typing import Optional

class Tree:
	def __init__(self, root:ast.AST):
		self.root = root
		self._parent: dict[ast.AST, ast.AST] = {}
		self._index(root)

	def _index(self, top:ast.AST):
		stack = [top]
		while stack:
			node = stack.pop()
			for child in ast.iter_child_nodes(node):
				self._parent[child] = node
				stack.append(child)

	def parent_of(self, node:ast.AST) -> Optional[ast.AST]:
		return self._parent.get(node)

	def contains(self, ancestor:ast.AST, node:ast.AST) -> bool:
		""" Is node within (or identical to) ancestor? """
		while node is not None:
			if node is ancestor: return True
			node = self._parent.get(node)
		return False

	def replace(self, old:ast.AST, new:ast.AST):
		parent = self._parent.pop(old)
		if not _substitute(parent, old, new):
			raise LookupError("%r is not a child of %r" % (old, parent))
		ast.copy_location(new, old)
		self._parent[new] = parent
		self._index(new)

def _substitute(parent:ast.AST, old:ast.AST, new:ast.AST) -> bool:
	for field, value in ast.iter_fields(parent):
		if value is old:
			setattr(parent, field, new)
			return True
		if isinstance(value, list):
			for i, item in enumerate(value):
				if item is old:
					value[i] = new
					return True
	return False
