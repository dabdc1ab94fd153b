import ast
from pathlib import Path
from textwrap import dedent
import unittest

from switch_expr import diagnostics
from switch_expr.front_end import expand_file, expand_text
from switch_expr.macro import Switch, MacroNotExpanded
from switch_expr.options import Options, END

base_folder = Path(__file__).parent.parent
zoo_ok = base_folder/"zoo/ok"

PREFIX = "from switch_expr.macro import Switch\n"

def _expand(text:str, **kwargs) -> str:
	report = diagnostics.Report(verbose=False)
	return expand_text(PREFIX + dedent(text), None, report, Options(**kwargs))

def _run(code:str) -> dict:
	namespace = {}
	exec(compile(code, "<expanded>", "exec"), namespace)
	return namespace

def _good(which, **kwargs) -> dict:
	report = diagnostics.Report(verbose=False)
	code = expand_file(zoo_ok/(which+".py"), report, Options(**kwargs))
	assert report.ok()
	return _run(code)

def _result(text:str, **kwargs):
	return _run(_expand("result = "+text, **kwargs))["result"]

def _bound_names(code:str) -> list[str]:
	return [n.target.id for n in ast.walk(ast.parse(code)) if isinstance(n, ast.NamedExpr)]

class ExampleSmokeTests(unittest.TestCase):
	""" Expand the zoo of good examples; run them; check the answers. """

	def test_chains(self):
		namespace = _good("chains")
		self.assertIsNone(namespace["r1"])
		self.assertEqual(5, namespace["r2"])
		self.assertEqual(10, namespace["r3"])
		self.assertEqual(20, namespace["r4"])
		self.assertEqual(20, namespace["r5"])

	def test_scopes(self):
		namespace = _good("scopes")
		self.assertEqual(["A", "A", "B", "C", "F"], [namespace["grade"](s) for s in (100, 95, 85, 70, 42)])
		self.assertEqual(6, namespace["shadowed"](lambda n: n * 2))
		self.assertEqual("odd", namespace["local_import"](3))
		self.assertEqual("even", namespace["local_import"](4))
		self.assertEqual(["many", "one", "two", "many"], namespace["labels"])
		self.assertEqual({"x": 1, "y": 0}, namespace["lookup"])

	def test_terminated_by_end(self):
		namespace = _good("terminated_by_end", terminator=END)
		self.assertIs(True, namespace["go"])

	def test_bindings_keep_their_scope(self):
		namespace = _good("bindings")
		self.assertEqual("small", namespace["Derived"].size)
		self.assertEqual("base", namespace["Derived"]().describe())
		self.assertEqual(("hit", "hit"), (namespace["outcome"], namespace["after"]))
		self.assertEqual(("once", [1]), namespace["count_calls"]())
		self.assertEqual([0, 2, 4], namespace["evens"])
		self.assertEqual(["one", "two", "many"], namespace["Table"].sizes)

class Scenarios(unittest.TestCase):

	def test_first_matching_case(self):
		self.assertEqual("c", _result('Switch(10).case(1, "a").case(2, "b").case(10, "c")()'))

	def test_default_when_nothing_matches(self):
		self.assertEqual("d", _result('Switch(10).case(1, "a").default("d")()'))

	def test_sentinel_without_cases_or_default(self):
		self.assertIsNone(_result('Switch(10)()'))

	def test_nested_chain_as_match(self):
		self.assertIsNone(_result('Switch(10).case(Switch(20).case(1, 2).case(2, 3)(), "x")()'))
		self.assertEqual("x", _result('Switch(3).case(Switch(2).case(1, 2).case(2, 3)(), "x")()'))

	def test_nested_chain_as_outcome_and_target(self):
		self.assertEqual("inner", _result('Switch(1).case(1, Switch(2).case(2, "inner")()).default("outer")()'))
		self.assertEqual("two", _result('Switch(Switch(1).case(1, 2)()).case(2, "two")()'))
		self.assertEqual("deep", _result('Switch(Switch(Switch(0).default(1)()).case(1, 2)()).case(2, "deep")()'))

	def test_first_match_wins(self):
		self.assertEqual("first", _result('Switch(1).case(1, "first").case(1, "second")()'))

	def test_default_after_cases(self):
		self.assertEqual("b", _result('Switch(2).case(1, "a").case(2, "b").default("z")()'))

	def test_matching_is_python_equality(self):
		self.assertEqual("str", _result('Switch("1").case(1, "int").default("str")()'))
		self.assertEqual("bool", _result('Switch(1).case(True, "bool").default("int")()'))
		self.assertEqual("float", _result('Switch(1).case(1.0, "float").default("int")()'))
		self.assertEqual("list", _result('Switch([1, 2]).case([1, 2], "list").default("no")()'))

	def test_outcomes_are_lazy(self):
		namespace = _run(_expand("""
			def boom():
				raise AssertionError("should not be evaluated")
			result = Switch(2).case(1, boom()).case(2, "fine").default(boom())()
		"""))
		self.assertEqual("fine", namespace["result"])

class Hygiene(unittest.TestCase):

	def test_side_effecting_target_evaluated_once(self):
		code = _expand("""
			calls = []
			def increment():
				calls.append(1)
				return len(calls)
			result = Switch(increment()).case(1, "a").case(2, "b")()
		""")
		module = ast.parse(code)
		invocations = [
			n for n in ast.walk(module)
			if isinstance(n, ast.Call) and isinstance(n.func, ast.Name) and n.func.id == "increment"
		]
		self.assertEqual(1, len(invocations))
		namespace = _run(code)
		self.assertEqual("a", namespace["result"])
		self.assertEqual([1], namespace["calls"])

	def test_side_effect_happens_even_without_cases(self):
		namespace = _run(_expand("""
			calls = []
			result = Switch(calls.append(1)).default("d")()
		"""))
		self.assertEqual("d", namespace["result"])
		self.assertEqual([1], namespace["calls"])

	def test_binding_avoids_existing_names(self):
		code = _expand("""
			_switch_target = "taken"
			_switch_target1 = "also taken"
			first = Switch(1 + 1).case(2, "two")()
			second = Switch(2 + 1).case(3, "three")()
		""")
		names = _bound_names(code)
		self.assertEqual(2, len(names))
		self.assertEqual(2, len(set(names)))
		self.assertTrue(set(names).isdisjoint({"_switch_target", "_switch_target1"}))
		namespace = _run(code)
		self.assertEqual(("two", "three"), (namespace["first"], namespace["second"]))
		self.assertEqual("taken", namespace["_switch_target"])

	def test_binding_stays_in_place(self):
		code = _expand('result = Switch(len("ab")).case(1, "one").case(2, "two")()')
		self.assertEqual("result = 'one' if (_switch_target := len('ab')) == 1 else 'two' if _switch_target == 2 else None", code)

	def test_lambda_only_where_assignment_is_illegal(self):
		code = _expand('result = [n for n in Switch(len("ab")).case(2, [1, 2]).default([])()]')
		self.assertEqual([], _bound_names(code))
		self.assertEqual(1, sum(isinstance(n, ast.Lambda) for n in ast.walk(ast.parse(code))))
		self.assertEqual([1, 2], _run(code)["result"])

	def test_lambda_would_break_super(self):
		with self.assertRaises(diagnostics.SwitchExprError) as cm:
			_expand("""
				class Derived(Base):
					def items(self):
						return [x for x in Switch(len(self.name)).case(1, super().items()).default([])()]
			""")
		self.assertIs(diagnostics.Code.UnbindableTarget, cm.exception.kind)
		self.assertIn("super()", cm.exception.message)

	def test_names_and_constants_are_not_bound(self):
		code = _expand("""
			x = 3
			a = Switch(x).case(3, "x")()
			b = Switch(3).case(3, "3")()
		""")
		self.assertEqual([], _bound_names(code))
		self.assertFalse(any(isinstance(n, ast.Lambda) for n in ast.walk(ast.parse(code))))

	def test_custom_binding_prefix(self):
		code = _expand('result = Switch(len("ab")).case(2, "two")()', binding_prefix="_pick")
		self.assertEqual(["_pick"], _bound_names(code))

class PassProperties(unittest.TestCase):

	def test_macro_import_removed(self):
		code = _expand('result = Switch(1).case(1, "one")()')
		self.assertNotIn("switch_expr", code)
		self.assertNotIn("Switch", code)

	def test_pass_is_idempotent(self):
		once = _expand('result = Switch(len("ab")).case(1, "one").case(2, "two")()')
		twice = expand_text(once, None, diagnostics.Report())
		self.assertEqual(once, twice)

	def test_every_reference_expanded_once(self):
		code = _expand("""
			a = Switch(1).case(Switch(1).default(1)(), "yes")()
			b = Switch(2).case(2, Switch(3).case(3, "inner")())()
		""")
		namespace = _run(code)
		self.assertEqual(("yes", "inner"), (namespace["a"], namespace["b"]))
		self.assertEqual(3, code.count(" == "))

	def test_unexpanded_placeholder_complains(self):
		with self.assertRaises(MacroNotExpanded):
			Switch(1)

if __name__ == '__main__':
	unittest.main()
