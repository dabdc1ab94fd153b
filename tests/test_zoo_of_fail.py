import ast
from pathlib import Path
import unittest
from unittest import mock

from switch_expr.diagnostics import Report, Code, SwitchExprError
from switch_expr.front_end import expand_file, expand_text, expand_tree
from switch_expr.options import Options, END

class Silence(Report):
	def __init__(self):
		super().__init__(verbose=False)
		self.complain_to_console = mock.Mock()
	pass

base_folder = Path(__file__).parent.parent
zoo_fail = base_folder/"zoo/fail"

def _identify_problem(filename:str, options=Options()):
	specimen_path = zoo_fail / filename
	assert specimen_path.exists(), specimen_path
	report = Silence()
	try:
		expand_file(specimen_path, report, options)
	except SwitchExprError as ex:
		assert 0 == report.complain_to_console.call_count
		assert report.sick()
		return ex.kind
	else:
		return "failed to fail"

class ZooOfFail(unittest.TestCase):
	""" Tests that assert about failure modes. """

	def expect(self, kind, cases):
		for basename in cases:
			with self.subTest(basename):
				self.assertEqual(kind, _identify_problem(basename + ".py"))

	def test_00_import(self):
		self.expect(Code.InvalidImport, [
			"invalid_import",
			"module_import",
			"class_import",
		])

	def test_01_entry(self):
		self.expect(Code.NotInvoked, ["not_invoked"])

	def test_02_arity(self):
		self.expect(Code.ArityError, [
			"arity_error",
			"case_arity",
			"terminator_arity",
		])

	def test_03_qualifiers(self):
		self.expect(Code.CaseAfterDefault, ["case_after_default"])
		self.expect(Code.DuplicateDefault, ["duplicate_default"])
		self.expect(Code.UnexpectedChainMember, ["unexpected_member"])
		self.expect(Code.NonCallQualifier, ["non_call_qualifier"])

	def test_04_termination(self):
		self.expect(Code.UnterminatedChain, ["unterminated"])

	def test_05_argument_shape(self):
		self.expect(Code.NonExpressionArgument, [
			"starred_argument",
			"keyword_argument",
		])

	def test_06_binding(self):
		self.expect(Code.UnbindableTarget, ["unbindable_target"])

class Conventions(unittest.TestCase):
	""" Exactly one way to end a chain is in force at a time. """

	def test_end_is_just_another_member_by_default(self):
		text = "from switch_expr.macro import Switch\nx = Switch(1).case(1, 2).end()\n"
		with self.assertRaises(SwitchExprError) as cm:
			expand_text(text, None, Silence())
		self.assertIs(Code.UnexpectedChainMember, cm.exception.kind)

	def test_bare_call_does_not_end_chain_under_end_convention(self):
		text = "from switch_expr.macro import Switch\nx = Switch(1).case(1, 2)()\n"
		with self.assertRaises(SwitchExprError) as cm:
			expand_text(text, None, Silence(), Options(terminator=END))
		self.assertIs(Code.UnterminatedChain, cm.exception.kind)

	def test_end_must_be_called_without_arguments(self):
		for text, kind in [
			("x = Switch(1).case(1, 2).end\n", Code.NonCallQualifier),
			("x = Switch(1).case(1, 2).end(3)\n", Code.ArityError),
		]:
			with self.subTest(text):
				with self.assertRaises(SwitchExprError) as cm:
					expand_text("from switch_expr.macro import Switch\n"+text, None, Silence(), Options(terminator=END))
				self.assertIs(kind, cm.exception.kind)

class Diagnostics(unittest.TestCase):

	def test_error_carries_stable_code(self):
		try:
			expand_file(zoo_fail/"case_after_default.py", Silence())
		except SwitchExprError as ex:
			self.assertEqual("ERR:SwitchExpr:3", ex.code)
			self.assertTrue(str(ex).startswith("ERR:SwitchExpr:3: "))
			self.assertIn("after the default", ex.message)
		else:
			self.fail("Expected CaseAfterDefault")

	def test_frame_shows_offending_source(self):
		specimen_path = zoo_fail/"case_after_default.py"
		with self.assertRaises(SwitchExprError) as cm:
			expand_file(specimen_path, Silence())
		frame = cm.exception.frame
		self.assertIn(str(specimen_path), frame)
		self.assertIn('.default("z")', frame)

	def test_no_frame_without_source(self):
		module = ast.parse("from switch_expr.macro import Switch\nx = Switch(1).case(1, 2)\n")
		with self.assertRaises(SwitchExprError) as cm:
			expand_tree(module, Report())
		self.assertEqual("", cm.exception.frame)
		self.assertIs(Code.UnterminatedChain, cm.exception.kind)

	def test_failure_is_kept_for_the_console(self):
		report = Report()
		with self.assertRaises(SwitchExprError):
			expand_file(zoo_fail/"unterminated.py", report)
		self.assertTrue(report.sick())
		with mock.patch("sys.stderr") as stderr:
			report.complain_to_console()
		printed = "".join(str(call.args[0]) for call in stderr.write.call_args_list if call.args)
		self.assertIn("ERR:SwitchExpr:6", printed)

if __name__ == '__main__':
	unittest.main()
