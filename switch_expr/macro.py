"""
The importable face of the Switch macro:

	from switch_expr.macro import Switch

	label = Switch(code).case(200, "ok").case(404, "missing").default("other")()

Source written this way is meant to be expanded (see `switch-expr -h`)
before it runs. Expanded source no longer imports this module.
"""

class MacroNotExpanded(RuntimeError):
	pass

def Switch(target):
	raise MacroNotExpanded(
		"Switch(%r) is being called at run time. Expand this module with switch-expr first." % (target,)
	)
