"""
Knobs for one expansion pass. The command line fills these in from its flags.
"""
from typing import NamedTuple

# Exactly one way to end a chain is in force during any given pass:
CALL = "call"  # Switch(x).case(1, 2)()
END = "end"    # Switch(x).case(1, 2).end()
TERMINATORS = (CALL, END)

class Options(NamedTuple):
	macro_module: str = "switch_expr.macro"
	entry_name: str = "Switch"
	terminator: str = CALL
	binding_prefix: str = "_switch_target"

DEFAULT = Options()
