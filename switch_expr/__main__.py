"""
Lets `python -m switch_expr program.py` work the same as `switch-expr program.py`.
"""
from switch_expr.cmdline import main

main()
