from switch_expr.macro import Switch

x = Switch(target=1).case(1, "a")()
