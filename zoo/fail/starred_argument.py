from switch_expr.macro import Switch

pair = (1, "a")
x = Switch(1).case(*pair)()
