from switch_expr.macro import Switch, Case

x = Switch(1).case(1, 2)()
