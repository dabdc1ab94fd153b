from switch_expr.macro import Switch

x = Switch(1).case
