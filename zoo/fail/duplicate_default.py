from switch_expr.macro import Switch

x = Switch(1).default("y").default("z")()
