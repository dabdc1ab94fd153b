from switch_expr.macro import Switch

x = Switch(1).case(1, "a").default("z").case(2, "b")()
