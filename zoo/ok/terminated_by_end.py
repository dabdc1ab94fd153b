from switch_expr.macro import Switch

colour = "green"
go = Switch(colour).case("red", False).case("green", True).default(None).end()
