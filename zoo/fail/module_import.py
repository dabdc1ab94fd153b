import switch_expr.macro

x = switch_expr.macro.Switch(1).case(1, 2)()
