from switch_expr.macro import Switch

alias = Switch
