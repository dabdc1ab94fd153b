from switch_expr.macro import Switch

class Palette:
    PRIMARY = ["red", "green", "blue"]
    names = [name for name in Switch(len("rgb")).case(3, PRIMARY).default([])()]
