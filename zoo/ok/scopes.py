from switch_expr.macro import Switch as Pick

def grade(score):
    return Pick(score // 10).case(10, "A").case(9, "A").case(8, "B").case(7, "C").default("F")()

def shadowed(Pick):
    return Pick(3)

def local_import(n):
    from switch_expr.macro import Switch
    return Switch(n % 2).case(0, "even").default("odd")()

labels = [Pick(n).case(1, "one").case(2, "two").default("many")() for n in range(4)]
lookup = {k: Pick(k).case("x", 1).default(0)() for k in "xy"}
