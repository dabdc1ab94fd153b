from switch_expr.macro import Switch

def fn(i):
    return i

r1 = Switch(10).case(1, fn(2)).case(2, fn(3)).case(fn(3), fn(4) + 1)()

r2 = Switch(10) \
    .case(1, fn(2)) \
    .case(2, fn(3)) \
    .case(fn(3), Switch(20).case(1, 2).case(2, 3)()) \
    .default(5)()

r3 = Switch(10).default(10)()

r4 = Switch(2 + fn(10)).case(12, fn(20)).default(10)()

r5 = (
    Switch(10)
    .case(Switch(10).default(10)(), fn(20))
    .case(2, fn(3))
    .case(fn(3), Switch(20).case(1, 2).case(2, 3)())
    ()
)
