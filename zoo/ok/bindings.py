from switch_expr.macro import Switch

class Base:
    def describe(self):
        return "base"

class Derived(Base):
    LIMIT = 1
    size = Switch(len("a")).case(LIMIT, "small").default("large")()

    def describe(self):
        return Switch(len("ab")).case(2, super().describe()).default("none")()

outcome = Switch(len("a")).case(1, (seen := "hit")).default("miss")()
after = seen

def count_calls():
    calls = []
    result = Switch(calls.append(1) or len(calls)).case(1, "once").default("again")()
    return result, calls

evens = [n for n in Switch(len("ab")).case(2, range(0, 6, 2)).default(range(0))()]

class Table:
    words = ["a", "bb", "ccc"]
    sizes = [Switch(len(w)).case(1, "one").case(2, "two").default("many")() for w in words]
