"""Reference Fibonacci values computed with native ints."""

KNOWN_VALUES = {
    0: "0",
    1: "1",
    2: "1",
    10: "55",
    20: "6765",
    50: "12586269025",
    92: "7540113804746346429",
    100: "354224848179261915075",
    150: "9969216677189303386214405760200",
}


def native_fib(k: int) -> int:
    a, b = 0, 1
    for _ in range(k):
        a, b = b, a + b
    return a
