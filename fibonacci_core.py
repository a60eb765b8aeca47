# fibonacci_core.py
# Shared Fibonacci implementations used by the benchmark scripts

class InvalidArgument(ValueError):
    """Raised when a Fibonacci index is negative or not an integer."""


def _check_index(n):
    # bool is an int subclass but never a meaningful index
    if isinstance(n, bool) or not isinstance(n, int):
        raise InvalidArgument(f"Fibonacci index must be an integer, got {type(n).__name__}")
    if n < 0:
        raise InvalidArgument(f"Fibonacci index must be non-negative, got {n}")


def fibonacci_iterative(n):
    """Compute nth Fibonacci number iteratively.

    The running pair starts at F(1), F(2) and the loop runs from 2 up to but
    not including n, so it executes n - 2 times. Python ints promote to
    arbitrary precision, large indices never overflow.
    """
    _check_index(n)
    if n == 0:
        return 0
    if n < 2:
        return 1

    prev = 1
    current = 1
    for i in range(2, n):
        temp = prev + current
        prev = current
        current = temp
    return current


def fibonacci_sequence(n):
    """Compute F(1)..F(n) with the same loop, collecting every value.

    fibonacci_sequence(10) == [1, 1, 2, 3, 5, 8, 13, 21, 34, 55]
    """
    _check_index(n)
    if n < 2:
        return [1] * n

    prev = 1
    current = 1
    sequence = [prev, current]
    for i in range(2, n):
        temp = prev + current
        prev = current
        current = temp
        sequence.append(current)
    return sequence


def fibonacci_recursive(n):
    """Compute nth Fibonacci number with naive double recursion."""
    _check_index(n)
    return _fib(n)


def _fib(n):
    if n < 2:
        return n
    return _fib(n - 1) + _fib(n - 2)
