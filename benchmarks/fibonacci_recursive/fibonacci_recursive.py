# fibonacci_recursive.py
# Naive recursive Fibonacci benchmark, same markers as the iterative one

from fibonacci_core import fibonacci_recursive

# Configuration - smaller indices, the recursion is exponential
N1 = 10
N2 = 15
N3 = 20
N4 = 25

HEADER_MARKER = 123456789
FOOTER_MARKER = 987654321

def main():
    print(HEADER_MARKER)

    print(fibonacci_recursive(N1))
    print(fibonacci_recursive(N2))
    print(fibonacci_recursive(N3))
    print(fibonacci_recursive(N4))

    print(FOOTER_MARKER)

if __name__ == "__main__":
    main()
