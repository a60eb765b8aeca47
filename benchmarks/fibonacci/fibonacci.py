# fibonacci.py
# Iterative Fibonacci benchmark

from fibonacci_core import fibonacci_iterative

# Configuration
N1 = 10
N2 = 20
N3 = 30
N4 = 35

# Markers shared by every benchmark's output
HEADER_MARKER = 123456789
FOOTER_MARKER = 987654321

def main():
    # Print header marker
    print(HEADER_MARKER)

    # Compute and print fibonacci numbers
    print(fibonacci_iterative(N1))
    print(fibonacci_iterative(N2))
    print(fibonacci_iterative(N3))
    print(fibonacci_iterative(N4))

    # Print footer marker
    print(FOOTER_MARKER)

if __name__ == "__main__":
    main()
