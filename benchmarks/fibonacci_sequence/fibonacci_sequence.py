# fibonacci_sequence.py
# Dumps the Fibonacci sequence accumulated by the iterative loop

from fibonacci_core import fibonacci_sequence

# Configuration
N = 10

HEADER_MARKER = 123456789
FOOTER_MARKER = 987654321

def main():
    print(HEADER_MARKER)

    sequence = fibonacci_sequence(N)
    print(sequence)
    print(len(sequence))

    print(FOOTER_MARKER)

if __name__ == "__main__":
    main()
