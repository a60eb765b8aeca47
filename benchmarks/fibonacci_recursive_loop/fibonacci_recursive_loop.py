# fibonacci_recursive_loop.py
# Times repeated recursive Fibonacci calls, counterpart of fibonacci_loop.py

from bench_stats import time_call
from fibonacci_core import fibonacci_recursive

# Configuration - recursion is exponential, keep both small
N = 20
ITERATIONS = 100

def main():
    elapsed = time_call(fibonacci_recursive, N, repeat=ITERATIONS)
    print(elapsed)

if __name__ == "__main__":
    main()
