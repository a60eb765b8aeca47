# fibonacci_loop.py
# Times repeated iterative Fibonacci calls and prints the elapsed seconds

from bench_stats import time_call
from fibonacci_core import fibonacci_iterative

# Configuration
N = 1000
ITERATIONS = 10000

def main():
    elapsed = time_call(fibonacci_iterative, N, repeat=ITERATIONS)
    print(elapsed)

if __name__ == "__main__":
    main()
