#!/usr/bin/env python3
"""
Determinism check for the Fibonacci benchmarks
Runs every benchmark with an expected output several times and classifies
the results, so a hidden state leak between calls shows up as a mismatch.
"""

import argparse
import sys
from pathlib import Path
from collections import Counter

from run_tests import discover_benchmarks, load_expected_output, run_script

DEFAULT_RUNS = 10

STATUSES = ('CORRECT', 'CONSISTENTLY_WRONG', 'NON_DETERMINISTIC', 'EXECUTION_ERROR')

def check_benchmark(test_path, expected_output, num_runs=DEFAULT_RUNS):
    """Run a benchmark num_runs times and return (status, results)"""
    test_name = Path(test_path).name
    results = []

    print(f"\n🔄 Checking {test_name}")
    print(f"   Expected: {expected_output}")
    print("=" * 80)

    for i in range(num_runs):
        success, stdout, stderr = run_script(test_path)

        if not success:
            print(f"❌ Execution failed on run {i+1}: {stderr}")
            return 'EXECUTION_ERROR', results

        output_lines = [line.strip() for line in stdout.split('\n') if line.strip()]
        results.append(output_lines)
        print(f"  Run {i+1:2d}: {output_lines}")

    return classify(results, expected_output), results

def classify(results, expected_output):
    """CORRECT, CONSISTENTLY_WRONG or NON_DETERMINISTIC for a list of run outputs"""
    result_counts = Counter(tuple(result) for result in results)
    num_runs = len(results)

    print("\n📊 Analysis:")
    print("-" * 50)

    if len(result_counts) > 1:
        print(f"❌ NON-DETERMINISTIC: {len(result_counts)} different results detected!")
        for i, (result, count) in enumerate(result_counts.most_common(), 1):
            percentage = (count / num_runs) * 100
            print(f"   Result {i} (appeared {count}/{num_runs} times, {percentage:.1f}%): {list(result)}")
        return 'NON_DETERMINISTIC'

    actual_result = list(result_counts.most_common(1)[0][0])
    if actual_result == expected_output:
        print(f"✅ CORRECT: All {num_runs} runs produced the expected result")
        return 'CORRECT'

    print(f"❌ CONSISTENTLY WRONG: All {num_runs} runs produced wrong result")
    print(f"   Expected: {expected_output}")
    print(f"   Actual:   {actual_result}")
    return 'CONSISTENTLY_WRONG'

def main(argv=None):
    parser = argparse.ArgumentParser(description='Fibonacci benchmark determinism check')
    parser.add_argument('--runs', type=int, default=DEFAULT_RUNS, help='Runs per benchmark')
    args = parser.parse_args(argv)

    if args.runs < 1:
        parser.error("--runs must be at least 1")

    benchmarks = []
    for test_path in discover_benchmarks():
        expected_output = load_expected_output(test_path)
        if expected_output is not None:
            benchmarks.append((test_path, expected_output))

    print("🧪 FIBONACCI DETERMINISM CHECK")
    print("=" * 80)
    print(f"Running each deterministic benchmark {args.runs} times")
    print(f"Total benchmarks: {len(benchmarks)}")

    results_summary = {status: [] for status in STATUSES}

    for test_path, expected_output in benchmarks:
        status, _ = check_benchmark(test_path, expected_output, args.runs)
        results_summary[status].append(Path(test_path).name)

    # Summary
    print("\n" + "=" * 80)
    print("📋 SUMMARY")
    print("=" * 80)

    for status in STATUSES:
        names = results_summary[status]
        print(f"\n{status.replace('_', ' ')} ({len(names)}):")
        for name in names:
            print(f"   - {name}")

    correct = len(results_summary['CORRECT'])
    print(f"\n📊 Overall: {correct}/{len(benchmarks)} benchmarks are correct and consistent")

    if correct != len(benchmarks):
        return 1
    print(f"\n🎉 All benchmarks are deterministic!")
    return 0

if __name__ == "__main__":
    sys.exit(main())
