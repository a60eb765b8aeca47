#!/usr/bin/env python3

import subprocess
import os
import sys
import time
import platform
from pathlib import Path

from bench_stats import format_stats, parse_memory_usage, remove_outliers, summarize
from console import (
    BLUE, C_BL, C_BR, C_TL, C_TR, GREEN, L_LEFT, L_RIGHT, MAGENTA, NC, RED,
    L_HORZ, T_CROSS, T_DOWN, T_UP, V, YELLOW, box_rule, print_color,
)
from run_tests import child_env

# --- Configuration ---
PROJECT_ROOT = Path(__file__).resolve().parent
BENCHMARK_DIR = PROJECT_ROOT / "benchmarks"
TIME_BINARY = "/usr/bin/time"
BATCH_RUNS = 100  # Number of times to run each benchmark
TIME_THRESHOLD = 1.0  # Seconds - slower benchmarks only run once
BASELINE = "Iterative Loop"

# Every target runs as `python <source>` from the project root.
# The baseline comes first; the others are compared against it.
TARGETS = [
    {'label': 'Iterative Loop', 'source': 'fibonacci_loop/fibonacci_loop.py'},
    {'label': 'Recursive Loop', 'source': 'fibonacci_recursive_loop/fibonacci_recursive_loop.py'},
    {'label': 'Iterative', 'source': 'fibonacci/fibonacci.py'},
    {'label': 'Recursive', 'source': 'fibonacci_recursive/fibonacci_recursive.py'},
    {'label': 'Sequence', 'source': 'fibonacci_sequence/fibonacci_sequence.py'},
]

# Table column widths
COL_LABEL = 24
COL_TIME = 9
COL_TIME_STATS = 28
COL_RATIO = 9
COL_RATIO_STATS = 26
COL_MEMORY = 10
COL_MEM_RATIO = 10


def run_command(command, cwd=None):
    """Runs a command using subprocess. A missing executable comes back as exit code 127."""
    command_str_list = [str(item) for item in command]
    cmd_str = ' '.join(command_str_list)
    cwd_str = f" in {cwd}" if cwd else ""
    print_color(YELLOW, f"Running command: {cmd_str}{cwd_str}")
    try:
        result = subprocess.run(command_str_list, capture_output=True, text=True,
                                cwd=cwd, env=child_env())
    except FileNotFoundError:
        print_color(RED, f"Error: Command not found: {command_str_list[0]}")
        return subprocess.CompletedProcess(command_str_list, 127, "", f"Command not found: {command_str_list[0]}")
    # /usr/bin/time writes its report to stderr, only show it on failure
    if result.stderr and result.returncode != 0:
        print_color(RED, f"Stderr: {result.stderr.strip()}")
    return result


def time_command_prefix():
    """`/usr/bin/time` prefix for memory tracking, empty when it is unavailable."""
    if not os.path.exists(TIME_BINARY):
        return []
    return [TIME_BINARY, '-l' if platform.system() == 'Darwin' else '-v']


def failed_result(error, exit_code=-1):
    return {'time': None, 'exit_code': exit_code, 'error': error, 'memory': None,
            'single_run': True, 'times': [], 'outliers': 0}


def timed_run(full_command, cwd):
    start_time = time.perf_counter()
    result = run_command(full_command, cwd=cwd)
    return result, time.perf_counter() - start_time


def run_single_benchmark(label, command_list, cwd=None, batch_runs=BATCH_RUNS):
    """Runs and times a benchmark command list with memory usage tracking.
    Performs multiple runs for more accurate measurements unless the benchmark is too slow."""
    print_color(GREEN, f"\n--- Running {label} ---")

    is_mac = platform.system() == 'Darwin'
    full_command = time_command_prefix() + command_list

    # First run to check if it's too slow
    print_color(YELLOW, f"Initial run (1/{batch_runs}) for {label}...")
    result, first_run_time = timed_run(full_command, cwd)

    if result.returncode != 0:
        print_color(RED, f"{label} Benchmark failed with Exit Code: {result.returncode}")
        return failed_result(f"Non-zero exit code ({result.returncode})", result.returncode)

    max_memory = parse_memory_usage(result.stderr, is_mac)
    times = [first_run_time]
    memories = [max_memory] if max_memory is not None else []

    single_run_only = first_run_time > TIME_THRESHOLD or batch_runs <= 1
    if first_run_time > TIME_THRESHOLD:
        print_color(MAGENTA, f"{label} took {first_run_time:.4f}s > {TIME_THRESHOLD}s threshold, skipping additional runs.")

    if not single_run_only:
        for run in range(2, batch_runs + 1):
            print_color(YELLOW, f"Run {run}/{batch_runs} for {label}...")
            result, run_time = timed_run(full_command, cwd)

            # Keep the data from the successful runs so far
            if result.returncode != 0:
                print_color(RED, f"{label} Benchmark failed on run {run} with Exit Code: {result.returncode}")
                break

            times.append(run_time)
            mem = parse_memory_usage(result.stderr, is_mac)
            if mem is not None:
                memories.append(mem)

    clean_times, outliers = remove_outliers(times)
    if outliers:
        print_color(YELLOW, f"Detected {len(outliers)} outliers in {label} runs: {[f'{o:.4f}' for o in outliers]}")
        times = clean_times

    stats = summarize(times)
    if stats['p95'] is not None:
        print_color(YELLOW, f"{label} Times (seconds): Min: {stats['min']:.4f}, Max: {stats['max']:.4f}, Avg: {stats['avg']:.4f}, Med: {stats['med']:.4f}, P90: {stats['p90']:.4f}, P95: {stats['p95']:.4f}")
    else:
        print_color(YELLOW, f"{label} Times (seconds): Min: {stats['min']:.4f}, Max: {stats['max']:.4f}, Avg: {stats['avg']:.4f}, Median: {stats['med']:.4f}")

    avg_memory = sum(memories) / len(memories) if memories else None
    if avg_memory is not None:
        print_color(YELLOW, f"{label} Avg Peak Memory Usage: {avg_memory:.2f} MB")
    else:
        print_color(YELLOW, f"{label} Peak Memory Usage: Unknown")

    return {'time': stats['avg'], 'exit_code': 0, 'error': None, 'memory': avg_memory,
            'single_run': single_run_only, 'times': times, 'outliers': len(outliers)}


def run_target(target, batch_runs=BATCH_RUNS):
    """Runs one benchmark script, returns its result entry."""
    label = target['label']
    source_file = BENCHMARK_DIR / target['source']

    print_color(YELLOW, f"\nProcessing {label} ({target['source']})...")
    if not source_file.exists():
        print_color(RED, f"Source file not found: {source_file}")
        return failed_result('Source not found')

    return run_single_benchmark(label, [sys.executable, source_file], cwd=PROJECT_ROOT,
                                batch_runs=batch_runs)


def compute_ratios(baseline, results):
    """Time and memory ratios of every successful result against the baseline.

    Returns (time_ratios, ratio_stats, memory_ratios). A ratio above 1 means
    the benchmark is slower (or uses more memory) than the baseline.
    """
    time_ratios = {}
    ratio_stats = {}
    memory_ratios = {}

    base_time = baseline.get('time')
    base_memory = baseline.get('memory')

    for label, result in results.items():
        if base_time:
            individual_ratios = [t / base_time for t in result.get('times', []) if t > 0]
            if individual_ratios:
                ratio_stats[label] = summarize(individual_ratios)
                time_ratios[label] = ratio_stats[label]['avg']
            else:
                time_ratios[label] = None
                ratio_stats[label] = None

        lang_memory = result.get('memory')
        if base_memory and lang_memory:
            memory_ratios[label] = lang_memory / base_memory
        else:
            memory_ratios[label] = None

    return time_ratios, ratio_stats, memory_ratios


def ratio_color(ratio):
    if ratio is None:
        return NC
    if ratio > 5.0:
        return RED       # Much slower than the baseline
    if ratio > 1.05:
        return YELLOW    # Somewhat slower
    return GREEN         # Similar or faster


def memory_ratio_color(ratio):
    if ratio is None:
        return NC
    if ratio > 2.0:
        return RED
    if ratio > 1.05:
        return YELLOW
    return GREEN


def format_time_value(result):
    time_value = f"{result['time']:.4f}"
    if result.get('single_run', True):
        time_value += "*"
    elif result.get('outliers', 0) > 0:
        time_value += "†"  # Mark if outliers were removed
    return time_value


def format_time_stats(result):
    times = result.get('times', [])
    if len(times) > 1 and not result.get('single_run', True):
        return format_stats(summarize(times))
    return "N/A (single run)"


def format_row(label, time_value, time_stats, ratio_value, ratio_stats_str, memory_str,
               memory_ratio_str, color=NC, mem_color=NC):
    return (f"{V} {label:<{COL_LABEL-2}} {V} {time_value:^{COL_TIME}} {V} {time_stats:^{COL_TIME_STATS}} "
            f"{V} {color}{ratio_value:^{COL_RATIO}}{NC} {V} {color}{ratio_stats_str:^{COL_RATIO_STATS}}{NC} "
            f"{V} {memory_str:>{COL_MEMORY-2}} {V} {mem_color}{memory_ratio_str:>{COL_MEM_RATIO-2}}{NC} {V}")


def print_summary(results, batch_runs=BATCH_RUNS):
    """Prints the comparison table, baseline first, slowest benchmark next."""
    print_color(BLUE, "===== Benchmark Summary =====")

    widths = [COL_LABEL, COL_TIME + 2, COL_TIME_STATS + 2, COL_RATIO + 2, COL_RATIO_STATS + 2,
              COL_MEMORY, COL_MEM_RATIO]
    total_width = sum(widths) + len(widths) - 1

    print(f"{C_TL}{L_HORZ * total_width}{C_TR}")
    title = f"Fibonacci Benchmark Results (ratio vs {BASELINE}, lower is faster) [{batch_runs} runs]"
    print(f"{V}{title:^{total_width}}{V}")
    print(box_rule(L_LEFT, T_DOWN, L_RIGHT, widths))
    print(format_row('Benchmark', 'Time (s)', 'Time Stats', 'Ratio', 'Ratio Stats', 'Memory', 'MemRatio'))
    print(box_rule(L_LEFT, T_CROSS, L_RIGHT, widths))

    baseline = results.get(BASELINE, {})
    if BASELINE not in results:
        print(format_row(f"{BASELINE} (Base)", 'NOT RUN', 'N/A', 'N/A', 'N/A', 'N/A', 'N/A'))
        print_color(YELLOW, "    Baseline not run, ratios are not available.")
    elif baseline.get('time') is not None:
        memory_str = f"{baseline['memory']:.2f}" if baseline.get('memory') is not None else "N/A"
        print(format_row(f"{BASELINE} (Base)", format_time_value(baseline),
                         format_time_stats(baseline), '1.00x', 'N/A', memory_str, '1.00x'))
    else:
        print(format_row(f"{BASELINE} (Base)", 'FAILED', 'N/A', 'N/A', 'N/A', 'N/A', 'N/A'))
        print_color(RED, f"    Error: {baseline.get('error', 'Unknown')}")
        print_color(RED, "    Cannot calculate ratios without a successful baseline.")

    print(box_rule(L_LEFT, T_CROSS, L_RIGHT, widths))

    successful_results = {}
    failed_results = {}
    for label, result in results.items():
        if label == BASELINE:
            continue
        if result.get('time') is not None and result.get('exit_code', -1) == 0:
            successful_results[label] = result
        else:
            failed_results[label] = result

    time_ratios, ratio_stats, memory_ratios = compute_ratios(baseline, successful_results)

    # Slowest first
    sorted_success = sorted(successful_results, key=lambda l: time_ratios.get(l) or 0.0, reverse=True)
    for label in sorted_success:
        result = successful_results[label]
        time_ratio = time_ratios.get(label)
        ratio_stat = ratio_stats.get(label)
        memory_ratio = memory_ratios.get(label)

        ratio_value = f"{time_ratio:.2f}x" if time_ratio is not None else "N/A"
        ratio_stats_str = "N/A"
        if ratio_stat is not None and len(result['times']) > 1 and not result['single_run']:
            ratio_stats_str = format_stats(ratio_stat, digits=2) + "x"

        memory_str = f"{result['memory']:.2f}" if result.get('memory') is not None else "N/A"
        memory_ratio_str = f"{memory_ratio:.2f}x" if memory_ratio is not None else "N/A"

        print(format_row(label, format_time_value(result), format_time_stats(result), ratio_value,
                         ratio_stats_str, memory_str, memory_ratio_str,
                         ratio_color(time_ratio), memory_ratio_color(memory_ratio)))

    # Footer
    print(box_rule(C_BL, T_UP, C_BR, widths))
    print(f"Stats format: min/median/avg/p95  (* benchmark only ran once, e.g. exceeding the {TIME_THRESHOLD}s threshold)")
    print(f"† Statistical outliers were detected and removed using IQR method")

    outlier_labels = [(label, result.get('outliers', 0)) for label, result in results.items() if result.get('outliers', 0) > 0]
    if outlier_labels:
        outlier_summary = ", ".join([f"{label}: {count}" for label, count in outlier_labels])
        print(f"Outliers removed: {outlier_summary}")

    if failed_results:
        print_color(RED, "--- Failed Benchmarks ---")
        for label, result in failed_results.items():
            exit_code = result.get('exit_code', 'N/A')
            error = result.get('error') or f"Non-zero exit code ({exit_code})"
            print(f"  {RED}* {label:<{COL_LABEL}}: FAILED (Exit: {exit_code}, Error: {error}){NC}")

    print_color(BLUE, "===== Benchmark Complete =====")


def main(argv=None):
    """Main function to run the benchmark steps."""
    argv = sys.argv[1:] if argv is None else argv
    print("===== Fibonacci Benchmark Batch =====")

    # Optional single benchmark to run
    test_single = argv[0] if argv else None
    if test_single:
        print(f"Testing only: {test_single}")

    if not BENCHMARK_DIR.is_dir():
        print(f"Benchmark directory not found: {BENCHMARK_DIR}")
        return 1

    if not time_command_prefix():
        print_color(YELLOW, f"{TIME_BINARY} not found, memory usage will not be tracked.")

    results = {}
    for target in TARGETS:
        label = target['label']
        if test_single and label.lower() != test_single.lower():
            print_color(YELLOW, f"Skipping {label} (not testing)")
            continue
        results[label] = run_target(target)

    if not results:
        print_color(RED, f"Unknown benchmark: {test_single}")
        print(f"Available: {', '.join(t['label'] for t in TARGETS)}")
        return 1

    print_summary(results)
    return 0 if all(r['exit_code'] == 0 for r in results.values()) else 1


if __name__ == "__main__":
    sys.exit(main())
