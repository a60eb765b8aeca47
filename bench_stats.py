# bench_stats.py
# Timing and memory statistics for benchmark runs

import statistics
import time

import numpy as np

OUTLIER_MIN_SAMPLES = 10  # IQR filtering needs a reasonable sample
PERCENTILE_MIN_SAMPLES = 6


def time_call(func, *args, repeat=1):
    """Returns elapsed wall-clock seconds for calling func(*args) `repeat` times."""
    start_time = time.perf_counter()
    for _ in range(repeat):
        func(*args)
    return time.perf_counter() - start_time


def summarize(times):
    """Min/max/avg/median of a list of run times, plus p90/p95 with enough samples."""
    if not times:
        raise ValueError("cannot summarize an empty list of times")

    stats = {
        'min': min(times),
        'max': max(times),
        'avg': sum(times) / len(times),
        'med': statistics.median(times),
        'p90': None,
        'p95': None,
    }
    if len(times) >= PERCENTILE_MIN_SAMPLES:
        stats['p90'] = float(np.percentile(times, 90))
        stats['p95'] = float(np.percentile(times, 95))
    return stats


def remove_outliers(times):
    """Splits times into (clean_times, outliers) using the 1.5 * IQR rule.

    Lists shorter than OUTLIER_MIN_SAMPLES are returned unchanged.
    """
    if len(times) < OUTLIER_MIN_SAMPLES:
        return list(times), []

    q1 = np.percentile(times, 25)
    q3 = np.percentile(times, 75)
    iqr = q3 - q1
    lower_bound = q1 - 1.5 * iqr
    upper_bound = q3 + 1.5 * iqr
    outliers = [t for t in times if t < lower_bound or t > upper_bound]
    clean_times = [t for t in times if lower_bound <= t <= upper_bound]
    return clean_times, outliers


def format_stats(stats, digits=4):
    """min/median/avg/p95 string used in the summary table."""
    p95 = stats['p95'] if stats['p95'] is not None else stats['max']
    return '/'.join(f"{value:.{digits}f}" for value in (stats['min'], stats['med'], stats['avg'], p95))


def parse_memory_usage(stderr, is_mac):
    """Parse memory usage from stderr output of time command."""
    if not stderr:
        return None

    max_memory = None
    for line in stderr.splitlines():
        if 'maximum resident set size' not in line.lower():
            continue
        try:
            if is_mac:
                # macOS reports in bytes
                max_memory = int(line.split()[0]) / 1024 / 1024
            else:
                # Linux typically reports in KB
                max_memory = float(line.split(':')[1].strip()) / 1024
            break
        except (ValueError, IndexError):
            pass

    return max_memory
