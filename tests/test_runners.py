"""Tests for the batch runner, the test runner CLI and the determinism check."""

import pytest

import check_determinism
import run_fibonacci_batch
from check_determinism import classify
from console import GREEN, NC, RED, YELLOW
from run_fibonacci_batch import (
    BASELINE,
    compute_ratios,
    failed_result,
    memory_ratio_color,
    print_summary,
    ratio_color,
    run_target,
)
import run_tests


def make_result(times, memory=None, single_run=False):
    return {'time': sum(times) / len(times), 'exit_code': 0, 'error': None, 'memory': memory,
            'single_run': single_run, 'times': times, 'outliers': 0}


def test_compute_ratios_against_baseline():
    baseline = make_result([1.0, 1.0], memory=10.0)
    results = {'Recursive': make_result([2.0, 4.0], memory=25.0)}

    time_ratios, ratio_stats, memory_ratios = compute_ratios(baseline, results)

    assert time_ratios['Recursive'] == pytest.approx(3.0)
    assert ratio_stats['Recursive']['min'] == pytest.approx(2.0)
    assert ratio_stats['Recursive']['max'] == pytest.approx(4.0)
    assert memory_ratios['Recursive'] == pytest.approx(2.5)


def test_compute_ratios_without_baseline():
    time_ratios, ratio_stats, memory_ratios = compute_ratios(failed_result('boom'), {'Sequence': make_result([1.0])})
    assert time_ratios == {}
    assert ratio_stats == {}
    assert memory_ratios == {'Sequence': None}


def test_ratio_colors():
    assert ratio_color(None) == NC
    assert ratio_color(10.0) == RED
    assert ratio_color(1.5) == YELLOW
    assert ratio_color(0.9) == GREEN
    assert memory_ratio_color(3.0) == RED
    assert memory_ratio_color(1.0) == GREEN


def test_failed_result_shape():
    result = failed_result('Source not found')
    assert result['time'] is None
    assert result['exit_code'] == -1
    assert result['error'] == 'Source not found'
    assert result['times'] == []


def test_run_target_missing_source():
    result = run_target({'label': 'Missing', 'source': 'missing/missing.py'})
    assert result['error'] == 'Source not found'


def test_run_target_runs_script():
    target = {'label': 'Sequence', 'source': 'fibonacci_sequence/fibonacci_sequence.py'}
    result = run_target(target, batch_runs=2)
    assert result['exit_code'] == 0
    assert result['time'] > 0.0
    assert 1 <= len(result['times']) <= 2


def test_print_summary(capsys):
    results = {
        BASELINE: make_result([1.0, 1.2], memory=10.0),
        'Recursive Loop': make_result([5.0, 6.0], memory=12.0),
        'Sequence': failed_result('Non-zero exit code (1)', 1),
    }
    print_summary(results, batch_runs=2)
    out = capsys.readouterr().out
    assert f"{BASELINE} (Base)" in out
    assert "Recursive Loop" in out
    assert "5.00x" in out
    assert "--- Failed Benchmarks ---" in out
    assert "Exit: 1" in out


def test_batch_main_unknown_benchmark(capsys):
    assert run_fibonacci_batch.main(["nope"]) == 1
    assert "Unknown benchmark: nope" in capsys.readouterr().out


def test_classify():
    expected = ['123456789', '55', '987654321']
    assert classify([expected, expected], expected) == 'CORRECT'
    assert classify([['1'], ['1']], expected) == 'CONSISTENTLY_WRONG'
    assert classify([expected, ['1']], expected) == 'NON_DETERMINISTIC'


def test_run_tests_single(capsys):
    assert run_tests.main(["fibonacci"]) == 0
    assert "PASSED" in capsys.readouterr().out


def test_run_tests_unknown(capsys):
    assert run_tests.main(["no_such_benchmark"]) == 1


def test_run_tests_list(capsys):
    assert run_tests.main(["--list"]) == 0
    out = capsys.readouterr().out
    assert "fibonacci_loop.py" in out
    assert "(timing only)" in out


def test_run_single_benchmark_missing_executable(monkeypatch):
    monkeypatch.setattr(run_fibonacci_batch, "time_command_prefix", lambda: [])
    result = run_fibonacci_batch.run_single_benchmark("Missing", ["/nonexistent/fib-python"], batch_runs=3)
    assert result['time'] is None
    assert result['exit_code'] == 127
    assert result['times'] == []


def test_batch_shares_child_env_with_test_runner():
    assert run_fibonacci_batch.child_env is run_tests.child_env
    assert run_tests.child_env()['PYTHONPATH'].startswith(str(run_tests.PROJECT_ROOT))


def test_print_summary_without_baseline(capsys):
    print_summary({'Sequence': make_result([0.1, 0.2])}, batch_runs=2)
    out = capsys.readouterr().out
    assert "NOT RUN" in out
    assert "Baseline not run" in out
    assert "Cannot calculate ratios" not in out


def test_check_determinism_main_passes():
    assert check_determinism.main(["--runs", "2"]) == 0


def test_check_determinism_rejects_zero_runs():
    with pytest.raises(SystemExit):
        check_determinism.main(["--runs", "0"])


def test_check_determinism_main_reports_wrong_output(tmp_path, monkeypatch):
    script = tmp_path / "wrong.py"
    script.write_text("print(1)\n")
    (tmp_path / "expected_output.txt").write_text("2\n")
    monkeypatch.setattr(check_determinism, "discover_benchmarks", lambda: [str(script)])
    assert check_determinism.main(["--runs", "2"]) == 1


def test_find_benchmark_ignores_directories(monkeypatch):
    monkeypatch.chdir(run_tests.PROJECT_ROOT / "benchmarks")
    expected = str(run_tests.PROJECT_ROOT / "benchmarks" / "fibonacci" / "fibonacci.py")
    assert run_tests.find_benchmark("fibonacci") == expected
