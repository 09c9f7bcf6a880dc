"""Tests for the run timer and timing report."""

import time
from pathlib import Path

import pytest

from textoutline.coordinator import RunSummary, Task, TaskResult
from textoutline.detector import DetectorKind
from textoutline.metrics import Stopwatch, timing_report
from textoutline.walker import ImageFile


def _result(kind, elapsed, ok=True):
    image_file = ImageFile(path=Path("/in/a.png"), relative_path=Path("a.png"))
    task = Task(image_file=image_file, kind=kind, output_root=Path("/out"))
    return TaskResult(task=task, error=None if ok else RuntimeError("boom"), elapsed=elapsed)


def test_stopwatch_measures_elapsed(caplog):
    with Stopwatch("traversal") as stopwatch:
        time.sleep(0.01)
    assert stopwatch.elapsed >= 0.01
    assert any("traversal" in r.getMessage() for r in caplog.records)


def test_stopwatch_elapsed_is_frozen_after_stop():
    stopwatch = Stopwatch(report=False).start()
    first = stopwatch.stop()
    time.sleep(0.01)
    assert stopwatch.elapsed == first


def test_stopwatch_requires_start():
    assert Stopwatch().elapsed == 0.0
    with pytest.raises(RuntimeError):
        Stopwatch().stop()


def test_timing_report_per_detector():
    summary = RunSummary(
        detector_kinds=[DetectorKind.EAST, DetectorKind.DB],
        files_seen=3,
        files_skipped=1,
        results=[
            _result(DetectorKind.EAST, 1.0),
            _result(DetectorKind.EAST, 3.0, ok=False),
            _result(DetectorKind.DB, 2.0),
        ],
        elapsed=6.5,
    )
    report = timing_report(summary)

    east_row = next(line for line in report.splitlines() if line.startswith("EAST"))
    assert east_row.split() == ["EAST", "2", "1", "2.00", "2.00", "3.00"]
    db_row = next(line for line in report.splitlines() if line.startswith("DB"))
    assert db_row.split()[1:3] == ["1", "0"]
    assert "Files skipped (unreadable): 1" in report
    assert "Total processing time: 6.5 seconds" in report


def test_timing_report_without_tasks():
    report = timing_report(RunSummary(detector_kinds=[DetectorKind.DB]))
    db_row = next(line for line in report.splitlines() if line.startswith("DB"))
    assert db_row.split() == ["DB", "0", "0", "-", "-", "-"]
