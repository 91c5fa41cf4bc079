import subprocess
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest

from scan_service.scanner.exceptions import ScanExecutionError, ScanTimeoutError
from scan_service.scanner.movescanner_adapter import MoveScannerAdapter

RUN = "scan_service.scanner.movescanner_adapter.subprocess.run"


def _make_adapter(results_root: Path, timeout: int = 30) -> MoveScannerAdapter:
    return MoveScannerAdapter(
        binary="./MoveScanner",
        results_root=results_root,
        timeout_seconds=timeout,
    )


def _completed(command: list[str], returncode: int = 0, output: bytes = b"") -> Any:
    return subprocess.CompletedProcess(command, returncode, stdout=output)


def _writes_report(report: bytes = b'{"ok": true}', returncode: int = 0) -> Any:
    def fake_run(command: list[str], **_kwargs: Any) -> Any:
        Path(command[command.index("-o") + 1]).write_bytes(report)
        return _completed(command, returncode, b"scanner log line")

    return fake_run


class TestScanInvocation:
    def test_passes_fixed_arguments(self, tmp_path: Path) -> None:
        adapter = _make_adapter(tmp_path / "results")
        modules = tmp_path / "project" / "bytecode_modules"

        with patch(RUN, side_effect=_writes_report()) as mock_run:
            result_id = adapter.scan(modules)

        command = mock_run.call_args.args[0]
        assert command == [
            "./MoveScanner",
            "-p",
            str(modules),
            "-n",
            "-o",
            str(tmp_path / "results" / f"{result_id}.json"),
        ]

    def test_bounds_call_with_timeout_and_captures_output(self, tmp_path: Path) -> None:
        adapter = _make_adapter(tmp_path / "results", timeout=42)

        with patch(RUN, side_effect=_writes_report()) as mock_run:
            adapter.scan(tmp_path)

        kwargs = mock_run.call_args.kwargs
        assert kwargs["timeout"] == 42
        assert kwargs["stdout"] == subprocess.PIPE
        assert kwargs["stderr"] == subprocess.STDOUT

    def test_returns_ten_char_identifier_of_written_report(self, tmp_path: Path) -> None:
        adapter = _make_adapter(tmp_path / "results")

        with patch(RUN, side_effect=_writes_report(b'{"findings": []}')):
            result_id = adapter.scan(tmp_path)

        assert len(result_id) == 10
        assert (tmp_path / "results" / f"{result_id}.json").read_bytes() == b'{"findings": []}'

    def test_creates_results_root(self, tmp_path: Path) -> None:
        adapter = _make_adapter(tmp_path / "nested" / "results")

        with patch(RUN, side_effect=_writes_report()):
            adapter.scan(tmp_path)

        assert (tmp_path / "nested" / "results").is_dir()

    def test_each_scan_gets_a_fresh_identifier(self, tmp_path: Path) -> None:
        adapter = _make_adapter(tmp_path / "results")

        with patch(RUN, side_effect=_writes_report()):
            first = adapter.scan(tmp_path)
            second = adapter.scan(tmp_path)

        assert first != second


class TestScanFailures:
    def test_nonzero_exit_raises_and_discards_partial_report(self, tmp_path: Path) -> None:
        results = tmp_path / "results"
        adapter = _make_adapter(results)

        with patch(RUN, side_effect=_writes_report(b'{"partial', returncode=2)):
            with pytest.raises(ScanExecutionError, match="status 2"):
                adapter.scan(tmp_path)

        assert list(results.iterdir()) == []

    def test_missing_binary_raises(self, tmp_path: Path) -> None:
        adapter = _make_adapter(tmp_path / "results")

        with patch(RUN, side_effect=FileNotFoundError("./MoveScanner")):
            with pytest.raises(ScanExecutionError, match="Failed to start scanner"):
                adapter.scan(tmp_path)

    def test_timeout_raises_scan_timeout(self, tmp_path: Path) -> None:
        adapter = _make_adapter(tmp_path / "results", timeout=5)

        with patch(RUN, side_effect=subprocess.TimeoutExpired(["./MoveScanner"], 5)):
            with pytest.raises(ScanTimeoutError, match="timed out after 5s"):
                adapter.scan(tmp_path)

    def test_timeout_is_a_scan_execution_error(self) -> None:
        assert issubclass(ScanTimeoutError, ScanExecutionError)

    def test_success_without_report_raises(self, tmp_path: Path) -> None:
        adapter = _make_adapter(tmp_path / "results")

        with patch(RUN, side_effect=lambda command, **_: _completed(command)):
            with pytest.raises(ScanExecutionError, match="wrote no report"):
                adapter.scan(tmp_path)
