import subprocess
from pathlib import Path

from scan_service.logging.logger import Log
from scan_service.scanner.base import BaseScanner
from scan_service.scanner.exceptions import ScanExecutionError, ScanTimeoutError
from scan_service.scanner.identifiers import generate_identifier

RESULT_SUFFIX = ".json"
OUTPUT_TAIL_CHARS = 2000


class MoveScannerAdapter(BaseScanner):
    """Runs the MoveScanner executable as a subprocess.

    Invocation: ``<binary> -p <modules_dir> -n -o <results_root>/<id>.json``.
    The report is never parsed; captured output is kept for diagnostics only.
    """

    def __init__(
        self,
        *,
        binary: str,
        results_root: Path,
        timeout_seconds: int,
        id_length: int = 10,
    ) -> None:
        self._binary = binary
        self._results_root = results_root
        self._timeout_seconds = timeout_seconds
        self._id_length = id_length

    def scan(self, modules_dir: Path) -> str:
        result_id = generate_identifier(self._id_length)
        output_path = self._results_root / f"{result_id}{RESULT_SUFFIX}"
        command = [self._binary, "-p", str(modules_dir), "-n", "-o", str(output_path)]
        Log.info(" ".join(command))

        try:
            self._results_root.mkdir(parents=True, exist_ok=True)
            completed = subprocess.run(
                command,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                timeout=self._timeout_seconds,
                check=False,
            )
        except subprocess.TimeoutExpired as exc:
            self._discard(output_path)
            raise ScanTimeoutError(
                f"Scanner timed out after {self._timeout_seconds}s on {modules_dir}"
            ) from exc
        except OSError as exc:
            self._discard(output_path)
            raise ScanExecutionError(f"Failed to start scanner {self._binary}: {exc}") from exc

        output = completed.stdout.decode("utf-8", errors="replace")
        Log.debug(f"Scanner output for {result_id}: {output[-OUTPUT_TAIL_CHARS:]}")

        if completed.returncode != 0:
            self._discard(output_path)
            raise ScanExecutionError(
                f"Scanner exited with status {completed.returncode}: "
                f"{output[-OUTPUT_TAIL_CHARS:].strip()}"
            )
        if not output_path.is_file():
            raise ScanExecutionError(
                f"Scanner exited successfully but wrote no report to {output_path}"
            )

        Log.info(f"Scanner wrote result {result_id} for {modules_dir}")
        return result_id

    def _discard(self, output_path: Path) -> None:
        try:
            output_path.unlink(missing_ok=True)
        except OSError as exc:
            Log.warning(f"Failed to remove partial result {output_path}: {exc}")
