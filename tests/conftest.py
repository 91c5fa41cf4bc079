import io
import stat
import zipfile
from collections.abc import Callable
from pathlib import Path

import pytest

ZipFactory = Callable[[dict[str, bytes | None]], bytes]

FAKE_SCANNER_SCRIPT = """#!/bin/sh
while [ $# -gt 0 ]; do
  case "$1" in
    -p) input="$2"; shift 2 ;;
    -o) output="$2"; shift 2 ;;
    -n) shift ;;
    *) echo "unknown argument $1" >&2; exit 2 ;;
  esac
done
if [ ! -d "$input" ]; then
  echo "no such directory: $input" >&2
  exit 1
fi
printf '{"package": "%s", "findings": []}' "$(basename "$(dirname "$input")")" > "$output"
echo "scanned $input"
"""

FAILING_SCANNER_SCRIPT = """#!/bin/sh
while [ $# -gt 0 ]; do
  case "$1" in
    -o) output="$2"; shift 2 ;;
    *) shift ;;
  esac
done
printf '{"partial": ' > "$output"
echo "panic: bytecode deserialization failed" >&2
exit 3
"""

SLOW_SCANNER_SCRIPT = """#!/bin/sh
exec sleep 10
"""


def _build_zip(entries: dict[str, bytes | None]) -> bytes:
    """Build a zip in memory; a None value marks a directory entry."""
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", zipfile.ZIP_DEFLATED) as zf:
        for name, data in entries.items():
            if data is None:
                zf.writestr(zipfile.ZipInfo(name.rstrip("/") + "/"), b"")
            else:
                zf.writestr(name, data)
    return buf.getvalue()


def _write_script(path: Path, body: str) -> Path:
    path.write_text(body)
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


@pytest.fixture()
def zip_factory() -> ZipFactory:
    return _build_zip


@pytest.fixture()
def project_zip_bytes() -> bytes:
    """project.zip holding project/bytecode_modules/mod.mv plus some sources."""
    return _build_zip(
        {
            "project/": None,
            "project/bytecode_modules/": None,
            "project/bytecode_modules/mod.mv": b"\xa1\x1c\xeb\x0b\x06\x00\x00\x00",
            "project/sources/mod.move": b"module 0x1::mod {}",
        }
    )


@pytest.fixture()
def empty_zip_bytes() -> bytes:
    """empty.zip without any bytecode_modules directory."""
    return _build_zip({"empty/README.md": b"nothing compiled here"})


@pytest.fixture()
def fake_scanner(tmp_path: Path) -> Path:
    return _write_script(tmp_path / "FakeScanner", FAKE_SCANNER_SCRIPT)


@pytest.fixture()
def failing_scanner(tmp_path: Path) -> Path:
    return _write_script(tmp_path / "FailingScanner", FAILING_SCANNER_SCRIPT)


@pytest.fixture()
def slow_scanner(tmp_path: Path) -> Path:
    return _write_script(tmp_path / "SlowScanner", SLOW_SCANNER_SCRIPT)
