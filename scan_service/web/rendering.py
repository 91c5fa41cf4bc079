import html
import os
from pathlib import Path
from typing import NamedTuple
from urllib.parse import quote

RESULT_PAGE = """<!DOCTYPE html>
<html>
<head>
    <title>JSON Data</title>
</head>
<body>
    <h1>JSON Data:</h1>
    <pre id="json-data">{payload}</pre>
    <script>
        var jsonData = JSON.parse(document.getElementById('json-data').textContent);
        document.getElementById('json-data').textContent = JSON.stringify(jsonData, null, 2);
    </script>
</body>
</html>"""

INDEX_PAGE = """<!DOCTYPE html>
<html>
<head>
    <title>Bytecode Scanner</title>
</head>
<body>
    <h1>Upload a project archive</h1>
    <form action="/upload" method="post" enctype="multipart/form-data">
        <input type="file" name="file" accept=".zip">
        <input type="submit" value="Scan">
    </form>
    <h2>Sample projects</h2>
    <ul>
{items}
    </ul>
</body>
</html>"""


class SampleFile(NamedTuple):
    name: str
    size: int


def render_result_page(payload: bytes) -> str:
    """Embed the scanner report in a page that pretty-prints it client-side."""
    text = payload.decode("utf-8", errors="replace")
    return RESULT_PAGE.format(payload=html.escape(text))


def render_index_page(samples: list[SampleFile]) -> str:
    items = "\n".join(
        f'        <li><a href="/samples/{quote(s.name)}">'
        f"{html.escape(s.name)}</a> ({s.size} bytes)</li>"
        for s in samples
    )
    return INDEX_PAGE.format(items=items)


def list_sample_files(directory: Path) -> list[SampleFile]:
    """Regular files directly under directory, sorted by name.

    Sizes are read while listing; entries removed in the meantime are skipped.
    Raises OSError if the directory itself cannot be read.
    """
    samples: list[SampleFile] = []
    with os.scandir(directory) as entries:
        for entry in entries:
            try:
                if not entry.is_file():
                    continue
                size = entry.stat().st_size
            except FileNotFoundError:
                continue
            samples.append(SampleFile(entry.name, size))
    return sorted(samples, key=lambda s: s.name)
