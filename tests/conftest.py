# tests/conftest.py

import stat
import sys
from pathlib import Path
from uuid import uuid4

import pytest

from app.core.config import Settings

SAMPLE_PDF = b"%PDF-1.4\n" + b"1 0 obj << /Type /Catalog >> endobj\n" * 128 + b"%%EOF\n"

# Stand-in for Ghostscript: honours -sOutputFile=<path> and the trailing input path,
# writes an output sized as a ratio of the input, and can fail or stall on demand.
FAKE_GHOSTSCRIPT = """#!{python}
import json
import sys
import time

ratio = {ratio!r}
exit_code = {exit_code!r}
delay = {delay!r}
no_output = {no_output!r}

args = sys.argv[1:]
with open(__file__ + ".args", "a") as log:
    log.write(json.dumps(args) + "\\n")

output = next(arg.split("=", 1)[1] for arg in args if arg.startswith("-sOutputFile="))
source = args[-1]

if delay:
    with open(output, "wb") as handle:
        handle.write(b"%PDF-partial")
    time.sleep(delay)

if exit_code:
    with open(output, "wb") as handle:
        handle.write(b"%PDF-partial")
    sys.stderr.write("simulated ghostscript failure\\n")
    sys.exit(exit_code)

if no_output:
    sys.exit(0)

with open(source, "rb") as handle:
    data = handle.read()

size = int(len(data) * ratio)
with open(output, "wb") as handle:
    handle.write((data * (size // len(data) + 1))[:size])
"""


@pytest.fixture
def sample_pdf() -> bytes:
    return SAMPLE_PDF


@pytest.fixture
def fake_ghostscript(tmp_path):
    """Factory returning an executable that mimics the Ghostscript CLI."""

    def factory(
        *, ratio: float = 0.5, exit_code: int = 0, delay: float = 0.0, no_output: bool = False
    ) -> Path:
        bin_dir = tmp_path / "bin"
        bin_dir.mkdir(exist_ok=True)
        script = bin_dir / f"fake-gs-{uuid4().hex[:6]}"
        script.write_text(
            FAKE_GHOSTSCRIPT.format(
                python=sys.executable, ratio=ratio, exit_code=exit_code, delay=delay, no_output=no_output
            )
        )
        script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return script

    return factory


@pytest.fixture
def make_settings(tmp_path):
    def factory(binary, **overrides) -> Settings:
        values = {
            "base_dir": tmp_path,
            "upload_dir": tmp_path / "uploads",
            "ghostscript_binary": str(binary),
            "compression_timeout": 10.0,
        }
        values.update(overrides)
        settings = Settings(**values)
        settings.configure_paths()
        return settings

    return factory


@pytest.fixture
def stored_pdf(sample_pdf):
    """Write the sample PDF into a settings' upload directory as the receiver would."""

    def factory(settings: Settings, name: str = "report.pdf") -> Path:
        path = settings.upload_dir / f"1700000000000-{uuid4().hex[:8]}-{name}"
        path.write_bytes(sample_pdf)
        return path

    return factory
