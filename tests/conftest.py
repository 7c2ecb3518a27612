"""
pytest configuration and fixtures for chronosort tests.
"""

import io
import os
import subprocess
import sys
from dataclasses import dataclass
from datetime import timezone
from pathlib import Path
from typing import List, Optional

import pytest
from PIL import Image
from rich.console import Console

from chronosort.constants import EXIF_TAG_DATETIME
from chronosort.reporting import Reporter


@dataclass
class CliResult:
    """Result from running CLI command."""
    exit_code: int
    output: str
    error: str


@pytest.fixture
def source_dir(tmp_path):
    """Directory holding input files."""
    path = tmp_path / "source"
    path.mkdir()
    return path


@pytest.fixture
def target_dir(tmp_path):
    """Base output directory (not created up front)."""
    return tmp_path / "target"


@pytest.fixture
def create_test_files(source_dir):
    """Helper to create test files with specific properties."""

    def create_files(file_specs: List[dict]) -> List[Path]:
        """Create test files based on specifications.

        Args:
            file_specs: List of dicts with keys:
                - name: filename
                - content: file content (optional)
                - mtime: modification time as UTC datetime (optional)

        Returns:
            Paths of the created files, in order
        """
        paths = []
        for spec in file_specs:
            file_path = source_dir / spec['name']
            file_path.parent.mkdir(parents=True, exist_ok=True)

            content = spec.get('content', b'test file content')
            if isinstance(content, str):
                file_path.write_text(content)
            else:
                file_path.write_bytes(content)

            if 'mtime' in spec:
                mtime = spec['mtime'].replace(tzinfo=timezone.utc).timestamp()
                os.utime(file_path, (mtime, mtime))

            paths.append(file_path)
        return paths

    return create_files


@pytest.fixture
def make_jpeg(source_dir):
    """Helper to write a small JPEG with an EXIF DateTime tag."""

    def make(name: str, date_text: Optional[str] = None, extra_tags: Optional[dict] = None) -> Path:
        file_path = source_dir / name
        exif = Image.Exif()
        if date_text is not None:
            exif[EXIF_TAG_DATETIME] = date_text
        for tag, value in (extra_tags or {}).items():
            exif[tag] = value

        img = Image.new("RGB", (8, 8), "white")
        if len(exif):
            img.save(file_path, "JPEG", exif=exif)
        else:
            img.save(file_path, "JPEG")
        return file_path

    return make


@pytest.fixture
def fake_tool(monkeypatch):
    """Replace subprocess.run with a canned external tool response."""

    def install(stdout: str = "", stderr: str = "", returncode: int = 0,
                missing: bool = False) -> list:
        calls = []

        def fake_run(cmd, **kwargs):
            calls.append(list(cmd))
            if missing:
                raise FileNotFoundError(2, "No such file or directory", cmd[0])
            return subprocess.CompletedProcess(cmd, returncode, stdout, stderr)

        monkeypatch.setattr("chronosort.timestamps.subprocess.run", fake_run)
        return calls

    return install


@pytest.fixture
def reporter():
    """Reporter writing into in-memory buffers."""
    out = io.StringIO()
    err = io.StringIO()
    return Reporter(
        console=Console(file=out, width=200),
        error_console=Console(file=err, width=200),
    )


@pytest.fixture
def cli_runner(tmp_path):
    """Create a CLI runner that captures output and isolates config."""

    def run_cli(*args, config_path=None):
        """Run chronosort CLI with given arguments.

        Args:
            *args: Command line arguments (files, --flags, etc)
            config_path: Optional config path for test isolation

        Returns:
            CliResult with exit_code, output, and error
        """
        from chronosort.cli import main

        if config_path is None:
            config_path = tmp_path / "missing-config.yml"

        old_stdout = sys.stdout
        old_stderr = sys.stderr
        stdout = io.StringIO()
        stderr = io.StringIO()

        try:
            sys.stdout = stdout
            sys.stderr = stderr

            exit_code = main(config_path=config_path, argv=[str(a) for a in args])

            return CliResult(
                exit_code=exit_code,
                output=stdout.getvalue(),
                error=stderr.getvalue()
            )
        except SystemExit as e:
            return CliResult(
                exit_code=e.code if e.code is not None else 0,
                output=stdout.getvalue(),
                error=stderr.getvalue()
            )
        finally:
            sys.stdout = old_stdout
            sys.stderr = old_stderr

    return run_cli


@pytest.fixture
def assert_file_structure():
    """Helper to assert expected file structure."""

    def check_structure(base_path: Path, expected_structure: dict):
        """Assert that directory has expected structure.

        Args:
            base_path: Root directory to check
            expected_structure: Dict describing expected structure
                e.g., {
                    "2024": {
                        "01": ["file1.jpg", "file2.jpg"],
                        "02": ["file3.jpg"]
                    }
                }
        """
        def check_level(path: Path, structure: dict):
            for name, value in structure.items():
                item_path = path / name
                assert item_path.exists(), f"Expected {item_path} to exist"

                if isinstance(value, dict):
                    assert item_path.is_dir(), f"Expected {item_path} to be a directory"
                    check_level(item_path, value)
                elif isinstance(value, list):
                    assert item_path.is_dir(), f"Expected {item_path} to be a directory"
                    actual_files = sorted([f.name for f in item_path.iterdir() if f.is_file()])
                    expected_files = sorted(value)
                    assert actual_files == expected_files, \
                        f"Expected files {expected_files} in {item_path}, got {actual_files}"

        check_level(base_path, expected_structure)

    return check_structure
