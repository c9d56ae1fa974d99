"""Pytest configuration for open-import-file tests."""

import json
import logging
from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Keep user settings and debug/log environment out of tests."""
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    for var in ("OPEN_IMPORT_FILE_DEBUG", "OPEN_IMPORT_FILE_LOG_PATH", "OPEN_IMPORT_FILE_LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def project(tmp_path):
    """Project root directory for a test."""
    root = tmp_path / "proj"
    root.mkdir()
    return root


@pytest.fixture
def write_file(project):
    """Create a file (and parents) under the project root."""

    def _write(relative: str, content: str = "") -> Path:
        path = project / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def write_tsconfig(write_file):
    """Write a tsconfig.json with the given compilerOptions."""

    def _write(compiler_options: dict, relative: str = "tsconfig.json") -> Path:
        return write_file(relative, json.dumps({"compilerOptions": compiler_options}, indent=2))

    return _write


class FakeClock:
    """Manually advanced clock for cache TTL tests."""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Drop handlers installed by init_logging during a test."""
    logger = logging.getLogger("open_import_file")
    level = logger.level
    yield
    for handler in list(logger.handlers):
        if getattr(handler, "_open_import_file", False):
            logger.removeHandler(handler)
            handler.close()
    logger.setLevel(level)
