"""
Configuration file for pytest.

This file adds the project's root directory to the Python path so that
pytest can find the 'docingest' module without needing to install it,
and provides fixtures shared by the test suites.
"""

import os
import sys
from datetime import datetime
from pathlib import Path

import pytest

# Add the project root directory to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from docingest.core.context import PipelineContext, RunConfig  # noqa: E402
from docingest.utils.data_models import Document, File  # noqa: E402


@pytest.fixture
def make_context(tmp_path):
    """Returns a factory for contexts rooted in the test's temporary directory."""

    def _make(**overrides):
        options = {
            "input_path": tmp_path / "input",
            "output_dir": tmp_path / "work",
        }
        options.update(overrides)
        return PipelineContext(config=RunConfig(**options))

    return _make


@pytest.fixture
def make_document(tmp_path):
    """
    Returns a factory writing files into a document folder and building the
    matching Document. Files get increasing modification times in the given order.
    """

    def _make(name, files, created_at=datetime(2023, 1, 15, 10, 30)):
        folder = tmp_path / "input" / name
        folder.mkdir(parents=True, exist_ok=True)
        entries = []
        for index, (file_name, writer) in enumerate(files):
            path = folder / file_name
            writer(path)
            timestamp = 1_700_000_000 + index
            os.utime(path, (timestamp, timestamp))
            entries.append(
                File(name=file_name, path=path, last_modified=datetime.fromtimestamp(timestamp))
            )
        return Document(name=name, path=folder, created_at=created_at, files=entries)

    return _make
