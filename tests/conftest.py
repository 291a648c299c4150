"""Pytest configuration: import path, log directory, and shared fixtures.

This runs before any tests, so modules can import without local path hacks.
"""
from __future__ import annotations

import os
import sys
import tempfile
from pathlib import Path
from typing import Callable, List

import pytest

# Ensure repository root is on sys.path for local package imports
sys.path.append(str(Path(__file__).resolve().parents[1]))

# Keep test runs from writing logs into the working tree
os.environ.setdefault(
    "BIBLE_IMPORT_LOG_DIR", str(Path(tempfile.gettempdir()) / "bible-import-test-logs")
)

from bible_import.core.models import VerseRecord  # noqa: E402

GENESIS_USFM = r"""\id GEN World English Bible
\ide UTF-8
\h Genesis
\toc1 The First Book of Moses, Commonly Called Genesis
\mt1 Genesis
\c 1
\p
\v 1 In the beginning, God\f + \fr 1:1 \ft The Hebrew word rendered “God” is “Elohim.”\f* created the heavens and the earth.
\v 2 The earth was formless and empty. Darkness was on the surface of the deep
\q1 and God’s Spirit was hovering over the surface of the waters.
\p
\v 3 God said, \wj “Let there be light,”\wj* and there was light.
\c 2
\v 1 The heavens, the earth, and all their vast array were finished.
"""


@pytest.fixture
def genesis_lines() -> List[str]:
    return GENESIS_USFM.splitlines()


@pytest.fixture
def collected() -> List[VerseRecord]:
    return []


@pytest.fixture
def sink(collected: List[VerseRecord]) -> Callable[[VerseRecord], None]:
    return collected.append
