"""
Pytest configuration and shared fixtures.
"""

import pytest
from pathlib import Path
from typing import Dict

from enrollsplit.logger import StructuredLogger


ENROLLMENT_CSV = """user_id,name,version,insurance_company
u1,Jane Doe,1,Blue Cross
u1,Jane Doe,3,Blue Cross
u2,John Smith,2,Blue Cross
u1,Jane Doe,2,Acme  Health
u3,Anna Bell,1,Acme  Health
u3,Anna Bell,5,Acme  Health
u4,Zed Adams,1,Blue Cross
"""


@pytest.fixture
def quiet_logger() -> StructuredLogger:
    """Logger without handlers; records still propagate to caplog."""
    return StructuredLogger(
        name="enrollsplit_test",
        level="DEBUG",
        enable_file=False,
        enable_console=False,
    )


@pytest.fixture
def valid_row() -> Dict[str, str]:
    """A well-formed enrollment row."""
    return {
        "user_id": "u1",
        "name": "Jane Doe",
        "version": "3",
        "insurance_company": "Blue Cross",
    }


@pytest.fixture
def enrollment_file(tmp_path) -> Path:
    """Master enrollment file with repeated versions across two companies."""
    path = tmp_path / "enrollments.csv"
    path.write_text(ENROLLMENT_CSV, encoding="utf-8")
    return path


@pytest.fixture
def output_dir(tmp_path) -> Path:
    """Empty, existing output directory."""
    out = tmp_path / "out"
    out.mkdir()
    return out
