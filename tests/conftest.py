"""Shared test fixtures for the pobsd_converter test suite.

WHY: Several test modules need the same sample databases. Centralizing
them here keeps every module testing against the same, known input.

HOW: Plain module constants hold small inline databases (tab separated);
fixtures expose them together with the on-disk sample database in
tests/data/test-games.db.

RULES:
- The on-disk sample has three valid games and no diagnostics
- SCENARIO_A has one valid record (Foo) and one invalid record (Bar)
- Inline databases use explicit "\\t" so separators are visible
"""

from pathlib import Path

import pytest

DATA_DIR = Path(__file__).resolve().parent / "data"
SAMPLE_DB_PATH = DATA_DIR / "test-games.db"

SCENARIO_A = "Game\tFoo\nYear\t1995\n\nGame\tBar\nYear\tbadyear\n"

MESSY_DB = (
    "Game\tAlpha\n"         # 1
    "Year\t2001\n"          # 2
    "this is not a field\n"  # 3
    "Tags\tarcade\n"        # 4
    "Tags\tshooter, arcade\n"  # 5
    "\n"                    # 6
    "\n"                    # 7
    "Cover\tno-name.png\n"  # 8
    "\n"                    # 9
    "Game\tBeta\n"          # 10
    "Status\tBroken\n"      # 11
    "\n"                    # 12
    "Game\tAlpha\n"         # 13
    "Year\t2002\n"          # 14
)


@pytest.fixture
def sample_db_path():
    """Path to the three-game sample database."""
    return SAMPLE_DB_PATH


@pytest.fixture
def sample_db_text():
    """Text of the three-game sample database."""
    return SAMPLE_DB_PATH.read_text(encoding="utf-8")


@pytest.fixture
def scenario_a():
    return SCENARIO_A


@pytest.fixture
def messy_db():
    """Database exercising every diagnostic kind."""
    return MESSY_DB
