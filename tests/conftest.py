from __future__ import annotations

import json
from pathlib import Path

import pytest


@pytest.fixture(scope="session")
def fixtures_dir() -> Path:
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def transfer_payload(fixtures_dir: Path) -> dict:
    return json.loads((fixtures_dir / "transfer_one_shot.json").read_text(encoding="utf-8"))


@pytest.fixture
def templates_override_path(fixtures_dir: Path) -> Path:
    return fixtures_dir / "templates_override.yaml"
