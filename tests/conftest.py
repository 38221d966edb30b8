from __future__ import annotations

from pathlib import Path

import pytest

from decision_sync.config import SyncConfig


@pytest.fixture
def config(tmp_path: Path) -> SyncConfig:
    return SyncConfig(
        base_url="https://confluence.example.test",
        space_key="DEC",
        root_id=100,
        page_size=2,
        request_timeout=5.0,
        output_path=tmp_path / "rules" / "decisions.md",
    )
