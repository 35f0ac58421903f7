"""Application wiring."""

from __future__ import annotations

import os
import subprocess
import sys
from pathlib import Path

BACKEND = Path(__file__).resolve().parents[1] / "backend"


def test_main_imports_in_a_fresh_interpreter() -> None:
    # A fresh process, so import order is not masked by modules other tests already loaded.
    env = dict(os.environ, DATABASE_URL="sqlite+aiosqlite://", OPENAI_API_KEY="test-key")
    result = subprocess.run(
        [sys.executable, "-c", "import main; print(main.app.title)"],
        cwd=BACKEND,
        env=env,
        capture_output=True,
        text=True,
    )
    assert result.returncode == 0, result.stderr
    assert result.stdout.strip() == "Inventory Tracker API"


def test_inventory_routes_are_registered() -> None:
    from main import app

    paths = {route.path for route in app.routes}
    assert "/inventory/items/{name:path}/decrement" in paths
    assert "/inventory/items/{name:path}" in paths
    assert "/session/logout" in paths
