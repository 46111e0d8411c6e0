from __future__ import annotations

import re
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent


def test_readme_reference_exists() -> None:
    text = (ROOT / "pyproject.toml").read_text(encoding="utf-8")
    match = re.search(r'^readme\s*=\s*"([^"]+)"', text, re.MULTILINE)
    if match is not None:
        assert match.group(1) != "SPEC_FULL.md"
        assert (ROOT / match.group(1)).is_file()
