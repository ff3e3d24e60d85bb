from __future__ import annotations

import os
import shutil
import tempfile
from pathlib import Path


def _base_root() -> Path:
    env_root = os.getenv("EXPORTS_ROOT")
    if env_root:
        return Path(env_root).expanduser().resolve()
    return Path(__file__).resolve().parents[2] / "exports"


def ensure_export_root() -> Path:
    """Ensure the export folder exists and return it."""

    root = _base_root()
    root.mkdir(parents=True, exist_ok=True)
    return root


def export_path(filename: str) -> Path:
    """Resolve ``filename`` inside a fresh directory of the export folder.

    Every call gets its own directory so concurrent exports of the same range
    never write the same file.
    """

    safe_name = Path(filename).name
    request_dir = Path(tempfile.mkdtemp(prefix="export-", dir=ensure_export_root()))
    return request_dir / safe_name


def discard_export(path: Path) -> None:
    """Remove an exported file together with its request directory."""

    shutil.rmtree(path.parent, ignore_errors=True)
