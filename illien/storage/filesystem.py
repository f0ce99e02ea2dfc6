from __future__ import annotations

import os
import uuid
from datetime import datetime
from pathlib import Path

from illien.settings import RECOVERY_DIR


def atomic_write_text(path: Path, text: str, *, encoding: str = "utf-8") -> None:
    """
    Atomic-ish file write:
      - write to a hidden temp file in the same directory
      - fsync
      - replace() into the final path
    newline="" keeps the text byte-exact (no \\n -> \\r\\n translation).
    """
    path = Path(path)
    parent = path.parent
    parent.mkdir(parents=True, exist_ok=True)

    tmp_path = parent / f".{path.name}.tmp-{uuid.uuid4().hex}"

    try:
        with open(tmp_path, "w", encoding=encoding, newline="") as f:
            f.write(text)
            f.flush()
            os.fsync(f.fileno())
        tmp_path.replace(path)
    finally:
        try:
            if tmp_path.exists():
                tmp_path.unlink()
        except OSError:
            pass


def write_recovery_copy(entry_filename: str, text: str, *, recovery_dir: Path = RECOVERY_DIR) -> Path:
    """
    Emergency copy when a normal save fails.
    Written as <stem>.recovery.<timestamp>.md under recovery_dir.
    """
    stem = Path(entry_filename).stem or "Untitled"
    ts = datetime.now().strftime("%Y%m%d-%H%M%S")
    rec_path = Path(recovery_dir) / f"{stem}.recovery.{ts}.md"
    atomic_write_text(rec_path, text)
    return rec_path
