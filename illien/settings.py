from __future__ import annotations
from pathlib import Path

APP_NAME = "illien"
APP_DIR = Path.home() / f".{APP_NAME}"
LOG_DIR = APP_DIR / "logs"
LOG_PATH = LOG_DIR / f"{APP_NAME}.log"
RECOVERY_DIR = APP_DIR / "recovery"

AUTOSAVE_DEBOUNCE_MS = 1000

PREVIEW_DEBOUNCE_MS_DEFAULT = 350
# Preview debounce is adaptive: 300..800ms depending on entry size
PREVIEW_DEBOUNCE_MS_MIN = 300
PREVIEW_DEBOUNCE_MS_MAX_ADD = 500
PREVIEW_DEBOUNCE_MS_CHARS_PER_STEP = 400
