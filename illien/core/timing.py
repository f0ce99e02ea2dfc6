from __future__ import annotations

from illien.settings import (
    PREVIEW_DEBOUNCE_MS_CHARS_PER_STEP,
    PREVIEW_DEBOUNCE_MS_DEFAULT,
    PREVIEW_DEBOUNCE_MS_MAX_ADD,
    PREVIEW_DEBOUNCE_MS_MIN,
)


def compute_preview_debounce_ms(
    txt_len: int,
    *,
    min_ms: int = PREVIEW_DEBOUNCE_MS_MIN,
    max_add_ms: int = PREVIEW_DEBOUNCE_MS_MAX_ADD,
    chars_per_step: int = PREVIEW_DEBOUNCE_MS_CHARS_PER_STEP,
    default_ms: int = PREVIEW_DEBOUNCE_MS_DEFAULT,
) -> int:
    """
    Debounce for the rendered preview.
    Longer entries => render less often, capped at min_ms + max_add_ms.
    """
    if txt_len < 0 or min_ms < 0 or max_add_ms < 0 or chars_per_step <= 0:
        return default_ms

    steps = txt_len // chars_per_step
    return min_ms + min(max_add_ms, steps * min_ms)
