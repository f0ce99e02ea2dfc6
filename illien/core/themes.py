from __future__ import annotations

from typing import Literal

ThemeName = Literal["dark", "light"]

DEFAULT_DARK_MODE = False


def theme_name(dark_mode: bool) -> ThemeName:
    return "dark" if dark_mode else "light"


def resolve_dark_mode(
    stored: bool | None,
    system: bool | None,
    *,
    default: bool = DEFAULT_DARK_MODE,
) -> bool:
    """
    Startup precedence: stored preference > OS color scheme > hard default.
    None means "no opinion" at that level.
    """
    for candidate in (stored, system):
        if candidate is not None:
            return bool(candidate)
    return default
