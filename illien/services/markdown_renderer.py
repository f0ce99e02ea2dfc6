from __future__ import annotations

import markdown as md

from illien.core.themes import ThemeName
from illien.services.sanitize import sanitize_rendered_html

MD_EXTENSIONS = ["fenced_code", "tables", "sane_lists"]

_PALETTES = {
    "light": {"fg": "#1f1f1f", "bg": "#fdfcf9", "code": "#f1efe9", "link": "#2f6fb3"},
    "dark": {"fg": "#e6e3dc", "bg": "#1c1c1e", "code": "#2a2a2d", "link": "#7fb0e8"},
}


class MarkdownRenderer:
    """Entry text -> sanitized HTML page for the preview pane."""

    def __init__(self, *, theme: ThemeName = "light"):
        self.theme = theme

    def render_fragment(self, text: str) -> str:
        rendered = md.markdown(text or "", extensions=MD_EXTENSIONS)
        return sanitize_rendered_html(rendered)

    def render_page(self, text: str) -> str:
        p = _PALETTES.get(self.theme, _PALETTES["light"])
        return f"""\
<html>
<head>
  <meta charset="utf-8"/>
  <style>
    body {{ font-family: Georgia, serif; color: {p["fg"]}; background: {p["bg"]}; line-height: 1.6; }}
    code, pre {{ background: {p["code"]}; }}
    pre {{ padding: 12px; }}
    a {{ color: {p["link"]}; text-decoration: none; }}
  </style>
</head>
<body>{self.render_fragment(text)}</body>
</html>
"""
