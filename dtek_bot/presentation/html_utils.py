from __future__ import annotations

import html


def escape_html(value: object) -> str:
    """Escape text for Telegram HTML parse mode; ``None`` becomes an empty string."""
    if value is None:
        return ""
    return html.escape(str(value), quote=False).replace('"', "&quot;")
