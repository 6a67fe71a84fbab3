"""System clipboard adapter."""

from __future__ import annotations

import pyperclip


def copy_to_clipboard(text: str) -> None:
    """Write ``text`` verbatim; raises ``pyperclip.PyperclipException`` when no backend exists."""
    pyperclip.copy(text)
