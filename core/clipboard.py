# core/clipboard.py — push quote text to the system clipboard

from core.model import ClipboardUnavailable
from lore import lorekeeper


def _system_clipboard():
    try:
        from PySide6.QtGui import QGuiApplication
    except ImportError as e:
        raise ClipboardUnavailable("Qt is not available") from e
    if QGuiApplication.instance() is None:
        raise ClipboardUnavailable("No running Qt application")
    cb = QGuiApplication.clipboard()
    if cb is None:
        raise ClipboardUnavailable("System clipboard is not available")
    return cb


def _selection_mode():
    from PySide6.QtGui import QClipboard
    return QClipboard.Mode.Selection


def _write_selection(cb, text: str) -> bool:
    """X11 primary selection; used only when the regular clipboard refuses."""
    try:
        if not cb.supportsSelection():
            return False
        mode = _selection_mode()
        cb.setText(text, mode)
        return cb.text(mode) == text
    except Exception as e:
        lorekeeper.debug(e, "clipboard:selection")
        return False


def copy_text(text: str, clipboard=None) -> None:
    """
    Write text to the clipboard and read it back.
    Raises ClipboardUnavailable when neither the clipboard nor the selection
    buffer ends up holding the text.
    """
    cb = clipboard if clipboard is not None else _system_clipboard()
    try:
        cb.setText(text)
        if cb.text() == text:
            return
    except Exception as e:
        raise ClipboardUnavailable(f"Could not copy to clipboard: {e}") from e

    if _write_selection(cb, text):
        return
    raise ClipboardUnavailable("Clipboard did not accept the text")
