# lorekeeper.py — lowercase chronicle utilities (ASCII, append-only)
import os
import sys
import traceback
from datetime import datetime

APP_FRIENDLY_NAME = "bidonsite"

DIV = "=" * 79

CHRONICLES_HEADER = f"""{DIV}
BIDONSITE CHRONICLES - session log
{DIV}
note: append chronologically; never rewrite history
{DIV}
"""


def data_dir() -> str:
    """Writable app data root. BIDONSITE_DATA_DIR wins over ~/.bidonsite."""
    return os.environ.get("BIDONSITE_DATA_DIR") or os.path.join(
        os.path.expanduser("~"), f".{APP_FRIENDLY_NAME}"
    )


def chronicles_path() -> str:
    return os.path.join(data_dir(), "chronicles.txt")


def debug_on() -> bool:
    return os.environ.get("BIDONSITE_DEBUG", "0") not in ("0", "", "false", "False", "FALSE")


def _ensure_header(path: str) -> None:
    os.makedirs(os.path.dirname(path), exist_ok=True)
    if not os.path.exists(path):
        with open(path, "w", encoding="utf-8", newline="\n") as f:
            f.write(CHRONICLES_HEADER)


def _append_block(path: str, title: str, lines: list[str]) -> None:
    _ensure_header(path)
    ts = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    block = [DIV, f"{title} - {ts}", DIV]
    block.extend(lines)
    block.append(DIV)
    block.append("end of entry")
    block.append(DIV)
    with open(path, "a", encoding="utf-8", newline="\n") as f:
        f.write("\n".join(block) + "\n")


def append_to_chronicles(title: str, lines: list[str]) -> None:
    try:
        _append_block(chronicles_path(), title, lines)
    except OSError as e:
        # a read-only home must never take the calculator down
        print(f"LORE: could not write chronicle ({e})", file=sys.stderr)


def log_app_event(event: str, details: list[str] | None = None) -> None:
    details = details or []
    lines = [f"event: {event}"]
    lines.extend([f"- {d}" for d in details])
    append_to_chronicles("app log", lines)


def log_error(event: str, err: BaseException) -> None:
    tb = "".join(traceback.format_exception(type(err), err, err.__traceback__))
    lines = [f"error: {event}", "traceback:", tb.strip()]
    append_to_chronicles("app error", lines)


def debug(exc: BaseException, where: str = "") -> None:
    """
    Opt-in diagnostics (BIDONSITE_DEBUG=1).
    Writes to <data dir>/debug.log and stderr.
    """
    if not debug_on():
        return
    stamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    tb = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    msg = f"[{stamp}] {where}: {exc}\n{tb}"
    print(msg, file=sys.stderr)
    try:
        os.makedirs(data_dir(), exist_ok=True)
        with open(os.path.join(data_dir(), "debug.log"), "a", encoding="utf-8") as f:
            f.write(msg + "\n")
    except OSError:
        pass
