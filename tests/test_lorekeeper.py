# tests/test_lorekeeper.py
import os

from lore import lorekeeper


def test_event_block_is_appended(tmp_path):
    lorekeeper.log_app_event("app_started", ["catalog=v1.0.0"])
    lorekeeper.log_app_event("app_closed")
    with open(lorekeeper.chronicles_path(), encoding="utf-8") as f:
        text = f.read()
    assert text.startswith(lorekeeper.DIV)
    assert text.count("BIDONSITE CHRONICLES") == 1
    assert "event: app_started" in text
    assert "- catalog=v1.0.0" in text
    assert text.index("app_started") < text.index("app_closed")
    assert lorekeeper.chronicles_path().startswith(str(tmp_path))


def test_error_includes_traceback():
    try:
        raise RuntimeError("clipboard gone")
    except RuntimeError as e:
        lorekeeper.log_error("clipboard write failed", e)
    with open(lorekeeper.chronicles_path(), encoding="utf-8") as f:
        text = f.read()
    assert "error: clipboard write failed" in text
    assert "Traceback" in text
    assert "RuntimeError: clipboard gone" in text


def test_debug_is_opt_in(monkeypatch, capsys):
    log = os.path.join(lorekeeper.data_dir(), "debug.log")
    lorekeeper.debug(ValueError("quiet"), "test")
    assert not os.path.exists(log)

    monkeypatch.setenv("BIDONSITE_DEBUG", "1")
    lorekeeper.debug(ValueError("loud"), "test")
    assert "test: loud" in capsys.readouterr().err
    with open(log, encoding="utf-8") as f:
        assert "loud" in f.read()
