import json

from delve import logging_utils
from delve.logging_utils import get_logger


def test_key_value_format(monkeypatch):
    monkeypatch.setattr(logging_utils, "JSON_MODE", False)
    line = logging_utils._format("info", event="chunk_generated", cx=-1, note="two words", skipped=None)
    assert line.startswith("level=info ts=")
    assert "event=chunk_generated" in line
    assert "cx=-1" in line
    assert "note=two_words" in line
    assert "skipped" not in line


def test_json_format(monkeypatch):
    monkeypatch.setattr(logging_utils, "JSON_MODE", True)
    rec = json.loads(logging_utils._format("warn", event="x", coord=(1, 2)))
    assert rec["level"] == "warn"
    assert rec["event"] == "x"
    assert rec["coord"] == [1, 2]


def test_level_filter_and_streams(monkeypatch, capsys):
    monkeypatch.setattr(logging_utils, "JSON_MODE", False)
    monkeypatch.setattr(logging_utils, "CURRENT_LEVEL", logging_utils.LEVELS["info"])
    log = get_logger("delve.test")
    log.debug(event="hidden")
    log.info(event="shown")
    log.error(event="failed")
    out, err = capsys.readouterr()
    assert "hidden" not in out
    assert "event=shown" in out and "logger=delve.test" in out
    assert "event=failed" in err


def test_get_logger_is_cached():
    assert get_logger("delve.world") is get_logger("delve.world")
    assert logging_utils.log is get_logger("delve")


def test_text_values(monkeypatch):
    monkeypatch.setattr(logging_utils, "JSON_MODE", False)
    line = logging_utils._format("debug", coord=(3, -1), edges=["north", "west"], ms=1.25, ok=True)
    assert "coord=3,-1" in line
    assert "edges=north,west" in line
    assert "ms=1.25" in line
    assert "ok=true" in line


def test_bound_context_is_added_to_records(monkeypatch, capsys):
    monkeypatch.setattr(logging_utils, "JSON_MODE", False)
    monkeypatch.setattr(logging_utils, "CURRENT_LEVEL", logging_utils.LEVELS["debug"])
    base = get_logger("delve.bind_test")
    child = base.bind(seed=77)
    child.debug(event="chunk_generated", cx=1)
    base.debug(event="plain")
    out = capsys.readouterr().out.splitlines()
    assert "seed=77" in out[0] and "event=chunk_generated" in out[0]
    assert "seed" not in out[1]
    assert child.name == base.name


def test_manager_records_carry_world_seed(monkeypatch, capsys):
    from tests.world_test_utils import make_manager

    monkeypatch.setattr(logging_utils, "JSON_MODE", False)
    monkeypatch.setattr(logging_utils, "CURRENT_LEVEL", logging_utils.LEVELS["debug"])
    make_manager(31337, view_distance=0).update_window(2, 2)
    out = capsys.readouterr().out
    assert "event=chunk_generated" in out
    assert "seed=31337" in out
