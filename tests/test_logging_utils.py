from app.causelist import logging_utils


def test_sync_event_label_and_phase(monkeypatch):
    events: list[str] = []
    monkeypatch.setattr(logging_utils, "log_line", lambda msg: events.append(msg))

    logging_utils._sync_event("state", phase="navigated", court="telangana", skipped_steps=["daily_list"])

    assert events
    line = events[-1]
    assert line.startswith("[SYNC][STATE]")
    assert "phase='navigated'" in line
    assert "court='telangana'" in line
    assert "skipped_steps=['daily_list']" in line


def test_sync_event_phase_only_becomes_label(monkeypatch):
    events: list[str] = []
    monkeypatch.setattr(logging_utils, "log_line", lambda msg: events.append(msg))

    logging_utils._sync_event(phase="warn", step="daily_list")

    assert events == ["[SYNC][WARN] step='daily_list'"]


def test_sync_event_never_raises(monkeypatch):
    def _broken(msg):  # noqa: ANN001
        raise OSError("disk full")

    monkeypatch.setattr(logging_utils, "log_line", _broken)

    logging_utils._sync_event("error", error="boom")
