from utils import crashlog


def test_log_exception_writes_report(tmp_path, monkeypatch):
    monkeypatch.setenv("VPIANO_LOG_DIR", str(tmp_path))
    try:
        raise ValueError("bad note")
    except ValueError as e:
        path = crashlog.log_exception("replay", e)

    text = open(path, encoding="utf-8").read()
    assert path.startswith(str(tmp_path))
    assert "[replay] ValueError: bad note" in text
    assert "Traceback" in text


def test_log_dir_is_created(tmp_path, monkeypatch):
    target = tmp_path / "nested" / "logs"
    monkeypatch.setenv("VPIANO_LOG_DIR", str(target))
    assert crashlog.log_dir() == str(target)
    assert target.is_dir()
