"""Tests for environment-based configuration."""

from fintrack.config import DEFAULT_SMS_SENDERS, get_db_path, get_sms_senders


def test_db_path_argument_wins(monkeypatch):
    monkeypatch.setenv("FINTRACK_DB_PATH", "/tmp/from-env.db")
    assert get_db_path("/tmp/explicit.db") == "/tmp/explicit.db"


def test_db_path_from_environment(monkeypatch):
    monkeypatch.setenv("FINTRACK_DB_PATH", "/tmp/from-env.db")
    assert get_db_path() == "/tmp/from-env.db"


def test_db_path_default_under_home(monkeypatch, tmp_path):
    monkeypatch.delenv("FINTRACK_DB_PATH", raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))

    path = get_db_path()

    assert path == str(tmp_path / ".fintrack" / "fintrack.db")
    assert (tmp_path / ".fintrack").is_dir()


def test_sms_senders_default(monkeypatch):
    monkeypatch.delenv("FINTRACK_SMS_SENDERS", raising=False)
    assert get_sms_senders() == DEFAULT_SMS_SENDERS


def test_sms_senders_from_environment(monkeypatch):
    monkeypatch.setenv("FINTRACK_SMS_SENDERS", "axisbk, HDFCBK ,,")
    assert get_sms_senders() == ("axisbk", "HDFCBK")
