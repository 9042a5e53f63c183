import os
from datetime import datetime, timezone

from imgraft.runtime import (
    FixedClock,
    SystemClock,
    config_dir,
    config_file_path,
    credentials_file_path,
    get_with_default,
)


def test_system_clock_now():
    before = datetime.now().astimezone()
    got = SystemClock().now()
    after = datetime.now().astimezone()
    assert before <= got <= after


def test_fixed_clock_now():
    fixed = datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)
    assert FixedClock(fixed).now() == fixed


def test_fixed_clock_now_is_idempotent():
    fixed = datetime(2026, 6, 15, 9, 30, 0, tzinfo=timezone.utc)
    clock = FixedClock(fixed)
    first = clock.now()
    second = clock.now()
    assert first == fixed
    assert second == fixed


def test_get_with_default_unset(monkeypatch):
    monkeypatch.delenv("IMGRAFT_TEST_TRULY_UNSET_XYZ", raising=False)
    assert get_with_default("IMGRAFT_TEST_TRULY_UNSET_XYZ", "flash") == "flash"


def test_get_with_default_set(monkeypatch):
    monkeypatch.setenv("IMGRAFT_TEST_SET", "pro")
    assert get_with_default("IMGRAFT_TEST_SET", "flash") == "pro"


def test_get_with_default_empty_string_is_not_default(monkeypatch):
    monkeypatch.setenv("IMGRAFT_TEST_EMPTY", "")
    assert get_with_default("IMGRAFT_TEST_EMPTY", "flash") == ""


def test_config_dir(monkeypatch):
    monkeypatch.setenv("HOME", "/tmp/testhome")
    assert config_dir() == os.path.join("/tmp/testhome", ".config", "imgraft")


def test_config_dir_no_trailing_slash(monkeypatch):
    monkeypatch.setenv("HOME", "/tmp/testhome")
    assert not config_dir().endswith("/")


def test_config_file_path(monkeypatch):
    monkeypatch.setenv("HOME", "/tmp/testhome")
    assert config_file_path() == os.path.join(
        "/tmp/testhome", ".config", "imgraft", "config.toml"
    )


def test_credentials_file_path(monkeypatch):
    monkeypatch.setenv("HOME", "/tmp/testhome")
    assert credentials_file_path() == os.path.join(
        "/tmp/testhome", ".config", "imgraft", "credentials.json"
    )