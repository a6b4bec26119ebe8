# tests/test_credential_store.py
import json
from datetime import datetime, timedelta, timezone

import pytest

from calendar_booking.schemas.credentials import Credentials
from calendar_booking.services.credential_store import (
    CredentialStore,
    EnvironmentTokenSource,
    TokenFileSource,
)


def _write_tokens(path, payload):
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_environment_token_takes_precedence_over_file(tmp_path):
    token_file = _write_tokens(
        tmp_path / "tokens.json",
        {"access_token": "file-access", "refresh_token": "file-refresh"},
    )
    store = CredentialStore(
        sources=[EnvironmentTokenSource("env-refresh"), TokenFileSource(token_file)],
        token_path=token_file,
    )

    assert store.load() is True
    assert store.credentials.refresh_token == "env-refresh"
    assert store.credentials.access_token is None


def test_falls_back_to_token_file_when_no_environment_token(tmp_path):
    token_file = _write_tokens(
        tmp_path / "tokens.json",
        {"access_token": "file-access", "refresh_token": "file-refresh"},
    )
    store = CredentialStore(
        sources=[EnvironmentTokenSource(None), TokenFileSource(token_file)],
    )

    assert store.load() is True
    assert store.credentials.access_token == "file-access"
    assert store.credentials.refresh_token == "file-refresh"


def test_missing_file_returns_false_without_raising(tmp_path):
    store = CredentialStore(
        sources=[EnvironmentTokenSource(""), TokenFileSource(tmp_path / "absent.json")],
    )

    assert store.load() is False
    assert store.has_credentials is False


def test_corrupt_file_is_treated_as_not_found(tmp_path):
    token_file = tmp_path / "tokens.json"
    token_file.write_text("{not json", encoding="utf-8")
    store = CredentialStore(sources=[TokenFileSource(token_file)])

    assert store.load() is False
    assert store.credentials is None


def test_file_without_tokens_is_not_usable(tmp_path):
    token_file = _write_tokens(tmp_path / "tokens.json", {"scope": "x"})
    store = CredentialStore(sources=[TokenFileSource(token_file)])

    assert store.load() is False


def test_token_file_with_epoch_millis_expiry(tmp_path):
    token_file = _write_tokens(
        tmp_path / "tokens.json",
        {"access_token": "a", "refresh_token": "r", "expiry_date": 1767225600000},
    )
    store = CredentialStore(sources=[TokenFileSource(token_file)])

    assert store.load() is True
    assert store.credentials.expiry == datetime(2026, 1, 1, tzinfo=timezone.utc)


def test_ensure_loaded_does_not_reload_installed_credentials(tmp_path):
    calls = []

    class _CountingSource:
        name = "counting"

        def fetch(self):
            calls.append(1)
            return Credentials(refresh_token="from-source")

    store = CredentialStore(sources=[_CountingSource()])
    store.install(Credentials(access_token="already-there"))

    assert store.ensure_loaded() is True
    assert calls == []
    assert store.credentials.access_token == "already-there"


def test_ensure_loaded_reloads_lazily_when_empty():
    store = CredentialStore(sources=[EnvironmentTokenSource("late-token")])

    assert store.has_credentials is False
    assert store.ensure_loaded() is True
    assert store.credentials.refresh_token == "late-token"


def test_save_writes_json_that_load_can_read(tmp_path):
    token_file = tmp_path / "tokens.json"
    store = CredentialStore(sources=[TokenFileSource(token_file)], token_path=token_file)

    store.save(Credentials(access_token="a", refresh_token="r", token_type="Bearer"))

    payload = json.loads(token_file.read_text(encoding="utf-8"))
    assert payload["access_token"] == "a"
    assert payload["refresh_token"] == "r"
    assert "expiry" not in payload

    assert store.load() is True
    assert store.credentials.refresh_token == "r"


def test_save_failure_is_swallowed(tmp_path):
    unwritable = tmp_path / "missing-dir" / "tokens.json"
    store = CredentialStore(sources=[], token_path=unwritable)

    # Must not raise.
    store.save(Credentials(refresh_token="r"))

    assert not unwritable.exists()


@pytest.mark.parametrize("expiry_date", ["not-a-number", 10**30, True, [1, 2]])
def test_malformed_epoch_millis_expiry_is_treated_as_not_found(tmp_path, expiry_date):
    token_file = _write_tokens(
        tmp_path / "tokens.json",
        {"refresh_token": "r", "expiry_date": expiry_date},
    )
    store = CredentialStore(sources=[TokenFileSource(token_file)])

    assert store.load() is False
    assert store.credentials is None


def test_naive_expiry_in_token_file_is_read_as_utc(tmp_path):
    token_file = _write_tokens(
        tmp_path / "tokens.json",
        {"access_token": "a", "expiry": "2026-01-10T14:00:00"},
    )
    store = CredentialStore(sources=[TokenFileSource(token_file)])

    assert store.load() is True
    assert store.credentials.expiry == datetime(2026, 1, 10, 14, 0, tzinfo=timezone.utc)


def test_access_token_valid_with_naive_expiry():
    credentials = Credentials(access_token="a", expiry="2026-01-10T14:00:00")

    before = datetime(2026, 1, 10, 13, 59, tzinfo=timezone.utc)
    after = before + timedelta(minutes=2)
    assert credentials.access_token_valid(now=before) is True
    assert credentials.access_token_valid(now=after) is False
