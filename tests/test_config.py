import pytest

from collected_notes.config import (
    DEV_URL,
    PRODUCTION_URL,
    ConfigurationError,
    TokenNotFoundError,
    load_settings,
    load_token,
    resolve_base_url,
    token_path,
)


def test_token_path_uses_home(home):
    assert token_path() == home / ".collected-notes"


def test_load_token_trims_whitespace(token_file):
    assert load_token() == "abc123"


def test_load_token_from_explicit_path(tmp_path):
    path = tmp_path / "token"
    path.write_text("xyz\n", encoding="utf-8")
    assert load_token(path) == "xyz"


def test_missing_token_file(home):
    with pytest.raises(TokenNotFoundError) as excinfo:
        load_token()
    assert ".collected-notes" in str(excinfo.value)
    assert excinfo.value.path == home / ".collected-notes"


def test_blank_token_file(home):
    (home / ".collected-notes").write_text("   \n\t", encoding="utf-8")
    with pytest.raises(TokenNotFoundError):
        load_token()


def test_unreadable_token_file_is_the_same_failure(home):
    # a directory in place of the file cannot be read
    (home / ".collected-notes").mkdir()
    with pytest.raises(TokenNotFoundError):
        load_token()


def test_token_error_is_a_configuration_error():
    assert issubclass(TokenNotFoundError, ConfigurationError)


def test_resolve_base_url():
    assert resolve_base_url(True) == DEV_URL == "http://localhost:3000"
    assert resolve_base_url(False) == PRODUCTION_URL


def test_load_settings(token_file):
    settings = load_settings(True, debug_log=True)
    assert settings.base_url == DEV_URL
    assert settings.token == "abc123"
    assert settings.debug_log is True
