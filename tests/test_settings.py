import pytest

from quizwheel.config import Settings
from quizwheel.config.settings import DEFAULT_ALLOWED_ORIGINS, DEFAULT_DATABASE_URL


@pytest.fixture
def clean_env(monkeypatch):
    for key in (
        "DATABASE_URL",
        "HOST",
        "PORT",
        "ALLOWED_ORIGINS",
        "RATE_LIMIT_WINDOW_SECONDS",
        "RATE_LIMIT_MAX_REQUESTS",
        "WHEEL_WIN_ODDS",
        "EXPORT_TOKEN",
        "TRUST_PROXY",
        "TIMEZONE",
        "ENVIRONMENT",
    ):
        monkeypatch.delenv(key, raising=False)
    # keep a stray .env out of the picture
    monkeypatch.setattr("quizwheel.config.settings.load_dotenv", lambda *a, **k: False)
    return monkeypatch


def test_defaults(clean_env):
    s = Settings.load()
    assert s.database_url == DEFAULT_DATABASE_URL
    assert s.port == 3000
    assert s.allowed_origins == DEFAULT_ALLOWED_ORIGINS
    assert s.rate_limit_window_seconds == 60
    assert s.rate_limit_max_requests == 20
    assert s.wheel_win_odds == 50
    assert s.export_token is None
    assert s.timezone == "UTC"
    assert s.trust_proxy is False
    assert s.is_dev is False


def test_overrides(clean_env):
    clean_env.setenv("PORT", "8080")
    clean_env.setenv("ALLOWED_ORIGINS", "[https://a.example/, https://b.example]")
    clean_env.setenv("EXPORT_TOKEN", "  s3cret ")
    clean_env.setenv("TIMEZONE", "Europe/Paris")
    clean_env.setenv("ENVIRONMENT", "development")
    clean_env.setenv("TRUST_PROXY", "yes")

    s = Settings.load()
    assert s.port == 8080
    assert s.allowed_origins == ("https://a.example", "https://b.example")
    assert s.export_token == "s3cret"
    assert s.timezone == "Europe/Paris"
    assert s.is_dev is True
    assert s.trust_proxy is True


@pytest.mark.parametrize(
    "key,value",
    [
        ("PORT", "abc"),
        ("RATE_LIMIT_MAX_REQUESTS", "0"),
        ("WHEEL_WIN_ODDS", "-5"),
        ("TIMEZONE", "Mars/Olympus"),
        ("TRUST_PROXY", "maybe"),
    ],
)
def test_bad_values_fail_fast(clean_env, key, value):
    clean_env.setenv(key, value)
    with pytest.raises(RuntimeError):
        Settings.load()
