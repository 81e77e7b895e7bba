from team_planner.config import Settings


def clean_settings(monkeypatch, **overrides) -> Settings:
    monkeypatch.delenv("ENVIRONMENT", raising=False)
    monkeypatch.delenv("DEBUG", raising=False)
    return Settings(_env_file=None, **overrides)


def test_error_details_hidden_when_environment_unset(monkeypatch):
    settings = clean_settings(monkeypatch)

    assert settings.environment == "production"
    assert settings.expose_error_details is False


def test_error_details_exposed_in_development(monkeypatch):
    assert clean_settings(monkeypatch, environment="development").expose_error_details is True


def test_error_details_exposed_in_debug(monkeypatch):
    assert clean_settings(monkeypatch, debug=True).expose_error_details is True


def test_cors_origins_are_split_and_trimmed(monkeypatch):
    settings = clean_settings(monkeypatch, allowed_origins=" http://a.test , http://b.test,")

    assert settings.cors_origins == ["http://a.test", "http://b.test"]
