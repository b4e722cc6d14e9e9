from booking_app.config import Settings


def test_flags_read_from_environment(monkeypatch):
    monkeypatch.setenv("SOFT_FAILURES", "false")
    monkeypatch.setenv("TRUST_CLIENT_IDS", "0")
    monkeypatch.setenv("ACCESS_TOKEN_EXPIRE_MINUTES", "30")

    config = Settings(_env_file=None)
    assert config.SOFT_FAILURES is False
    assert config.TRUST_CLIENT_IDS is False
    assert config.ACCESS_TOKEN_EXPIRE_MINUTES == 30
    assert config.REQUIRE_EXISTING_USER is True


def test_cors_origins_split(monkeypatch):
    monkeypatch.setenv("CORS_ORIGINS", "http://localhost:3000, https://book.example.com,")
    config = Settings(_env_file=None)
    assert config.cors_origins == ["http://localhost:3000", "https://book.example.com"]
