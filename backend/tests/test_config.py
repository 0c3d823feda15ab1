import pytest

from stripe_relay.core.config import ConfigError, Settings


def test_secrets_read_from_environment(settings: Settings):
    assert settings.require_webhook_secret() == "whsec_test"
    assert settings.require_stripe_key() == "sk_test_dummy"
    assert settings.webhook_tolerance == 300


@pytest.mark.parametrize("value", [None, ""])
def test_missing_webhook_secret(value):
    with pytest.raises(ConfigError):
        Settings(stripe_webhook_secret=value).require_webhook_secret()


def test_missing_stripe_key():
    with pytest.raises(ConfigError):
        Settings(stripe_secret_key=None).require_stripe_key()


def test_origins_split_and_trimmed():
    s = Settings(allowed_origins="https://a.example.com, https://b.example.com,")
    assert s.origins == ["https://a.example.com", "https://b.example.com"]


def test_production_flag():
    assert Settings(env="production").is_production
    assert not Settings(env="test").is_production


def test_secret_not_leaked_in_repr(settings: Settings):
    assert "whsec_test" not in repr(settings)
