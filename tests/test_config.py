"""
Tests for configuration loading and client construction from settings.
"""

import pytest

from tests.conftest import API_KEY, SECRET_KEY
from wiopayments import create_payment_client
from wiopayments.core.config import ConfigError, WioPaymentsConfig, load_config
from wiopayments.core.environment import build_environment, parse_env_file

BASE = {
    "WIOPAYMENTS_API_KEY": API_KEY,
    "WIOPAYMENTS_SECRET_KEY": SECRET_KEY,
}


class TestEnvFile:
    """Tests for .env parsing."""

    def test_parses_pairs(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text(
            "# comment\n"
            "\n"
            "WIOPAYMENTS_API_KEY=plain\n"
            "export WIOPAYMENTS_SECRET_KEY='quoted value'\n"
            'WIOPAYMENTS_BASE_URL="https://gw.test/api/"\n'
            "no equals sign\n"
        )
        assert parse_env_file(env_file) == {
            "WIOPAYMENTS_API_KEY": "plain",
            "WIOPAYMENTS_SECRET_KEY": "quoted value",
            "WIOPAYMENTS_BASE_URL": "https://gw.test/api/",
        }

    def test_missing_file(self, tmp_path):
        assert parse_env_file(tmp_path / "absent.env") == {}


class TestBuildEnvironment:
    """Tests for layering settings."""

    def test_layers(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text(
            "WIOPAYMENTS_API_KEY=from_file\nWIOPAYMENTS_DEFAULT_CURRENCY=EUR\n"
        )
        environment = build_environment(
            env_file=str(env_file),
            base={"WIOPAYMENTS_API_KEY": "from_base", "PATH": "/bin"},
            overrides={"WIOPAYMENTS_DEFAULT_CURRENCY": "GBP"},
        )
        assert environment.get("WIOPAYMENTS_API_KEY") == "from_base"
        assert environment.get("WIOPAYMENTS_DEFAULT_CURRENCY") == "GBP"
        assert environment.get("PATH") is None

    def test_reads_process_environment(self, monkeypatch):
        monkeypatch.setenv("WIOPAYMENTS_API_KEY", "from_process")
        environment = build_environment(env_file=None)
        assert environment.get("WIOPAYMENTS_API_KEY") == "from_process"


class TestWioPaymentsConfig:
    """Tests for WioPaymentsConfig."""

    def test_defaults(self):
        config = WioPaymentsConfig.from_mapping(BASE)
        assert config.api_key == API_KEY
        assert config.secret_key == SECRET_KEY
        assert config.base_url == "https://gw.wiopayments.com/api/"
        assert config.default_currency == "USD"
        assert config.webhook_tolerance == 300
        assert config.logging_enabled is False

    def test_all_fields(self):
        config = WioPaymentsConfig.from_mapping(
            {
                **BASE,
                "WIOPAYMENTS_BASE_URL": "https://sandbox.test/",
                "WIOPAYMENTS_DEFAULT_CURRENCY": "eur",
                "WIOPAYMENTS_WEBHOOK_TOLERANCE": "120",
                "WIOPAYMENTS_LOGGING_ENABLED": "yes",
            }
        )
        assert config.base_url == "https://sandbox.test/"
        assert config.default_currency == "EUR"
        assert config.webhook_tolerance == 120
        assert config.logging_enabled is True

    @pytest.mark.parametrize("missing", ["WIOPAYMENTS_API_KEY", "WIOPAYMENTS_SECRET_KEY"])
    def test_missing_credentials(self, missing):
        values = dict(BASE)
        del values[missing]
        with pytest.raises(ConfigError, match=missing):
            WioPaymentsConfig.from_mapping(values)

    @pytest.mark.parametrize(
        "key,value",
        [
            ("WIOPAYMENTS_DEFAULT_CURRENCY", "XYZ"),
            ("WIOPAYMENTS_WEBHOOK_TOLERANCE", "five"),
            ("WIOPAYMENTS_WEBHOOK_TOLERANCE", "-1"),
            ("WIOPAYMENTS_LOGGING_ENABLED", "maybe"),
        ],
    )
    def test_invalid_values(self, key, value):
        with pytest.raises(ConfigError):
            WioPaymentsConfig.from_mapping({**BASE, key: value})

    def test_repr_hides_credentials(self):
        config = WioPaymentsConfig.from_mapping(BASE)
        assert SECRET_KEY not in repr(config)
        assert API_KEY not in repr(config)

    def test_load_config_keyword_parameters_win(self):
        config = load_config(
            env_file=None,
            base=BASE,
            overrides={"WIOPAYMENTS_WEBHOOK_TOLERANCE": "10"},
            webhook_tolerance=20,
            logging_enabled=True,
        )
        assert config.webhook_tolerance == 20
        assert config.logging_enabled is True


class TestCreatePaymentClient:
    """Tests for the create_payment_client helper."""

    def test_from_config(self, session):
        config = WioPaymentsConfig(
            api_key=API_KEY,
            secret_key=SECRET_KEY,
            base_url="https://sandbox.test/api",
            default_currency="EUR",
            webhook_tolerance=60,
            logging_enabled=True,
        )
        client = create_payment_client(config=config, session=session)
        assert client.http.base_url == "https://sandbox.test/api"
        assert client.http.session is session
        assert client.http.log_requests is True
        assert client.default_currency == "EUR"
        assert client.webhook_tolerance == 60

    def test_from_parameters(self):
        client = create_payment_client(
            env_file=None, base={}, api_key=API_KEY, secret_key=SECRET_KEY
        )
        assert client.default_currency == "USD"

    def test_rejects_config_and_parameters(self):
        config = WioPaymentsConfig(api_key=API_KEY, secret_key=SECRET_KEY)
        with pytest.raises(ValueError):
            create_payment_client(config=config, api_key=API_KEY)

    def test_missing_settings(self):
        with pytest.raises(ConfigError):
            create_payment_client(env_file=None, base={})
