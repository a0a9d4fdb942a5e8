import pytest

from paynow_methods import ConfigError, GatewayConfig, GatewayParameters, load_gateway_config
from paynow_methods.core.config import PRODUCTION_API_URL, SANDBOX_API_URL
from paynow_methods.core.environment import build_environment, load_env_file


def test_defaults_from_empty_mapping():
    config = GatewayConfig.from_mapping({})

    assert config.is_configured() is False
    assert config.is_blik_active() is False
    assert config.api_url == PRODUCTION_API_URL
    assert config.active is True
    assert config.timeout_seconds == 30.0


def test_sandbox_switches_default_url():
    config = GatewayConfig.from_mapping({"PAYNOW_SANDBOX": "true"})
    assert config.api_url == SANDBOX_API_URL


def test_explicit_url_is_normalised():
    config = GatewayConfig.from_mapping({"PAYNOW_API_URL": " https://paynow.test/ "})
    assert config.api_url == "https://paynow.test"


def test_configured_needs_both_keys():
    assert GatewayConfig.from_mapping({"PAYNOW_API_KEY": "a"}).is_configured() is False
    assert GatewayConfig.from_mapping(
        {"PAYNOW_API_KEY": "a", "PAYNOW_SIGNATURE_KEY": "b"}
    ).is_configured() is True


@pytest.mark.parametrize(
    "values",
    [
        {"PAYNOW_BLIK_ACTIVE": "maybe"},
        {"PAYNOW_TIMEOUT_SECONDS": "soon"},
        {"PAYNOW_TIMEOUT_SECONDS": "0"},
        {"PAYNOW_API_URL": "ftp://paynow.test"},
    ],
)
def test_invalid_values_raise(values):
    with pytest.raises(ConfigError):
        GatewayConfig.from_mapping(values)


def test_env_file_fills_missing_keys_only(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text(
        "# paynow\n"
        "PAYNOW_API_KEY=from-file\n"
        "export PAYNOW_SIGNATURE_KEY='quoted'\n"
        "PAYNOW_BLIK_ACTIVE=1\n",
        encoding="utf-8",
    )

    config = load_gateway_config(
        env_file=str(env_file),
        base={"PAYNOW_API_KEY": "from-env"},
    )

    assert config.api_key == "from-env"
    assert config.signature_key == "quoted"
    assert config.is_blik_active() is True


def test_keyword_parameters_win(tmp_path):
    config = load_gateway_config(
        env_file=None,
        base={"PAYNOW_API_KEY": "from-env", "PAYNOW_CARD_ACTIVE": "false"},
        parameters=GatewayParameters(card_active=True),
        api_key="explicit",
        timeout_seconds=5,
    )

    assert config.api_key == "explicit"
    assert config.card_active is True
    assert config.timeout_seconds == 5.0


def test_missing_env_file_is_ignored(tmp_path):
    environment = build_environment(env_file=str(tmp_path / "missing.env"), base={"A": "1"})
    assert dict(environment.variables) == {"A": "1"}


def test_load_env_file_preserves_existing(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("PAYNOW_API_KEY=file\nPAYNOW_SANDBOX=1\n", encoding="utf-8")
    target = {"PAYNOW_API_KEY": "environ"}

    merged = load_env_file(str(env_file), environ=target)

    assert merged == {"PAYNOW_API_KEY": "environ", "PAYNOW_SANDBOX": "1"}
    assert target["PAYNOW_SANDBOX"] == "1"


def test_dotenv_only_contributes_gateway_keys(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text(
        "DATABASE_URL=postgres://shop\n"
        "PAYNOW_API_KEY=from-file\n"
        "=orphan\n"
        "not an assignment\n",
        encoding="utf-8",
    )

    environment = build_environment(env_file=str(env_file), base={})

    assert dict(environment.variables) == {"PAYNOW_API_KEY": "from-file"}


def test_environment_records_where_each_gateway_key_came_from(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text(
        "PAYNOW_API_KEY=file\nPAYNOW_SIGNATURE_KEY=file\nPAYNOW_SANDBOX=true\n",
        encoding="utf-8",
    )

    environment = build_environment(
        env_file=str(env_file),
        base={"PAYNOW_SIGNATURE_KEY": "environ", "HOME": "/root"},
        overrides={"PAYNOW_SANDBOX": "false"},
    )

    assert environment.source_of("PAYNOW_API_KEY") == "dotenv"
    assert environment.source_of("PAYNOW_SIGNATURE_KEY") == "environ"
    assert environment.source_of("PAYNOW_SANDBOX") == "override"
    assert environment.source_of("PAYNOW_BLIK_ACTIVE") is None
    assert environment.source_of("HOME") is None
    assert environment.gateway_settings() == {
        "PAYNOW_API_KEY": "file",
        "PAYNOW_SIGNATURE_KEY": "environ",
        "PAYNOW_SANDBOX": "false",
    }
