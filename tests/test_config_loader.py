import pytest

from deploywatch.core.exceptions import ConfigError
from deploywatch.adapters.config.loader import ConfigLoader, WatchSettings, find_settings_file


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in (
        "DEPLOYWATCH_SERVERLESS_BIN",
        "DEPLOYWATCH_STAGE",
        "DEPLOYWATCH_REGION",
        "DEPLOYWATCH_VERBOSE",
        "DEPLOYWATCH_USE_POLLING",
        "DEPLOYWATCH_MAX_PARALLEL",
    ):
        monkeypatch.delenv(key, raising=False)


def test_defaults():
    settings = ConfigLoader().load()

    assert settings == WatchSettings()
    assert settings.serverless_bin == "serverless"


def test_priority_cli_over_env_over_toml(tmp_path, monkeypatch):
    toml = tmp_path / "deploywatch.toml"
    toml.write_text(
        '[deploywatch]\nstage = "qa"\nregion = "eu-west-1"\nserverless-bin = "sls"\nmax_parallel = 4\n'
    )
    monkeypatch.setenv("DEPLOYWATCH_STAGE", "staging")
    monkeypatch.setenv("DEPLOYWATCH_USE_POLLING", "true")

    settings = ConfigLoader().load(
        toml_path=toml,
        cli_overrides={"stage": "dev", "region": None, "function": "hello"},
    )

    assert settings.stage == "dev"
    assert settings.region == "eu-west-1"
    assert settings.serverless_bin == "sls"
    assert settings.max_parallel == 4
    assert settings.use_polling is True
    assert settings.function == "hello"


def test_top_level_toml_keys(tmp_path):
    toml = tmp_path / "deploywatch.toml"
    toml.write_text('stage = "qa"\nunknown = 1\n')

    assert ConfigLoader().load(toml_path=toml, use_env=False).stage == "qa"


def test_env_integers(monkeypatch):
    monkeypatch.setenv("DEPLOYWATCH_MAX_PARALLEL", "1")

    assert ConfigLoader().load().max_parallel == 1


def test_invalid_toml(tmp_path):
    toml = tmp_path / "deploywatch.toml"
    toml.write_text("stage = \n")

    with pytest.raises(ConfigError, match="Failed to parse TOML"):
        ConfigLoader().load(toml_path=toml)


def test_invalid_max_parallel():
    with pytest.raises(ConfigError, match="max_parallel"):
        ConfigLoader().load(cli_overrides={"max_parallel": 0})


def test_deploy_options():
    settings = WatchSettings(stage="dev", verbose=True, function="hello")

    assert settings.deploy_options() == {
        "stage": "dev",
        "region": None,
        "config": None,
        "function": "hello",
        "verbose": True,
    }


def test_find_settings_file(tmp_path):
    assert find_settings_file(tmp_path) is None

    (tmp_path / "deploywatch.toml").write_text("")
    assert find_settings_file(tmp_path) == tmp_path / "deploywatch.toml"

    explicit = tmp_path / "other.toml"
    assert find_settings_file(tmp_path, explicit) == explicit
