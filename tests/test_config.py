"""Tests for config loading: validation, defaults, case-insensitive keys, path resolution."""

import pytest

from portwatch.config.settings import (
    CONFIG_ENV_VAR,
    ConfigError,
    PortTarget,
    load_config,
    parse_config,
    read_config,
)


class TestParseConfig:
    def test_parses_server_and_targets(self, raw_config):
        cfg = parse_config(raw_config)
        assert cfg.server.port == 3000
        assert cfg.server.url == "status"
        assert cfg.server.header_name == "X-Secret"
        assert cfg.server.secret == "s3cret"
        assert set(cfg.targets) == {PortTarget("http", 80), PortTarget("nothing", 9999)}

    def test_defaults_applied(self, raw_config):
        cfg = parse_config(raw_config)
        assert cfg.interval_sec == 5.0
        assert cfg.timeout_sec == 1.0
        assert cfg.server.host == "0.0.0.0"

    def test_keys_are_case_insensitive(self, raw_config):
        raw_config["server"] = {
            "PORT": 8080,
            "Url": "health",
            "HEADERSECRETE": "X-Token",
            "Secrete": "abc",
        }
        cfg = parse_config(raw_config)
        assert cfg.server.port == 8080
        assert cfg.server.header_name == "X-Token"
        assert cfg.server.secret == "abc"

    def test_integer_port_keys_accepted(self, raw_config):
        raw_config["ports"] = {22: "ssh"}
        cfg = parse_config(raw_config)
        assert cfg.targets == (PortTarget("ssh", 22),)

    def test_monitor_overrides(self, raw_config):
        raw_config["monitor"] = {"interval_sec": 0.5, "timeout_sec": 0.25}
        cfg = parse_config(raw_config)
        assert cfg.interval_sec == 0.5
        assert cfg.timeout_sec == 0.25

    @pytest.mark.parametrize("url,route", [("status", "/status"), ("/status/", "/status"), ("", "/")])
    def test_route_path(self, raw_config, url, route):
        raw_config["server"]["url"] = url
        assert parse_config(raw_config).server.route_path == route

    def test_empty_ports_allowed(self, raw_config):
        raw_config["ports"] = {}
        assert parse_config(raw_config).targets == ()

    def test_duplicate_names_kept_with_warning(self, raw_config, caplog):
        raw_config["ports"] = {"80": "web", "8080": "web"}
        cfg = parse_config(raw_config)
        assert len(cfg.targets) == 2
        assert "share the name" in caplog.text


class TestParseConfigErrors:
    @pytest.mark.parametrize("key", ["headerSecrete", "secrete", "port"])
    def test_missing_required_server_key(self, raw_config, key):
        del raw_config["server"][key]
        with pytest.raises(ConfigError):
            parse_config(raw_config)

    def test_empty_secret_rejected(self, raw_config):
        raw_config["server"]["secrete"] = ""
        with pytest.raises(ConfigError, match="secrete"):
            parse_config(raw_config)

    @pytest.mark.parametrize("port", ["0", "70000", "http", "-1"])
    def test_bad_target_port(self, raw_config, port):
        raw_config["ports"] = {port: "x"}
        with pytest.raises(ConfigError):
            parse_config(raw_config)

    def test_missing_target_name(self, raw_config):
        raw_config["ports"] = {"80": None}
        with pytest.raises(ConfigError, match="display name"):
            parse_config(raw_config)

    def test_ports_not_mapping(self, raw_config):
        raw_config["ports"] = ["80", "443"]
        with pytest.raises(ConfigError):
            parse_config(raw_config)

    def test_non_positive_interval(self, raw_config):
        raw_config["monitor"] = {"interval_sec": 0}
        with pytest.raises(ConfigError, match="interval_sec"):
            parse_config(raw_config)


class TestLoadConfig:
    def test_load_from_explicit_path(self, write_config, raw_config):
        path = write_config(raw_config)
        cfg = load_config(str(path))
        assert cfg.server.port == 3000
        assert len(cfg.targets) == 2

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            load_config(str(tmp_path / "nope.yaml"))

    def test_unparsable_yaml(self, write_config):
        path = write_config("server: [unclosed\n")
        with pytest.raises(ConfigError, match="cannot parse"):
            read_config(str(path))

    def test_top_level_not_mapping(self, write_config):
        path = write_config("- a\n- b\n")
        with pytest.raises(ConfigError, match="mapping"):
            read_config(str(path))

    def test_env_var_path(self, write_config, raw_config, monkeypatch):
        path = write_config(raw_config, name="from_env.yaml")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(path))
        _, resolved = read_config()
        assert resolved == str(path.resolve())

    def test_default_search_in_cwd(self, write_config, raw_config, monkeypatch, tmp_path):
        write_config(raw_config)
        monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
        monkeypatch.chdir(tmp_path)
        _, resolved = read_config()
        assert resolved == str((tmp_path / "config.yaml").resolve())

    def test_no_config_anywhere(self, monkeypatch, tmp_path):
        monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
        monkeypatch.chdir(tmp_path)
        with pytest.raises(ConfigError, match="not found"):
            read_config()

    def test_example_config_is_valid(self):
        from pathlib import Path

        example = Path(__file__).resolve().parent.parent / "config" / "config.yaml.example"
        cfg = load_config(str(example))
        assert cfg.server.route_path == "/status"
        assert cfg.targets


class TestEmptySections:
    def test_empty_monitor_section_uses_defaults(self, write_config):
        path = write_config(
            "server:\n"
            "  port: \"3000\"\n"
            "  headerSecrete: X-Secret\n"
            "  secrete: s3cret\n"
            "monitor:\n"
            "#  interval_sec: 5\n"
            "ports:\n"
            "  \"80\": http\n"
        )
        cfg = load_config(str(path))
        assert cfg.interval_sec == 5.0
        assert cfg.timeout_sec == 1.0

    def test_empty_ports_section_is_no_targets(self, raw_config):
        raw_config["ports"] = None
        assert parse_config(raw_config).targets == ()
