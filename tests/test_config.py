"""Tests for configuration loading."""

import yaml

from promptpix.config import Config, Defaults, Endpoint


class TestConfig:
    def test_defaults_without_file(self, tmp_path):
        config = Config.load(tmp_path / "missing.yaml")

        assert config.endpoint.url == ""
        assert config.endpoint.timeout is None
        assert config.defaults.await_preload is False

    def test_save_and_load(self, tmp_path):
        path = tmp_path / "nested" / "config.yaml"
        config = Config(
            endpoint=Endpoint(url="https://gen.test/api", api_key="secret", timeout=30.0),
            defaults=Defaults(await_preload=True),
        )
        config.save(path)

        loaded = Config.load(path)
        assert loaded.endpoint.url == "https://gen.test/api"
        assert loaded.endpoint.api_key == "secret"
        assert loaded.endpoint.timeout == 30.0
        assert loaded.defaults.await_preload is True

    def test_empty_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("")

        assert Config.load(path).endpoint.url == ""

    def test_env_takes_precedence(self, tmp_path, monkeypatch):
        path = tmp_path / "config.yaml"
        path.write_text(yaml.dump({"endpoint": {"url": "https://file.test", "api_key": "file-key"}}))
        monkeypatch.setenv("PROMPTPIX_ENDPOINT", "https://env.test")

        config = Config.load(path)
        assert config.endpoint.url == "https://env.test"
        assert config.endpoint.api_key == "file-key"


class TestValidate:
    def test_missing_endpoint(self):
        issues = Config().validate()
        assert issues == ["Generation endpoint not configured (PROMPTPIX_ENDPOINT)"]

    def test_non_http_endpoint(self):
        config = Config(endpoint=Endpoint(url="ftp://gen.test"))
        assert "not an http(s) URL" in config.validate()[0]

    def test_bad_timeout(self):
        config = Config(endpoint=Endpoint(url="https://gen.test", timeout=0))
        assert config.validate() == ["Endpoint timeout must be positive"]

    def test_valid(self):
        config = Config(endpoint=Endpoint(url="https://gen.test"))
        assert config.validate() == []


class TestMalformedConfig:
    def test_null_sections(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("endpoint:\ndefaults:\n")

        config = Config.load(path)
        assert config.endpoint.url == ""
        assert config.defaults.await_preload is False

    def test_string_timeout_is_reported(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(yaml.dump({"endpoint": {"url": "https://gen.test", "timeout": "30"}}))

        issues = Config.load(path).validate()
        assert issues == ["Endpoint timeout must be a number of seconds, got '30'"]

    def test_integer_timeout_is_valid(self):
        config = Config(endpoint=Endpoint(url="https://gen.test", timeout=30))
        assert config.validate() == []
