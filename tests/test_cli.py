"""Tests for the command line interface."""

import json

import httpx
import pytest
from click.testing import CliRunner

from promptpix import cli
from promptpix.config import Config, Endpoint
from promptpix.generators.http import HttpImageGenerator
from promptpix.preload import ImagePreloader

ENDPOINT = "https://gen.test/api/generate"
IMAGE_URL = "https://img.test/fox.png"


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "config.yaml"
    Config(endpoint=Endpoint(url=ENDPOINT)).save(path)
    return path


@pytest.fixture
def fake_service(monkeypatch):
    """Route the CLI's HTTP clients to an in-process handler."""
    service = {"reply": {"success": True, "imageUrl": IMAGE_URL}, "prompts": []}

    def handler(request):
        if request.method == "POST":
            service["prompts"].append(json.loads(request.content)["text"])
            return httpx.Response(200, json=service["reply"])
        return httpx.Response(200, content=b"\x89PNG", headers={"Content-Type": "image/png"})

    def build_clients(config):
        transport = httpx.MockTransport(handler)
        return (
            HttpImageGenerator(config.endpoint.url, client=httpx.AsyncClient(transport=transport)),
            ImagePreloader(client=httpx.AsyncClient(transport=transport)),
        )

    monkeypatch.setattr(cli, "build_clients", build_clients)
    return service


class TestGenerate:
    def test_prints_image_url(self, config_file, fake_service):
        result = CliRunner().invoke(cli.main, ["generate", "a", "red", "fox", "--config", str(config_file)])

        assert result.exit_code == 0, result.output
        assert "Generated artwork" in result.output
        assert IMAGE_URL in result.output
        assert fake_service["prompts"] == ["a red fox"]

    def test_await_preload_flag(self, config_file, fake_service):
        result = CliRunner().invoke(
            cli.main, ["generate", "a red fox", "--await-preload", "--config", str(config_file)]
        )

        assert result.exit_code == 0, result.output
        assert IMAGE_URL in result.output

    def test_reported_failure(self, config_file, fake_service):
        fake_service["reply"] = {"success": False, "error": "Content blocked"}

        result = CliRunner().invoke(cli.main, ["generate", "a red fox", "--config", str(config_file)])

        assert result.exit_code == 1
        assert "Content blocked" in result.output

    def test_missing_image_url(self, config_file, fake_service):
        fake_service["reply"] = {"success": True}

        result = CliRunner().invoke(cli.main, ["generate", "a red fox", "--config", str(config_file)])

        assert result.exit_code == 1
        assert "No image URL received" in result.output

    def test_blank_prompt_makes_no_request(self, config_file, fake_service):
        result = CliRunner().invoke(cli.main, ["generate", "   ", "--config", str(config_file)])

        assert result.exit_code == 1
        assert "Prompt is empty" in result.output
        assert fake_service["prompts"] == []

    def test_unconfigured_endpoint(self, tmp_path):
        result = CliRunner().invoke(cli.main, ["generate", "a red fox", "--config", str(tmp_path / "none.yaml")])

        assert result.exit_code == 1
        assert "Generation endpoint not configured" in result.output


class TestSetup:
    def test_writes_config(self, tmp_path):
        path = tmp_path / "config.yaml"
        result = CliRunner().invoke(cli.main, [
            "setup",
            "--endpoint", ENDPOINT,
            "--api-key", "secret",
            "--await-preload",
            "--config", str(path),
        ])

        assert result.exit_code == 0, result.output
        config = Config.load(path)
        assert config.endpoint.url == ENDPOINT
        assert config.endpoint.api_key == "secret"
        assert config.defaults.await_preload is True

    def test_check_config(self, config_file):
        result = CliRunner().invoke(cli.main, ["check-config", "--config", str(config_file)])

        assert result.exit_code == 0, result.output
        assert ENDPOINT in result.output

    def test_check_config_reports_issues(self, tmp_path):
        result = CliRunner().invoke(cli.main, ["check-config", "--config", str(tmp_path / "none.yaml")])

        assert result.exit_code == 1
        assert "PROMPTPIX_ENDPOINT" in result.output
