"""Тесты для CLI (`focus_scout.cli`) с использованием click.testing.CliRunner.
Проверяют команды `crawl`, `config`, `--version`, а также обработку ошибок.
"""
import importlib
import json

import pytest
from click.testing import CliRunner
from focus_scout.cli import cli
from focus_scout.crawler.models import CrawlResult, CrawlState, PageData
from focus_scout.logger import configure

# the package re-exports the click group under the same name as the module
cli_module = importlib.import_module("focus_scout.cli")


@pytest.fixture(autouse=True)
def patch_start_crawl(monkeypatch):
    """Патчим start_crawl: возвращаем фиктивный результат и запоминаем конфиг."""
    seen = {}

    async def fake_crawl(cfg):
        seen["config"] = cfg
        return CrawlResult(
            state=CrawlState.BUDGET_REACHED,
            pages=[PageData(url="https://example.com/", score=0)],
        )

    monkeypatch.setattr(cli_module, "start_crawl", fake_crawl)
    return seen


@pytest.fixture(autouse=True)
def restore_logging():
    yield
    # CliRunner closes the stream the CLI attached its handler to
    configure()


def write_config(tmp_path, **data):
    cfg_file = tmp_path / "config.json"
    cfg_file.write_text(json.dumps(data), encoding="utf-8")
    return cfg_file


def test_version_option():
    runner = CliRunner()
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "FocusScout" in result.output


def test_crawl_stdout(tmp_path, patch_start_crawl):
    runner = CliRunner()
    result = runner.invoke(
        cli,
        ["crawl", "-u", "https://example.com/", "-d", str(tmp_path / "pages"),
         "-q", "Buy Widget", "-q", "gadget", "-m", "7", "--trace"],
    )
    assert result.exit_code == 0, result.output
    output = json.loads(result.output)
    assert output["state"] == "budget_reached"
    assert output["pages"][0]["url"] == "https://example.com/"

    cfg = patch_start_crawl["config"]
    assert cfg.query_terms == ("buy", "widget", "gadget")
    assert cfg.max_pages == 7
    assert cfg.trace is True


def test_crawl_requires_url(tmp_path):
    runner = CliRunner()
    result = runner.invoke(cli, ["crawl", "-d", str(tmp_path)])
    assert result.exit_code == 2
    assert "start_url" in result.output


def test_options_override_config_file(tmp_path, patch_start_crawl):
    cfg_file = write_config(
        tmp_path,
        start_url="https://example.com/",
        download_path=str(tmp_path / "pages"),
        query=["alpha"],
        max_pages=3,
    )
    runner = CliRunner()
    result = runner.invoke(cli, ["--config", str(cfg_file), "crawl", "-m", "9", "--no-https-upgrade"])
    assert result.exit_code == 0, result.output

    cfg = patch_start_crawl["config"]
    assert cfg.max_pages == 9
    assert cfg.query_terms == ("alpha",)
    assert cfg.force_https is False


def test_crawl_json_file(tmp_path):
    out = tmp_path / "out.json"
    runner = CliRunner()
    result = runner.invoke(
        cli, ["crawl", "-u", "https://example.com/", "-d", str(tmp_path), "--json", str(out)]
    )
    assert result.exit_code == 0
    data = json.loads(out.read_text(encoding="utf-8"))
    assert data["pages"][0]["url"] == "https://example.com/"


def test_crawl_error_exits_with_message(monkeypatch, tmp_path):
    async def broken(cfg):
        raise RuntimeError("boom")

    monkeypatch.setattr(cli_module, "start_crawl", broken)
    runner = CliRunner()
    result = runner.invoke(cli, ["crawl", "-u", "https://example.com/", "-d", str(tmp_path)])
    assert result.exit_code == 1
    assert "boom" in result.output


def test_show_config(tmp_path):
    cfg_file = write_config(tmp_path, start_url="https://example.com/", download_path="pages")
    runner = CliRunner()
    result = runner.invoke(cli, ["--config", str(cfg_file), "config"])
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["start_url"] == "https://example.com/"
    assert data["max_pages"] == 50
