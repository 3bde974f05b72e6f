# File: tests/test_cli.py
import csv
import json
import sys
from pathlib import Path

import pytest
from click.testing import CliRunner

import contact_scout
import contact_scout.orchestrator as orchestrator_module
from contact_scout import __version__
from contact_scout.cli import cli
from contact_scout.logger import init_logging
from contact_scout.orchestrator import DomainOrchestrator

from fakes import FakeBrowser

cli_module = sys.modules["contact_scout.cli"]


@pytest.fixture()
def runner():
    yield CliRunner()
    # the CLI binds the log handler to the runner's captured stdout
    init_logging()


@pytest.fixture()
def config_file(tmp_path: Path) -> Path:
    path = tmp_path / "scout.yaml"
    path.write_text("default_scheme: http\nconcurrency: 2\n", encoding="utf-8")
    return path


@pytest.fixture()
def roster_file(tmp_path: Path) -> Path:
    path = tmp_path / "websites.csv"
    path.write_text(
        "domain,company_commercial_name\n"
        "timent.com,Timent\n"
        "down.example,Down\n"
        ",Nameless\n",
        encoding="utf-8",
    )
    return path


@pytest.fixture()
def fake_run(monkeypatch, timent_web):
    """Replace the Playwright-backed run with an orchestrator over the in-memory web."""
    seen = {}

    async def fake_is_reachable(session, url):
        return "down" not in url

    async def fake_run_roster(cfg, roster):
        seen["config"] = cfg
        orchestrator = DomainOrchestrator(cfg, FakeBrowser(timent_web))
        counters = await orchestrator.run_all(roster)
        return orchestrator, counters

    monkeypatch.setattr(orchestrator_module, "is_reachable", fake_is_reachable)
    monkeypatch.setattr(cli_module, "run_roster", fake_run_roster)
    return seen


def _read_rows(path: Path) -> list[dict]:
    with path.open(newline="", encoding="utf-8") as fh:
        return list(csv.DictReader(fh))


def test_version(runner):
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert f"ContactScout, version {__version__}" in result.output


def test_config_command_prints_effective_config(runner, config_file):
    result = runner.invoke(cli, ["--config", str(config_file), "config"])
    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert data["default_scheme"] == "http"
    assert data["concurrency"] == 2


def test_invalid_config_exits_with_error(runner, tmp_path):
    bad = tmp_path / "bad.yaml"
    bad.write_text("concurrency: 0\n", encoding="utf-8")
    result = runner.invoke(cli, ["--config", str(bad), "config"])
    assert result.exit_code == 1


def test_run_writes_merged_dataset_and_reports(runner, config_file, roster_file, tmp_path, fake_run):
    output = tmp_path / "out" / "companies.csv"
    json_report = tmp_path / "run.json"
    html_report = tmp_path / "run.html"
    result = runner.invoke(
        cli,
        [
            "--config", str(config_file),
            "run", str(roster_file),
            "--output", str(output),
            "--json", str(json_report),
            "--html", str(html_report),
        ],
    )
    assert result.exit_code == 0, result.output
    assert "Websites: 2" in result.output

    rows = {row["domain"]: row for row in _read_rows(output)}
    assert set(rows) == {"timent.com", "down.example"}
    assert rows["timent.com"]["company_commercial_name"] == "Timent"
    assert rows["timent.com"]["phone_numbers"] == "(415) 626-4474|+1 415 626 4474"
    assert rows["timent.com"]["social_media_links"] == "https://facebook.com/timent"
    assert rows["down.example"]["phone_numbers"] == ""

    report = json.loads(json_report.read_text(encoding="utf-8"))
    assert report["counters"]["unreachable"] == 1
    assert [d["domain"] for d in report["domains"]] == ["down.example", "timent.com"]
    assert "timent.com" in html_report.read_text(encoding="utf-8")


def test_run_keeps_existing_values(runner, config_file, roster_file, tmp_path, fake_run):
    existing = tmp_path / "existing.csv"
    existing.write_text(
        "domain,phone_numbers,industry\n"
        "TIMENT.com,000-000-0000,software\n",
        encoding="utf-8",
    )
    output = tmp_path / "companies.csv"
    result = runner.invoke(
        cli,
        [
            "--config", str(config_file),
            "run", str(roster_file),
            "--output", str(output),
            "--existing", str(existing),
        ],
    )
    assert result.exit_code == 0, result.output

    rows = _read_rows(output)
    assert len(rows) == 1
    assert rows[0]["phone_numbers"] == "000-000-0000"
    assert rows[0]["industry"] == "software"
    assert rows[0]["physical_addresses"] == "500 Market St, San Francisco, CA 94105|Timent Inc. 500 Market St"


def test_run_options_override_config(runner, config_file, roster_file, tmp_path, fake_run):
    result = runner.invoke(
        cli,
        [
            "--config", str(config_file),
            "run", str(roster_file),
            "--output", str(tmp_path / "o.csv"),
            "--concurrency", "1",
            "--policy", "allow",
        ],
    )
    assert result.exit_code == 0, result.output
    assert fake_run["config"].concurrency == 1
    assert fake_run["config"].route_policy == "allow"


def test_run_rejects_roster_without_domain_column(runner, config_file, tmp_path, fake_run):
    roster = tmp_path / "bad.csv"
    roster.write_text("site\nacme.com\n", encoding="utf-8")
    result = runner.invoke(
        cli,
        ["--config", str(config_file), "run", str(roster), "--output", str(tmp_path / "o.csv")],
    )
    assert result.exit_code == 1
    assert "config" not in fake_run


def test_merge_command(runner, tmp_path):
    existing = tmp_path / "existing.csv"
    existing.write_text("domain,phone_numbers\na.com,\nb.com,111-222-3333\n", encoding="utf-8")
    updates = tmp_path / "updates.csv"
    updates.write_text(
        "domain,phone_numbers\na.com,999-888-7777\nb.com,999-888-7777\nc.com,555-555-5555\n",
        encoding="utf-8",
    )
    output = tmp_path / "merged.csv"
    result = runner.invoke(cli, ["merge", str(existing), str(updates), "--output", str(output)])
    assert result.exit_code == 0, result.output

    rows = {row["domain"]: row["phone_numbers"] for row in _read_rows(output)}
    assert rows == {"a.com": "999-888-7777", "b.com": "111-222-3333"}


def test_cli_submodule_is_not_shadowed():
    assert contact_scout.cli is cli_module
    assert callable(cli_module.main)
    assert cli_module.cli is cli
