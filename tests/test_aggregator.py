# File: tests/test_aggregator.py
import asyncio
import json

import pytest

from contact_scout.aggregator import AnalystCounters, DomainOutcome, aggregate_results
from contact_scout.report import render_html, render_json


@pytest.mark.asyncio()
async def test_concurrent_folds_are_not_lost():
    counters = AnalystCounters()
    outcomes = [DomainOutcome(domain=f"d{i}.com", url="", status="ok", phones=2, social_links=1) for i in range(50)]
    outcomes += [DomainOutcome(domain="x.com", url="", status="unreachable", phones=99)]
    outcomes += [DomainOutcome(domain="y.com", url="", status="timeout")]

    await asyncio.gather(*(counters.fold(o) for o in outcomes))

    assert counters.snapshot() == {
        "websites": 52,
        "reachable": 51,
        "unreachable": 1,
        "failed": 1,
        "phones": 100,
        "addresses": 0,
        "social_links": 50,
    }


@pytest.mark.asyncio()
async def test_reports_are_rendered(tmp_path):
    counters = AnalystCounters()
    outcomes = [
        DomainOutcome(domain="b.com", url="https://b.com", status="failed", error="boom <b>"),
        DomainOutcome(domain="a.com", url="https://a.com", status="ok", pages=3, phones=1),
    ]
    for outcome in outcomes:
        await counters.fold(outcome)
    report = aggregate_results(counters, outcomes)

    assert [d.domain for d in report.domains] == ["a.com", "b.com"]

    data = json.loads(render_json(report, tmp_path / "r" / "run.json").read_text(encoding="utf-8"))
    assert data["counters"]["websites"] == 2
    assert data["domains"][0]["pages"] == 3
    assert json.loads(report.json()) == data

    html = render_html(report, tmp_path / "run.html").read_text(encoding="utf-8")
    assert "a.com" in html
    assert "boom &lt;b&gt;" in html
