# contact_scout/report/json_report.py
"""JSON-отчёт о прогоне: счётчики и результат по каждому домену."""
from pathlib import Path

from contact_scout.aggregator import RunReport


def render_json(report: RunReport, output_path: Path | str) -> Path:
    """
    Записывает RunReport в JSON (UTF-8, с отступами) и возвращает путь к файлу.

    >>> render_json(orchestrator.report(), "reports/run.json")  # doctest: +SKIP
    PosixPath('reports/run.json')
    """
    target = Path(output_path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(report.json(pretty=True) + "\n", encoding="utf-8")
    return target
