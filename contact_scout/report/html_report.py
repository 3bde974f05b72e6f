# File: contact_scout/report/html_report.py
"""contact_scout.report.html_report: Генерация HTML-отчёта с помощью Jinja2."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional, Union

from jinja2 import Environment, FileSystemLoader, PackageLoader, select_autoescape

from contact_scout.aggregator import RunReport

TEMPLATE_NAME = "report.html.j2"


def _environment(template_dir: Optional[Union[Path, str]]) -> Environment:
    loader = (
        FileSystemLoader(str(template_dir))
        if template_dir is not None
        else PackageLoader("contact_scout", "templates")
    )
    return Environment(loader=loader, autoescape=select_autoescape(["html", "xml", "j2"]))


def render_html(
    report: RunReport,
    output_path: Union[Path, str],
    template_dir: Optional[Union[Path, str]] = None,
) -> Path:
    """Рендерит HTML-отчёт из шаблона и сохраняет его по указанному пути.

    Args:
        report: объект RunReport.
        output_path: путь к итоговому HTML-файлу.
        template_dir: директория с Jinja2-шаблонами; по умолчанию
            шаблон, поставляемый с пакетом.

    Returns:
        Path до сохранённого HTML-файла.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    template = _environment(template_dir).get_template(TEMPLATE_NAME)
    context: dict[str, Any] = {
        "counters": report.counters,
        "domains": report.domains,
    }

    output_path.write_text(template.render(**context), encoding="utf-8")
    return output_path
