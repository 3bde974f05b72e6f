# File: contact_scout/report/__init__.py
"""contact_scout.report: генерация отчётов о прогоне (JSON и HTML)."""

from __future__ import annotations

from .html_report import render_html
from .json_report import render_json

__all__ = ["render_json", "render_html"]
