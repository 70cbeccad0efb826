"""link_scout.report: сохранение отчётов проверки для CLI и тестов."""

from __future__ import annotations

from link_scout.report.json_report import render_json

__all__ = ["render_json"]
