# File: focus_scout/report/__init__.py
"""focus_scout.report: сериализация результатов обхода, используемая CLI и тестами."""

from focus_scout.report.json_report import dump_json, render_json

__all__ = ["dump_json", "render_json"]
