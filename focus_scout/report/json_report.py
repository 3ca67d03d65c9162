# focus_scout/report/json_report.py

"""
Генерация JSON-отчёта для проекта FocusScout.

Сериализация объекта CrawlResult в строку или файл.
"""
import json
from pathlib import Path

from focus_scout.crawler.models import CrawlResult


def dump_json(result: CrawlResult, *, pretty: bool = False) -> str:
    """Возвращает JSON-представление результата обхода."""
    return json.dumps(result.as_dict(), ensure_ascii=False, indent=2 if pretty else None)


def render_json(result: CrawlResult, output_path: Path | str, *, pretty: bool = True) -> Path:
    """
    Сохраняет результат обхода в формате JSON по указанному пути.

    :param result: объект CrawlResult
    :param output_path: путь к JSON-файлу
    :param pretty: отступ 2 пробела
    :return: Path сохранённого файла

    Пример:
    ```python
    from focus_scout.report.json_report import render_json
    report_path = render_json(result, 'reports/crawl.json')
    print(f"JSON report saved to: {report_path}")
    ```
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    with output.open('w', encoding='utf-8') as f:
        f.write(dump_json(result, pretty=pretty))

    return output
