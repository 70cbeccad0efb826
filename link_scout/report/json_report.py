# link_scout/report/json_report.py

"""
Генерация JSON-отчёта для проекта LinkScout.

Сериализация ответа проверки (или списка ScanResult) в файл.
"""
import json
from pathlib import Path
from typing import Any


def render_json(data: Any, output_path: Path | str, *, pretty: bool = True) -> Path:
    """
    Сохраняет data в формате JSON по указанному пути.

    :param data: словарь CrawlReport.to_response() или список ScanResult.as_dict()
    :param output_path: путь к JSON-файлу
    :param pretty: отступ 2 пробела
    :return: Path сохранённого файла

    Пример:
    ```python
    from link_scout.report.json_report import render_json
    report_path = render_json(report.to_response(), 'reports/report.json')
    print(f"JSON report saved to: {report_path}")
    ```
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    with output.open('w', encoding='utf-8') as f:
        json.dump(data, f, ensure_ascii=False, indent=2 if pretty else None)

    return output
