# === FILE: link_scout/cli.py ===
#!/usr/bin/env python3
"""
Точка входа для запуска LinkScout через командную строку.

Команды:
  check URL   Проверить один сайт и вывести/сохранить отчёт о битых страницах
  scan-all    Проверить все сайты из секции ``sites`` конфига
  config      Показать текущую конфигурацию

Общие опции:
  --config PATH       Путь к YAML/JSON-конфигу (default: configs/default.yaml, если есть)
  --log-level LEVEL   Уровень логирования (DEBUG, INFO, ...)
  --log-file PATH     Файл для логов (stderr, если не указан)
  --log-format FORMAT Формат логирования (e.g. "%(asctime)s %(levelname)s %(message)s")

Опции check / scan-all:
  --json PATH         Сохранить JSON-отчёт в файл
  --pretty            Преформатировать JSON-вывод (отступ 2)
  --scan-timeout SEC  Таймаут всей проверки (секунд)

Дополнительно:
  --version, -v       Показать версию LinkScout

Пример:
  link-scout --config configs/default.yaml check https://example.com/en/ --pretty
"""
import asyncio
import json
import sys
from pathlib import Path
from typing import Any, Awaitable, Optional, TypeVar

import click

from link_scout import __version__
from link_scout.config import load_config
from link_scout.engine import InMemorySiteStore, crawl_site, scan_all
from link_scout.logger import init_logging
from link_scout.report.json_report import render_json

CONTEXT_SETTINGS = dict(help_option_names=["--help"])

_T = TypeVar("_T")


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


def _run(coro: Awaitable[_T], scan_timeout: Optional[float]) -> _T:
    if scan_timeout:
        return asyncio.run(asyncio.wait_for(coro, timeout=scan_timeout))
    return asyncio.run(coro)


def _emit(data: Any, json_output: Optional[Path], pretty: bool) -> None:
    if json_output:
        try:
            saved = render_json(data, json_output, pretty=pretty)
        except OSError as e:
            print_error(f'Ошибка при сохранении JSON: {e}')
        click.echo(f'JSON report: {saved}')
        return
    click.echo(json.dumps(data, ensure_ascii=False, indent=2 if pretty else None))


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='LinkScout, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Путь к файлу конфигурации YAML/JSON.'
)
@click.option(
    '--log-level', 'log_level',
    default='INFO', show_default=True,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
    help='Уровень логирования'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Путь к файлу логов (stderr, если не указан)'
)
@click.option(
    '--log-format', 'log_format',
    default='%(asctime)s %(levelname)s %(message)s',
    show_default=True,
    help='Строка формата для логов'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """Группа команд LinkScout CLI."""
    init_logging(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format
    )
    try:
        cfg = load_config(config_path)
    except Exception as e:
        print_error(f'Ошибка загрузки конфигурации: {e}')
    ctx.ensure_object(dict)
    ctx.obj['config'] = cfg


@cli.command('check', context_settings=CONTEXT_SETTINGS)
@click.argument('url')
@click.option(
    '--json', '-j', 'json_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Сохранить JSON-отчёт в файл'
)
@click.option('--pretty', is_flag=True, help='Преформатировать JSON-вывод (отступ 2)')
@click.option(
    '--scan-timeout', 'scan_timeout',
    type=float,
    default=None,
    help='Таймаут всей проверки (секунд)'
)
@click.pass_context
def check(ctx, url, json_output, pretty, scan_timeout):
    """Проверить сайт URL на битые страницы."""
    cfg = ctx.obj['config']
    try:
        report = _run(crawl_site(url, cfg), scan_timeout)
    except asyncio.TimeoutError:
        print_error(f'Проверка не завершена за {scan_timeout} секунд')
    if not report.success:
        click.secho(f'Ошибка при сканировании: {report.message}', fg='red', err=True)
        _emit(report.to_response(), json_output, pretty)
        sys.exit(1)
    _emit(report.to_response(), json_output, pretty)


@cli.command('scan-all', context_settings=CONTEXT_SETTINGS)
@click.option(
    '--json', '-j', 'json_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Сохранить JSON-отчёт в файл'
)
@click.option('--pretty', is_flag=True, help='Преформатировать JSON-вывод (отступ 2)')
@click.option(
    '--scan-timeout', 'scan_timeout',
    type=float,
    default=None,
    help='Таймаут всей проверки (секунд)'
)
@click.pass_context
def scan_all_cmd(ctx, json_output, pretty, scan_timeout):
    """Проверить все сайты из конфигурации."""
    cfg = ctx.obj['config']
    store = InMemorySiteStore(cfg.sites)
    sites = store.list_sites()
    if not sites:
        click.echo('No URLs registered')
        return
    try:
        results = _run(scan_all(sites, cfg, store=store), scan_timeout)
    except asyncio.TimeoutError:
        print_error(f'Проверка не завершена за {scan_timeout} секунд')
    _emit([r.as_dict() for r in results], json_output, pretty)


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Показать текущую конфигурацию в JSON."""
    cfg = ctx.obj['config']
    click.echo(cfg.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()
