# === FILE: focus_scout/cli.py ===
#!/usr/bin/env python3
"""
Точка входа для запуска краулера FocusScout через командную строку.

Команды:
  crawl     Запустить обход и вывести/сохранить отчёт
  config    Показать итоговую конфигурацию

Общие опции:
  --config PATH       Путь к YAML/JSON-конфигу (необязательно)
  --log-level LEVEL   Уровень логирования (DEBUG, INFO, ...)
  --log-file PATH     Файл для логов (stderr, если не указан)
  --log-format FORMAT Формат логирования

Команда crawl опции:
  --url, -u URL       Стартовый URL (обязателен, если не задан в конфиге)
  --docs, -d PATH     Каталог для сохранения страниц (обязателен, если не задан в конфиге)
  --query, -q TERMS   Поисковые термины (можно повторять)
  --max, -m INT       Макс. число страниц (по умолчанию 50)
  --trace, -t         Печатать ход обхода
  --debug             Отладочный вывод
  --robots-debug      Отладочный вывод проверки robots.txt
  --delimiters STR    Символы-разделители слов
  --json, -j PATH     Сохранить JSON-отчёт в файл
  --pretty            Преформатировать JSON-вывод (отступ 2)

Пример:
  focus_scout crawl -u https://example.com/ -d pages -q "widget gadget" -m 100 --trace
"""
import sys
import asyncio
from pathlib import Path

import click
from pydantic import ValidationError

from focus_scout import __version__
from focus_scout.config import CrawlerConfig, read_config_data
from focus_scout.logger import configure
from focus_scout.scanner import start_crawl
from focus_scout.report.json_report import dump_json, render_json

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


def build_config(data: dict) -> CrawlerConfig:
    try:
        return CrawlerConfig(**data)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'config'}: {err['msg']}" for err in e.errors()
        )
        raise click.UsageError(f'Некорректная конфигурация: {problems}')


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='FocusScout, version %(version)s')
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
    """Группа команд FocusScout CLI."""
    ctx.ensure_object(dict)
    data = {}
    if config_path is not None:
        try:
            data = read_config_data(config_path)
        except (OSError, ValueError, TypeError) as e:
            print_error(f'Ошибка загрузки конфигурации: {e}')
    ctx.obj['config_data'] = data
    ctx.obj['logging'] = dict(level=log_level, log_file=log_file, log_format=log_format)


@cli.command('crawl', context_settings=CONTEXT_SETTINGS)
@click.option('--url', '-u', 'start_url', default=None, help='Стартовый URL обхода.')
@click.option(
    '--docs', '-d', 'download_path',
    default=None,
    type=click.Path(file_okay=False, path_type=Path),
    help='Каталог для сохранения загруженных страниц.'
)
@click.option('--query', '-q', 'query', multiple=True, help='Поисковые термины (можно повторять).')
@click.option('--max', '-m', 'max_pages', type=int, default=None, help='Макс. число страниц (по умолчанию 50).')
@click.option('--trace', '-t', is_flag=True, help='Печатать ход обхода.')
@click.option('--debug', is_flag=True, help='Отладочный вывод.')
@click.option('--robots-debug', 'robots_debug', is_flag=True, help='Отладочный вывод проверки robots.txt.')
@click.option('--delimiters', default=None, help='Символы-разделители слов.')
@click.option('--concurrency', type=int, default=None, help='Число одновременных загрузок.')
@click.option('--timeout', type=float, default=None, help='Таймаут на один запрос (секунд).')
@click.option('--no-https-upgrade', 'no_https_upgrade', is_flag=True, help='Не переписывать http:// в https://.')
@click.option(
    '--json', '-j', 'json_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Сохранить JSON-отчёт в файл'
)
@click.option('--pretty', is_flag=True, help='Преформатировать JSON-вывод (отступ 2)')
@click.pass_context
def crawl(ctx, start_url, download_path, query, max_pages, trace, debug, robots_debug,
          delimiters, concurrency, timeout, no_https_upgrade, json_output, pretty):
    """Запустить обход и сформировать отчёт."""
    data = dict(ctx.obj['config_data'])
    overrides = {
        'start_url': start_url,
        'download_path': download_path,
        'query': list(query) or None,
        'max_pages': max_pages,
        'delimiters': delimiters,
        'concurrency': concurrency,
        'timeout': timeout,
    }
    data.update({k: v for k, v in overrides.items() if v is not None})
    for flag, enabled in (('trace', trace), ('debug', debug), ('robots_debug', robots_debug)):
        if enabled:
            data[flag] = True
    if no_https_upgrade:
        data['force_https'] = False

    cfg = build_config(data)

    log_opts = ctx.obj['logging']
    configure(
        level='DEBUG' if cfg.debug else log_opts['level'],
        log_file=log_opts['log_file'],
        log_format=log_opts['log_format'],
        robots_debug=cfg.robots_debug,
    )

    try:
        result = asyncio.run(start_crawl(cfg))
    except Exception as e:
        print_error(f'Ошибка при обходе: {e}')

    if json_output:
        try:
            saved = render_json(result, json_output, pretty=pretty)
            click.echo(f'JSON report: {saved}')
        except OSError as e:
            print_error(f'Ошибка при сохранении JSON: {e}')
        return

    click.echo(dump_json(result, pretty=pretty))


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Показать текущую конфигурацию в JSON."""
    cfg = build_config(ctx.obj['config_data'])
    click.echo(cfg.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()
