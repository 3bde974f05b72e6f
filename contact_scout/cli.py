# === FILE: contact_scout/cli.py ===
#!/usr/bin/env python3
"""
Точка входа для запуска ContactScout через командную строку.

Команды:
  run       Обойти сайты из реестра и сохранить обогащённый набор данных
  merge     Слить обновления в существующий набор данных (без обхода)
  config    Показать текущую конфигурацию

Общие опции:
  --config PATH       Путь к YAML/JSON-конфигу (default: configs/default.yaml, если есть)
  --log-level LEVEL   Уровень логирования (DEBUG, INFO, ...)
  --log-file PATH     Файл для логов (stdout, если не указан)
  --log-format FORMAT Формат логирования

Команда run опции:
  --output PATH       Куда сохранить итоговый CSV (обязательно)
  --existing PATH     Существующий набор данных для слияния (по умолчанию — сам реестр)
  --concurrency INT   Число доменов, обрабатываемых одновременно
  --policy deny|allow Стратегия отбора маршрутов
  --json PATH         Сохранить JSON-отчёт о прогоне
  --html PATH         Сохранить HTML-отчёт о прогоне
  --run-timeout SEC   Таймаут всего прогона (секунд)

Пример:
  contact-scout run data/websites.csv --output data/companies.csv --concurrency 8
"""
import asyncio
import sys
from pathlib import Path

import click

from contact_scout import __version__
from contact_scout.config import load_config
from contact_scout.crawler.browser import BrowserPool
from contact_scout.logger import init_logging, logger
from contact_scout.orchestrator import DomainOrchestrator, install_signal_handlers
from contact_scout.records import merge
from contact_scout.report.html_report import render_html
from contact_scout.report.json_report import render_json
from contact_scout.storage import PersistenceError, read_roster, write_dataset

CONTEXT_SETTINGS = dict(help_option_names=["--help"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


async def run_roster(cfg, roster):
    """Запускает оркестратор над реестром; возвращает (orchestrator, counters)."""
    browser = BrowserPool.from_config(cfg)
    orchestrator = DomainOrchestrator(cfg, browser)
    loop = asyncio.get_running_loop()
    install_signal_handlers(loop, orchestrator, asyncio.current_task())
    try:
        await browser.start()
        counters = await orchestrator.run_all(roster)
    finally:
        if orchestrator.drain_task is not None:
            await asyncio.shield(orchestrator.drain_task)
        await orchestrator.shutdown()
    return orchestrator, counters


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='ContactScout, version %(version)s')
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
    help='Путь к файлу логов (stdout, если не указан)'
)
@click.option(
    '--log-format', 'log_format',
    default='%(asctime)s %(levelname)s %(name)s %(message)s',
    show_default=True,
    help='Строка формата для логов'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """Группа команд ContactScout CLI."""
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


@cli.command('run', context_settings=CONTEXT_SETTINGS)
@click.argument('roster_path', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    '--output', '-o', 'output',
    required=True,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Куда сохранить итоговый CSV'
)
@click.option(
    '--existing', '-e', 'existing_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Существующий набор данных для слияния'
)
@click.option('--concurrency', '-n', type=click.IntRange(min=1), default=None, help='Параллельность')
@click.option('--policy', type=click.Choice(['deny', 'allow']), default=None, help='Стратегия маршрутов')
@click.option(
    '--json', '-j', 'json_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Сохранить JSON-отчёт в файл'
)
@click.option(
    '--html', 'html_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Сохранить HTML-отчёт в файл'
)
@click.option('--run-timeout', 'run_timeout', type=float, default=None, help='Таймаут всего прогона (секунд)')
@click.pass_context
def run(ctx, roster_path, output, existing_path, concurrency, policy, json_output, html_output, run_timeout):
    """Обойти сайты реестра и сохранить обогащённый набор данных."""
    cfg = ctx.obj['config']
    overrides = {}
    if concurrency is not None:
        overrides['concurrency'] = concurrency
    if policy is not None:
        overrides['route_policy'] = policy
    if overrides:
        cfg = cfg.model_copy(update=overrides)

    try:
        roster = read_roster(roster_path)
        existing = read_roster(existing_path) if existing_path else read_roster(roster_path)
    except PersistenceError as e:
        print_error(f'Ошибка чтения данных: {e}')

    click.echo(f'Starting run: {len(roster)} domain(s), concurrency {cfg.concurrency}')
    try:
        if run_timeout:
            orchestrator, counters = asyncio.run(
                asyncio.wait_for(run_roster(cfg, roster), timeout=run_timeout)
            )
        else:
            orchestrator, counters = asyncio.run(run_roster(cfg, roster))
    except asyncio.TimeoutError:
        print_error(f'Прогон не завершён за {run_timeout} секунд')
    except (KeyboardInterrupt, asyncio.CancelledError):
        print_error('Прогон прерван')
    except Exception as e:
        print_error(f'Ошибка при обходе: {e}')

    merged = merge(existing, orchestrator.updates)
    try:
        write_dataset(output, merged)
    except PersistenceError as e:
        print_error(f'Ошибка при сохранении: {e}')

    report = orchestrator.report()
    if json_output:
        try:
            click.echo(f'JSON report: {render_json(report, json_output)}')
        except Exception as e:
            print_error(f'Ошибка при сохранении JSON: {e}')
    if html_output:
        try:
            click.echo(f'HTML report: {render_html(report, html_output)}')
        except Exception as e:
            print_error(f'Ошибка при сохранении HTML: {e}')

    logger.info(counters.summary())
    click.echo(counters.summary())


@cli.command('merge', context_settings=CONTEXT_SETTINGS)
@click.argument('existing_path', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument('updates_path', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    '--output', '-o', 'output',
    required=True,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Куда сохранить результат'
)
def merge_cmd(existing_path, updates_path, output):
    """Заполнить пустые поля существующего набора данных из обновлений."""
    try:
        merged = merge(read_roster(existing_path), read_roster(updates_path))
        write_dataset(output, merged)
    except PersistenceError as e:
        print_error(f'Ошибка при слиянии: {e}')
    click.echo(f'Merged dataset: {output} ({len(merged)} rows)')


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Показать текущую конфигурацию в JSON."""
    cfg = ctx.obj['config']
    click.echo(cfg.model_dump_json(indent=2))


def main():
    cli(obj={})


if __name__ == "__main__":
    main()
