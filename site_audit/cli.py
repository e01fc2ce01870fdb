# === FILE: site_audit/cli.py ===
#!/usr/bin/env python3
"""
Точка входа для запуска аудита SiteAudit через командную строку.

Команды:
  audit     Обойти сайт, проаудировать страницы и вывести/сохранить итог
  config    Показать текущую конфигурацию

Общие опции:
  --config PATH       Путь к YAML/JSON-конфигу (default: configs/default.yaml)
  --limit INT         Макс. число страниц (override max_pages)
  --depth INT         Макс. глубина обхода (override max_depth)
  --log-level LEVEL   Уровень логирования (DEBUG, INFO, ...)
  --log-file PATH     Файл для логов (stdout, если не указан)
  --log-format FORMAT Формат логирования

Команда audit опции:
  --html PATH         Сохранить HTML-отчёт прогона в файл
  --template DIR      Папка с Jinja2-шаблонами
  --pretty            Преформатировать JSON-вывод (отступ 2)
  --run-timeout SEC   Таймаут всего прогона (секунд)

Пример:
  site-audit --config configs/default.yaml --limit 5 audit --html reports/index.html --pretty
"""
import asyncio
import sys
from pathlib import Path

import click

from site_audit import __version__
from site_audit.config import load_config
from site_audit.engine import start_audit
from site_audit.logger import DEFAULT_FORMAT, configure, logger
from site_audit.report.html_report import render_html

CONTEXT_SETTINGS = dict(help_option_names=["--help"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='SiteAudit, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default='configs/default.yaml',
    show_default=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Путь к файлу конфигурации YAML/JSON.'
)
@click.option(
    '--limit', '-l', 'limit',
    type=click.IntRange(min=1),
    default=None,
    help='Макс. число страниц (override max_pages)'
)
@click.option(
    '--depth', '-d', 'depth',
    type=click.IntRange(min=0),
    default=None,
    help='Макс. глубина обхода (override max_depth)'
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
    default=DEFAULT_FORMAT,
    show_default=True,
    help='Строка формата для логов'
)
@click.pass_context
def cli(ctx, config_path, limit, depth, log_level, log_file, log_format):
    """Группа команд SiteAudit CLI."""
    configure(level=log_level, log_file=log_file, log_format=log_format)
    try:
        cfg = load_config(config_path)
    except Exception as e:
        print_error(f'Ошибка загрузки конфигурации: {e}')
    overrides = {}
    if limit is not None:
        overrides['max_pages'] = limit
    if depth is not None:
        overrides['max_depth'] = depth
    if overrides:
        cfg = cfg.model_copy(update=overrides)
    ctx.ensure_object(dict)
    ctx.obj['config'] = cfg


@cli.command('audit', context_settings=CONTEXT_SETTINGS)
@click.option(
    '--html', 'html_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Сохранить HTML-отчёт прогона в файл'
)
@click.option(
    '--template', '-t', 'template_dir',
    default=None,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help='Папка с Jinja2-шаблонами (по умолчанию встроенный шаблон)'
)
@click.option(
    '--pretty', is_flag=True,
    help='Преформатировать JSON-вывод (отступ 2)'
)
@click.option(
    '--run-timeout', 'run_timeout',
    type=float,
    default=None,
    help='Таймаут всего прогона (секунд)'
)
@click.pass_context
def audit(ctx, html_output, template_dir, pretty, run_timeout):
    """Обойти сайт и проаудировать страницы."""
    cfg = ctx.obj['config']
    logger.info('Starting audit: %s', cfg.entry_url)
    try:
        if run_timeout:
            report = asyncio.run(asyncio.wait_for(start_audit(cfg), timeout=run_timeout))
        else:
            report = asyncio.run(start_audit(cfg))
    except asyncio.TimeoutError:
        print_error(f'Аудит не завершён за {run_timeout} секунд')
    except Exception as e:
        print_error(f'Фатальная ошибка аудита: {e}')

    click.echo(report.json(pretty=pretty))

    if html_output:
        try:
            saved_html = render_html(report, template_dir, html_output)
            logger.info('HTML report: %s', saved_html)
        except Exception as e:
            print_error(f'Ошибка при сохранении HTML: {e}')


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Показать текущую конфигурацию в JSON."""
    cfg = ctx.obj['config']
    click.echo(cfg.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()
