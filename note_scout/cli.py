# === FILE: note_scout/cli.py ===
#!/usr/bin/env python3
"""
Точка входа для запуска NoteScout через командную строку.

Команды:
  dump      Собрать (или загрузить) базу заметок команды и опубликовать её
  config    Показать текущую конфигурацию

Общие опции:
  --config PATH       Путь к YAML/JSON-конфигу (default: note_scout.yaml, если есть)
  --log-level LEVEL   Уровень логирования (DEBUG, INFO, ...)
  --log-file PATH     Файл для логов (только консоль, если не указан)
  --log-format FORMAT Формат логирования

Команда dump опции:
  --team, -t NAME         Имя команды HackMD (обязательно в режиме сборки)
  --database, -d PATH     Путь к JSON-базе (default: hackmd.json)
  --update, -u            Пересобрать базу, даже если файл существует
  --meilisearch, -m URL   Опубликовать страницы в Meilisearch
  --meilisearch-key KEY   Ключ API Meilisearch
  --server-url URL        Адрес сервиса заметок
  --credentials SOURCE    Источник логина/пароля: prompt или env

Дополнительно:
  --version, -v       Показать версию NoteScout

Пример:
  note-scout dump --team my-team --database hackmd.json --update
"""
import asyncio
import json
import sys
from pathlib import Path

import click

from note_scout import __version__
from note_scout.auth.credentials import EnvCredentials, InteractiveCredentials
from note_scout.config import load_config
from note_scout.engine import start_dump
from note_scout.logger import init_logging

CONTEXT_SETTINGS = dict(help_option_names=["--help", "-h"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='NoteScout, version %(version)s')
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
    help='Путь к файлу логов (только консоль, если не указан)'
)
@click.option(
    '--log-format', 'log_format',
    default='%(asctime)s %(levelname)s %(message)s',
    show_default=True,
    help='Строка формата для логов'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """Группа команд NoteScout CLI."""
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


@cli.command('dump', context_settings=CONTEXT_SETTINGS)
@click.option('--team', '-t', 'team', default=None, help='Имя команды HackMD.')
@click.option(
    '--database', '-d', 'database',
    default=None,
    help='Путь к JSON-базе (по умолчанию из конфига: hackmd.json).'
)
@click.option('--update', '-u', is_flag=True, help='Пересобрать базу, даже если файл существует.')
@click.option('--meilisearch', '-m', 'meilisearch', default=None, help='URL Meilisearch.')
@click.option('--meilisearch-key', 'meilisearch_key', default=None, help='Ключ API Meilisearch.')
@click.option('--server-url', 'server_url', default=None, help='Адрес сервиса заметок.')
@click.option(
    '--credentials', 'credentials_source',
    default='prompt', show_default=True,
    type=click.Choice(['prompt', 'env']),
    help='Откуда брать логин и пароль.'
)
@click.pass_context
def dump(ctx, team, database, update, meilisearch, meilisearch_key, server_url, credentials_source):
    """Собрать или загрузить базу заметок и (опционально) опубликовать её."""
    try:
        cfg = ctx.obj['config'].with_overrides(
            team=team,
            database=database,
            update=update or None,
            meilisearch=meilisearch,
            meilisearch_key=meilisearch_key,
            server_url=server_url,
        )
    except Exception as e:
        print_error(f'Ошибка в параметрах: {e}')

    if credentials_source == 'env':
        credentials = EnvCredentials(cfg.credentials_env_prefix)
    else:
        credentials = InteractiveCredentials()

    try:
        pages = asyncio.run(start_dump(cfg, credentials))
    except Exception as e:
        print_error(f'Ошибка: {e}')

    missing = sum(1 for p in pages if p.content is None)
    click.echo(f'{len(pages)} pages in {cfg.database} ({missing} without content)')


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Показать текущую конфигурацию в JSON."""
    cfg = ctx.obj['config']
    data = cfg.model_dump(mode='json')
    data['meilisearch_key'] = '***'
    click.echo(json.dumps(data, indent=2, ensure_ascii=False))


if __name__ == "__main__":
    cli()
