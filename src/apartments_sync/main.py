#!/usr/bin/env python3
"""
Apartments Sync — снимок квартир из каталога застройщика.

CLI для синхронизации, выборок и запуска API.
"""
import argparse
import asyncio
import json
import logging
from pathlib import Path

from apartments_sync.config.settings import settings
from apartments_sync.utils.logger import setup_logger, get_logger
from apartments_sync.pipeline import Pipeline
from apartments_sync.scraper.errors import ScrapeError
from apartments_sync.scraper.session import run_scrape
from apartments_sync.services.sync_service import SyncInProgressError


def cmd_sync(pipeline: Pipeline, args):
    """Сбор каталога и замена снимка."""
    try:
        result = pipeline.run_sync_blocking()
    except SyncInProgressError as e:
        print(f"\n⏳ {e}")
        return 1
    print(f"\n{result}")
    print(f"  Найдено: {result.records_found}, сохранено: {result.records_saved}")
    if result.error:
        print(f"  Ошибка: {result.error}")
    return 0 if result.success else 1


def cmd_scrape(pipeline: Pipeline, args):
    """Сбор каталога без записи в БД (вывод JSON)."""
    try:
        records = asyncio.run(run_scrape(settings))
    except ScrapeError as e:
        print(f"\n❌ {e}")
        return 1
    print(json.dumps([r.to_dict() for r in records], ensure_ascii=False, indent=2))
    return 0


def cmd_query(pipeline: Pipeline, args):
    """Выборка из снимка."""
    try:
        records = pipeline.query(
            rooms_count=args.rooms,
            project_name=args.project,
            sort_by=args.sort_by,
            sort_order=args.order
        )
    except ValueError as e:
        print(f"\n❌ {e}")
        return 2

    if not records:
        print("\nКвартиры с такими параметрами не найдены.")
        return 0

    for r in records:
        print(
            f"\n🏠 {r.plan}\n💰 {r.price:g}€\n📐 {r.sq_meters:g}м²\n"
            f"🏢 Этаж: {r.floor}\n🏗 Проект: {r.project_name}\n🔗 {r.link}"
        )
    return 0


def cmd_projects(pipeline: Pipeline, args):
    """Список проектов в снимке."""
    for name in pipeline.get_projects():
        print(f"  - {name}")
    return 0


def cmd_stats(pipeline: Pipeline, args):
    """Показать статистику."""
    stats = pipeline.get_statistics()
    print(f"\n📊 Статистика:")
    print(f"  Квартир: {stats['listings_count']}")
    print(f"  Проектов: {stats['projects_count']}")
    print(f"  Последняя синхронизация: {stats['last_synced_at'] or '—'}")
    return 0


def cmd_server(pipeline: Pipeline, args):
    """Запуск API."""
    import uvicorn
    print(f"Запуск API на http://{args.host}:{args.port}")
    uvicorn.run(
        "apartments_sync.api.app:app",
        host=args.host,
        port=args.port
    )
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="apartments-sync",
        description="Apartments Sync — снимок квартир из каталога застройщика",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Примеры:
  apartments-sync sync
  apartments-sync scrape > listings.json
  apartments-sync query --rooms 2 --sort-by price --order desc
  apartments-sync projects
  apartments-sync server --port 8080
        """
    )

    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Подробный вывод (DEBUG уровень)'
    )

    subparsers = parser.add_subparsers(dest='command', help='Доступные команды')

    subparsers.add_parser(
        'sync',
        help='Собрать каталог и заменить снимок',
        description=(
            'Собрать каталог и заменить снимок. Блокировка запуска действует '
            'только внутри процесса: при работающем server используйте '
            'POST /api/actions/sync, иначе возможны два параллельных сбора '
            '(снимок остаётся целым, побеждает последняя запись).'
        )
    )
    subparsers.add_parser('scrape', help='Собрать каталог и вывести JSON (без записи)')

    query_parser = subparsers.add_parser('query', help='Выборка из снимка')
    query_parser.add_argument('--rooms', type=int, default=None, help='Количество комнат')
    query_parser.add_argument('--project', type=str, default=None, help='Название проекта')
    query_parser.add_argument('--sort-by', choices=['price', 'sq_meters'], default=None, help='Поле сортировки')
    query_parser.add_argument('--order', choices=['asc', 'desc'], default='asc', help='Направление')

    subparsers.add_parser('projects', help='Список проектов')
    subparsers.add_parser('stats', help='Показать статистику')

    server_parser = subparsers.add_parser('server', help='Запуск API')
    server_parser.add_argument('--host', type=str, default=settings.api_host, help='Хост')
    server_parser.add_argument('--port', type=int, default=settings.api_port, help='Порт')

    return parser


def main(argv=None):
    """Главная функция."""
    parser = build_parser()
    args = parser.parse_args(argv)

    level = logging.DEBUG if args.verbose else logging.INFO
    setup_logger(level=level, log_file=Path(settings.log_file) if settings.log_file else None)
    logger = get_logger("main")

    commands = {
        'sync': cmd_sync,
        'scrape': cmd_scrape,
        'query': cmd_query,
        'projects': cmd_projects,
        'stats': cmd_stats,
        'server': cmd_server,
    }

    if args.command not in commands:
        parser.print_help()
        return 0

    # Пайплайн нужен всем командам, кроме server (там он создаётся при старте)
    pipeline = None
    if args.command != 'server':
        pipeline = Pipeline()
        pipeline.init_database()

    logger.debug(f"Команда: {args.command}")
    return commands[args.command](pipeline, args)


if __name__ == "__main__":
    raise SystemExit(main())
