"""``notioncache`` command line.

Configuration comes from the environment (see
:meth:`NotioncacheConfig.from_env`); a ``.env`` file in the working
directory is loaded first.

Commands::

    notioncache sync-users
    notioncache sync-databases
    notioncache sync-database-documents DATABASE_ID
    notioncache sync-document DOCUMENT_ID
    notioncache sync-all
    notioncache serve [--host HOST] [--port PORT]
"""

from __future__ import annotations

import argparse
import asyncio
import sys

import uvicorn
from dotenv import load_dotenv

from notioncache.app import Application, build_application
from notioncache.config import NotioncacheConfig
from notioncache.errors import NotioncacheError
from notioncache.observability import configure_logging, get_logger
from notioncache.server import create_app, files_mount_path

log = get_logger("notioncache.cli")


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="notioncache",
        description="Mirror Notion databases into a local cache and serve them",
    )
    parser.add_argument(
        "--log-level", default="INFO", help="Minimum level for the JSON log lines on stderr (default: INFO)",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("sync-users", help="Cache every workspace user")
    commands.add_parser("sync-databases", help="Cache every database shared with the integration")

    documents = commands.add_parser(
        "sync-database-documents", help="Cache the properties of every document in a database",
    )
    documents.add_argument("database_id")

    document = commands.add_parser(
        "sync-document", help="Cache one document, refetching its blocks when stale",
    )
    document.add_argument("document_id")

    commands.add_parser("sync-all", help="Sync users, databases and every document")

    serve = commands.add_parser("serve", help="Serve cached documents over HTTP")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)

    return parser


async def sync_all(app: Application) -> None:
    """Users first so that ``people`` properties resolve, then everything else."""
    await app.datastore.sync.users()
    databases = await app.datastore.sync.databases()
    for database in databases:
        documents = await app.datastore.sync.database_documents(database.id)
        for document in documents:
            await app.datastore.sync.document(document.id)


async def serve(app: Application, host: str, port: int) -> None:
    web = create_app(
        app.client,
        files_dir=app.config.file_store_dir,
        files_url=files_mount_path(app.config.file_public_base_url),
    )
    server = uvicorn.Server(uvicorn.Config(web, host=host, port=port, log_level="info"))
    await server.serve()


async def run(args: argparse.Namespace, config: NotioncacheConfig) -> None:
    async with build_application(config) as app:
        if args.command == "sync-users":
            await app.datastore.sync.users()
        elif args.command == "sync-databases":
            await app.datastore.sync.databases()
        elif args.command == "sync-database-documents":
            await app.datastore.sync.database_documents(args.database_id)
        elif args.command == "sync-document":
            await app.datastore.sync.document(args.document_id)
        elif args.command == "sync-all":
            await sync_all(app)
        elif args.command == "serve":
            await serve(app, args.host, args.port)


def main(argv: list[str] | None = None) -> int:
    args = create_parser().parse_args(argv)
    load_dotenv()

    try:
        config = NotioncacheConfig.from_env()
    except ValueError as exc:
        print(f"Error: invalid configuration: {exc}", file=sys.stderr)
        return 2
    try:
        configure_logging(args.log_level, config.token or None)
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2
    if not config.token and args.command != "serve":
        print("Error: NOTION_API_KEY is not set", file=sys.stderr)
        return 2

    try:
        asyncio.run(run(args, config))
    except NotioncacheError as exc:
        log.error(
            "Command failed",
            extra={"extra_fields": {"op": args.command, "code": exc.code, "error": exc.message}},
        )
        print(f"Error: {exc.message}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
