"""CLI entry point: python -m processing {init-db,serve,token,import,update}

  init-db  create the pericias table
  serve    run the HTTP API under uvicorn
  token    print a Bearer token for a user id
  import   import a spreadsheet from disk for a user
  update   apply an update template from disk for a user
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
import uuid
from dataclasses import replace
from pathlib import Path

from processing.auth import issue_token
from processing.config import Settings
from processing.exceptions import PipelineError
from processing.loaders.store import PericiaStore
from processing.pipeline import DEFAULT_VARIANT, atualizar_planilha, importar_planilha
from processing.transformers import IMPORTER_REGISTRY

logger = logging.getLogger("processing")


def _configure_logging(verbose: bool, level: str = "INFO") -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s — %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m processing",
        description="Perícias spreadsheet pipeline — import, update, serve.",
    )
    parser.add_argument(
        "--database-url",
        default=os.environ.get("PERICIAS_DATABASE_URL", ""),
        help="SQLAlchemy URL. Falls back to $PERICIAS_DATABASE_URL env var.",
    )
    parser.add_argument("-v", "--verbose", action="store_true")

    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("init-db", help="Create the pericias table if missing.")

    serve = sub.add_parser("serve", help="Run the HTTP API.")
    serve.add_argument("--host", default=os.environ.get("PERICIAS_HOST", "127.0.0.1"))
    serve.add_argument("--port", type=int, default=int(os.environ.get("PERICIAS_PORT", "8000")))

    token = sub.add_parser("token", help="Issue a Bearer token for a user id.")
    token.add_argument("user_id", type=uuid.UUID)

    importer = sub.add_parser("import", help="Import a spreadsheet file.")
    importer.add_argument("path", type=Path)
    importer.add_argument("--user-id", type=uuid.UUID, required=True)
    importer.add_argument("--variante", choices=sorted(IMPORTER_REGISTRY), default=DEFAULT_VARIANT)

    updater = sub.add_parser("update", help="Apply an update template file.")
    updater.add_argument("path", type=Path)
    updater.add_argument("--user-id", type=uuid.UUID, required=True)

    return parser


def _settings(args: argparse.Namespace) -> Settings:
    settings = Settings.from_env()
    if args.database_url:
        settings = replace(settings, database_url=args.database_url)
    return settings


def _serve(settings: Settings, host: str, port: int) -> None:
    import uvicorn

    from processing.api import create_app

    uvicorn.run(create_app(settings), host=host, port=port)


def _run_batch(args: argparse.Namespace, settings: Settings) -> None:
    data = args.path.read_bytes()
    store = PericiaStore.from_url(settings.database_url)
    if args.command == "import":
        result = importar_planilha(data, args.user_id, store, variante=args.variante, settings=settings)
    else:
        result = atualizar_planilha(data, args.user_id, store)
    print(json.dumps(result.to_payload(), ensure_ascii=False, indent=2))


def main(argv: list[str] | None = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)
    settings = _settings(args)
    _configure_logging(args.verbose, settings.log_level)

    if args.command == "init-db":
        PericiaStore.from_url(settings.database_url).create_tables()
    elif args.command == "serve":
        logger.info("=== Perícias API on %s:%d ===", args.host, args.port)
        _serve(settings, args.host, args.port)
    elif args.command == "token":
        print(issue_token(args.user_id, settings.secret_key))
    else:
        if not args.path.is_file():
            logger.error("File not found: %s", args.path)
            sys.exit(1)
        try:
            _run_batch(args, settings)
        except PipelineError as exc:
            logger.error("%s", exc)
            sys.exit(1)


if __name__ == "__main__":
    main()
