"""
Run the article API server.

    python -m article_service --conn_str postgresql://... --listen_addr :8080

Flags override DATABASE_URL / LISTEN_ADDR from the environment.
"""
import argparse
import logging
import sys

import uvicorn

from article_service.config import Settings, split_listen_addr
from article_service.main import create_app

logger = logging.getLogger("article_service")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(prog="article_service", description="Article CRUD API server")
    parser.add_argument("--conn_str", help="Database connection string")
    parser.add_argument("--listen_addr", help="Server listen address, host:port or :port")
    return parser.parse_args(argv)


def build_settings(argv=None) -> Settings:
    """Settings from the environment with command line overrides applied."""
    args = parse_args(argv)
    overrides = {}
    if args.conn_str:
        overrides["database_url"] = args.conn_str
    if args.listen_addr:
        overrides["listen_addr"] = args.listen_addr
    return Settings(**overrides)


def main(argv=None):
    """Run the API server."""
    settings = build_settings(argv)
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    try:
        host, port = split_listen_addr(settings.listen_addr)
    except ValueError as e:
        logger.error("%s", e)
        sys.exit(2)

    try:
        app = create_app(settings)
    except Exception:
        logger.exception("Failed to initialize database")
        sys.exit(1)

    logger.info("Listening on http://%s:%s", host, port)
    uvicorn.run(app, host=host, port=port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
