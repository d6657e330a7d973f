"""Command line entry point for the Todo API."""

import argparse
import logging

import uvicorn

from .config import settings
from .main import create_app

logger = logging.getLogger(__name__)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Run the Todo API server")
    parser.add_argument("-H", "--host", default=settings.HOST, help="Interface to listen on")
    parser.add_argument("-p", "--port", type=int, default=settings.PORT, help="Port to listen on")
    parser.add_argument(
        "--store",
        choices=["memory", "redis"],
        default=settings.STORE_BACKEND,
        help="Where todo items are kept"
    )
    parser.add_argument("--debug", action="store_true", default=settings.DEBUG, help="Enable debug logging")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    app_settings = settings.model_copy(update={
        "HOST": args.host,
        "PORT": args.port,
        "STORE_BACKEND": args.store,
        "DEBUG": args.debug,
    })

    logger.info(f"Starting server on {app_settings.HOST}:{app_settings.PORT}")
    uvicorn.run(
        create_app(app_settings),
        host=app_settings.HOST,
        port=app_settings.PORT,
        log_level="debug" if app_settings.DEBUG else "info"
    )


if __name__ == "__main__":
    main()
