"""Entry point for the Student Records API.

Starts uvicorn with the application built by ``create_app``.  It is
intended to be executed from the project root, for example under
Docker, where you only specify a single Python file to run.

Configuration such as STORAGE_BACKEND, SQLITE_PATH, DATABASE_URL, HOST
and PORT may be placed in a `.env` file in the working directory.

Usage:
    python run.py
"""
import logging

from uvicorn import Config, Server

from student_records_api.app.core.config import settings
from student_records_api.app.main import app


def main() -> None:
    """Serve the API on ``settings.host``/``settings.port``."""
    config = Config(
        app=app,
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level=settings.log_level.lower(),
    )
    server = Server(config)
    logging.getLogger(__name__).info("Server running on port %s", settings.port)
    server.run()


if __name__ == "__main__":
    try:
        main()
    except (KeyboardInterrupt, SystemExit):
        pass
