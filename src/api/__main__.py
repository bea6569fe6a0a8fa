"""
Serve the API with uvicorn.

Usage: ``python -m src.api`` or the ``authgate`` console script.
"""

import uvicorn

from src.config.settings import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run("src.api.main:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
