"""
Run the job board service: `python -m jobboard`.
"""

import uvicorn

from .config import get_settings
from .logging_config import configure_logging


def main() -> None:
    settings = get_settings()
    configure_logging(settings.log_level)
    uvicorn.run("jobboard.main:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
