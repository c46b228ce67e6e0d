"""Run the API with uvicorn: `python -m notevault`."""

import uvicorn

from notevault.config import settings


def main() -> None:
    uvicorn.run(
        "notevault.main:app",
        host=settings.backend_host,
        port=settings.backend_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
