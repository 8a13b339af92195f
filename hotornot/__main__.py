"""Run the API with uvicorn: python -m hotornot"""

import uvicorn

from hotornot.config import settings


def main() -> None:
    uvicorn.run(
        "hotornot.main:app",
        host=settings.backend_host,
        port=settings.backend_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
