"""Process bootstrap — serve the API with uvicorn on the configured port."""

import uvicorn

from relations_api.config import get_settings


def run() -> None:
    settings = get_settings()
    uvicorn.run(
        "relations_api.main:app",
        host=settings.host,
        port=settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    run()
