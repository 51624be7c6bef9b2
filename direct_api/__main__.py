"""Run the Direct API under uvicorn: ``python -m direct_api``."""

import uvicorn

from direct_api.config import get_config


def main() -> None:
    config = get_config()
    uvicorn.run(
        "direct_api.api.main:app",
        host=config.server.host,
        port=config.server.port,
        workers=config.server.workers,
        log_level=config.logging.level.lower(),
    )


if __name__ == "__main__":
    main()
