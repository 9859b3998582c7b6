import logging
import sys

import uvicorn

from golinks.config import ConfigError, load_settings
from golinks.main import create_app

logger = logging.getLogger("golinks")


def main(argv: list[str] | None = None) -> int:
    try:
        settings = load_settings(argv)
    except ConfigError as e:
        print(f"golinks: {e}", file=sys.stderr)
        return 2

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
    )

    app = create_app(settings)
    logger.info("Server starting on %s", settings.address)
    uvicorn.run(app, host=settings.host or "0.0.0.0", port=settings.port, log_level=settings.log_level.lower())
    return 0


if __name__ == "__main__":
    sys.exit(main())
