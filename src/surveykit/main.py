from __future__ import annotations

import logging

from .config import Settings
from .db import init_db, make_engine


logger = logging.getLogger(__name__)


def main() -> None:
    settings = Settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    init_db(make_engine(settings.database_url, echo=settings.database_echo))
    logger.info("Survey tables ready at %s", settings.database_url)


if __name__ == "__main__":  # pragma: no cover
    main()
