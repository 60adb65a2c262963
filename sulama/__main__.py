import logging

import uvicorn

from sulama.core.config import get_settings
from sulama.core.log_config import configure_logging

logger = logging.getLogger("sulama")


def main() -> None:
    settings = get_settings()
    configure_logging(settings.log_level, settings.log_json)
    logger.info("Sulama Asistanı server %s portunda çalışıyor.", settings.port)
    uvicorn.run("sulama.app:create_app", factory=True, host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
