import logging

import uvicorn

from sql_gateway.core.config import settings
from sql_gateway.main import app

logger = logging.getLogger(__name__)


def main():
    logger.info(f"Server running at http://localhost:{settings.PORT}")
    logger.info(f"API endpoint: http://localhost:{settings.PORT}/api/v1/sql")
    logger.info(
        f"Test: http://localhost:{settings.PORT}/api/v1/sql?query=SELECT * FROM patients"
    )
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    main()
