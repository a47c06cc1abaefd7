import os

import uvicorn

from app.config import settings, warn_if_unconfigured
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="server")


if __name__ == "__main__":
    warn_if_unconfigured(settings)
    logger.info("Starting forecast gateway")

    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", 8000)),
        reload=False,
    )
