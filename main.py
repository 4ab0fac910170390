# main.py
import asyncio
import logging

import uvicorn

from shopapi.app import create_app
from shopapi.config import Config, setup_logging


async def main():
    # Setup logging
    setup_logging()
    logger = logging.getLogger(__name__)

    try:
        server = uvicorn.Server(uvicorn.Config(
            create_app(),
            host=Config.HOST,
            port=Config.PORT,
            log_config=None,
        ))
        logger.info(f"Starting api on {Config.HOST}:{Config.PORT}...")
        await server.serve()
    except Exception as e:
        logger.error(f"Error starting api: {e}", exc_info=True)
        raise

if __name__ == "__main__":
    asyncio.run(main())
