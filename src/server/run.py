#!/usr/bin/env python
import os
import sys
import uvicorn
from dotenv import load_dotenv
from pathlib import Path

from loguru import logger

if __name__ == "__main__":
    load_dotenv(Path.cwd() / ".env")

    from src.server.config import config

    logger.remove()
    logger.add(sys.stderr, level=config.log_level.upper())
    logger.info("DANE Certificate Service, start running!")
    logger.info(f"当前应用环境：{os.getenv('APP_ENV')}")

    uvicorn.run(
        "src.server.main:app",
        host=config.server_host,
        port=config.server_port,
        log_level=config.log_level.lower(),
    )
