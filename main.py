import logging

import config
from interfaces.app import create_app

# --- Basic Setup ---
logging.basicConfig(level=config.LOG_LEVEL)
logger = logging.getLogger(__name__)

# `uvicorn main:app`
app = create_app()


def run():
    import uvicorn

    logger.info(f"Server starting at {config.HOST}:{config.PORT}")
    uvicorn.run(app, host=config.HOST, port=config.PORT, log_level=config.LOG_LEVEL.lower())


if __name__ == "__main__":
    run()
