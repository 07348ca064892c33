# interfaces/app.py
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from typing import Optional
import logging

import config
from application.events import TaskEventBroker
from application.use_cases import TaskUseCases, UserUseCases
from infrastructure.database import Database
from interfaces.api import router as task_router
from interfaces.auth import router as auth_router

logger = logging.getLogger(__name__)


def create_app(db: Optional[Database] = None, broker: Optional[TaskEventBroker] = None) -> FastAPI:
    """Builds the task service with its storage and live-update broker."""
    db = db or Database(config.DB_PATH)
    broker = broker or TaskEventBroker()

    app = FastAPI(title="Task Board")
    app.state.broker = broker
    app.state.task_use_cases = TaskUseCases(db, broker)
    app.state.user_use_cases = UserUseCases(db)
    app.include_router(auth_router)
    app.include_router(task_router)

    if config.CORS_ORIGINS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=config.CORS_ORIGINS,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    logger.info(f"DB_PATH: {db.db_name}")
    logger.info(f"TOKEN_TTL_MINUTES: {config.TOKEN_TTL_MINUTES}")
    if config.JWT_SECRET == "my_secret_key":
        logger.warning("=== USING THE DEFAULT JWT SECRET - SET TASKBOARD_JWT_SECRET IN PRODUCTION ===")
    return app
