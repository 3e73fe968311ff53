"""Composition root — wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

import atexit
from functools import lru_cache

from sqlalchemy import Engine

from storefront.application.notifications import NotificationDispatcher
from storefront.infrastructure.config import StorefrontSettings, get_settings
from storefront.infrastructure.notifications.background import (
    BackgroundNotificationDispatcher,
)
from storefront.infrastructure.notifications.logging_dispatcher import (
    LoggingNotificationDispatcher,
)
from storefront.infrastructure.persistence.database import (
    create_db_engine,
    create_session_factory,
    init_schema,
)
from storefront.infrastructure.persistence.unit_of_work import SqlAlchemyUnitOfWork


def settings() -> StorefrontSettings:
    return get_settings()


@lru_cache()
def engine() -> Engine:
    cfg = settings()
    db_engine = create_db_engine(cfg.database_url, echo=cfg.database_echo)
    init_schema(db_engine)
    return db_engine


def unit_of_work() -> SqlAlchemyUnitOfWork:
    return SqlAlchemyUnitOfWork(create_session_factory(engine()))


@lru_cache()
def notification_dispatcher() -> NotificationDispatcher:
    dispatcher = BackgroundNotificationDispatcher(
        LoggingNotificationDispatcher(),
        max_workers=settings().notification_workers,
    )
    atexit.register(dispatcher.shutdown)
    return dispatcher
