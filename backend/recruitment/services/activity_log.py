"""Activity log: records user-triggered events without ever failing the caller."""

import logging
from dataclasses import dataclass
from enum import Enum

from sqlalchemy import insert
from sqlalchemy.exc import SQLAlchemyError

from recruitment.models.activity_log import ActivityLog
from recruitment.models.base import Database

logger = logging.getLogger(__name__)


class LogLevel(str, Enum):
    INFO = "INFO"
    ERROR = "ERROR"
    DEBUG = "DEBUG"


_PYTHON_LEVELS = {
    LogLevel.INFO: logging.INFO,
    LogLevel.ERROR: logging.ERROR,
    LogLevel.DEBUG: logging.DEBUG,
}


@dataclass(frozen=True)
class ClientInfo:
    """Request origin details extracted by the HTTP layer."""

    ip: str | None = None
    user_agent: str | None = None


async def log_activity(
    db: Database,
    level: LogLevel,
    event_type: str,
    message: str,
    actor_id: int | None = None,
    client: ClientInfo | None = None,
) -> int | None:
    """Write one activity log row in its own transaction.

    Returns the new log id, or None when the row could not be stored.
    """
    logger.log(_PYTHON_LEVELS[level], "[%s] %s", event_type, message)
    client = client or ClientInfo()
    try:
        async with db.transaction() as session:
            result = await session.execute(
                insert(ActivityLog)
                .values(
                    level=level.value,
                    event_type=event_type,
                    message=message,
                    ip=client.ip,
                    user_agent=client.user_agent,
                    actor_person_id=actor_id,
                )
                .returning(ActivityLog.log_id)
            )
            return result.scalar_one()
    except SQLAlchemyError:
        logger.warning("Failed to store activity log entry %s", event_type, exc_info=True)
        return None
