import logging
from ..domain.interfaces import DatabaseConnector
from ..domain.models import ConnectionHealth, HealthStatus

logger = logging.getLogger(__name__)

class ConnectionChecker:
    """
    SRP: Responsible only for connectivity checks.
    A failed check is reported in the result, never raised.
    """
    def __init__(self, connector: DatabaseConnector):
        self.connector = connector

    async def check_health(self) -> ConnectionHealth:
        health = await self.connector.check_health()
        if health.status != HealthStatus.SUCCESS:
            logger.warning(
                "Health check for %s: %s (%s)",
                health.db_alias, health.status.value, health.error_message,
            )
        return health
