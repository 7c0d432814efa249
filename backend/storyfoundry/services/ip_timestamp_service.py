"""Best-effort proof-of-authorship records."""
import logging

from storyfoundry.infrastructure.observability import IP_TIMESTAMP_TOTAL
from storyfoundry.models.project import IP_TIMESTAMPS_TABLE, IPTimestamp
from storyfoundry.services.supabase_client import SupabaseClient
from storyfoundry.shared_kernel.value_objects import ContentSnapshot

logger = logging.getLogger(__name__)


class IPTimestampService:
    def __init__(self, client: SupabaseClient):
        self.client = client

    async def record(self, project_id: str, snapshot: ContentSnapshot) -> bool:
        """Store a timestamp for ``snapshot``; returns False instead of raising on failure."""
        timestamp = IPTimestamp(project_id=project_id, content_hash=snapshot.encoded)
        try:
            await self.client.insert(IP_TIMESTAMPS_TABLE, timestamp.to_row(), returning=False)
        except Exception as exc:
            # The project already exists at this point; losing the timestamp must not undo it.
            logger.warning("IP timestamp creation failed for project %s: %s", project_id, exc)
            IP_TIMESTAMP_TOTAL.labels("failed").inc()
            return False

        logger.info("IP timestamp created for project %s", project_id)
        IP_TIMESTAMP_TOTAL.labels("created").inc()
        return True
