"""
Supabase topic store.

Looks up the per-room topic record used to personalise the tutor prompt.
The lookup is best effort: a missing row, a failed query and an empty topic
all resolve to "no topic" and the bootstrap carries on.
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any, Optional

from supabase import Client, create_client

from .config import SupabaseSettings
from .errors import TopicLookupError
from .logging_config import bootstrap_metrics

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TopicRecord:
    id: str
    topic: Any = None

    @property
    def has_topic(self) -> bool:
        return bool(self.topic)


@dataclass(frozen=True)
class TopicContext:
    """Outcome of a topic lookup as seen by the bootstrapper."""

    has_topic: bool
    topic: Optional[str] = None

    @classmethod
    def none(cls) -> "TopicContext":
        return cls(has_topic=False, topic=None)

    @classmethod
    def from_record(cls, record: Optional[TopicRecord]) -> "TopicContext":
        if record is None or not record.has_topic:
            return cls.none()
        return cls(has_topic=True, topic=str(record.topic))


class TopicStore:
    """Read-only access to the ``topics`` table keyed by room name."""

    def __init__(self, client: Client, table: str = "topics"):
        self.client = client
        self.table = table

    @classmethod
    def from_settings(cls, settings: SupabaseSettings) -> "TopicStore":
        """Create the Supabase client once for the whole worker process."""
        client = create_client(settings.url, settings.key)
        logger.info(f"✅ Supabase topic store initialized (table: {settings.table})")
        return cls(client, table=settings.table)

    def _query(self, room_name: str) -> Any:
        return (
            self.client.table(self.table)
            .select("id, topic")
            .eq("id", room_name)
            .limit(1)
            .execute()
        )

    async def fetch(self, room_name: str) -> Optional[TopicRecord]:
        """Fetch the topic row for a room, or None when there is none.

        Raises TopicLookupError if the datastore call fails.
        """
        try:
            response = await asyncio.to_thread(self._query, room_name)
        except Exception as e:
            raise TopicLookupError(f"Topic query failed for room {room_name!r}: {e}") from e

        rows = getattr(response, "data", None) or []
        if not rows:
            return None

        row = rows[0]
        return TopicRecord(id=str(row.get("id", room_name)), topic=row.get("topic"))

    async def resolve(self, room_name: str) -> TopicContext:
        """Best-effort lookup; never raises for datastore problems."""
        started = time.perf_counter()
        record = None
        error = None
        try:
            record = await self.fetch(room_name)
        except TopicLookupError as e:
            error = str(e)
            logger.warning(f"⚠️ Topic lookup failed, continuing without topic: {e}")

        context = TopicContext.from_record(record)
        bootstrap_metrics.log_lookup(
            room_name,
            time.perf_counter() - started,
            found=context.has_topic,
            error=error,
        )
        logger.info(f"Topic for room {room_name}: {record}")
        return context
