import json
import logging
from typing import Any, List, Optional, Protocol

from pydantic import ValidationError

from exceptions import StorageSchemaError
from models import Practice

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1

# Stored records must carry these; the draft defaults never fill them in
REQUIRED_STORED_FIELDS = ("category", "frequency")


class KeyValueClient(Protocol):
    """What we need from the durable store. redis.asyncio.Redis fits."""

    async def get(self, key: str) -> Optional[str]: ...

    async def set(self, key: str, value: str) -> Any: ...


# ---------------------------------------------------------
# Codec
# ---------------------------------------------------------
def encode_collection(practices: List[Practice]) -> str:
    payload = {
        "version": SCHEMA_VERSION,
        "practices": [p.model_dump(mode="json", by_alias=True) for p in practices],
    }
    return json.dumps(payload, ensure_ascii=False)


def decode_collection(raw: str) -> List[Practice]:
    """
    Parse a stored collection.

    Accepts the current versioned envelope and the bare list the first
    version of the app wrote. Anything else raises StorageSchemaError.
    Records that don't validate, or reuse an id, are skipped.
    """
    try:
        data = json.loads(raw)
    except (TypeError, ValueError) as e:
        raise StorageSchemaError(f"Stored collection is not JSON: {e}") from e

    if isinstance(data, list):
        logger.info(f"Migrating unversioned collection ({len(data)} records)")
        items = data
    elif isinstance(data, dict) and data.get("version") == SCHEMA_VERSION:
        items = data.get("practices")
        if not isinstance(items, list):
            raise StorageSchemaError("'practices' must be a list")
    else:
        version = data.get("version") if isinstance(data, dict) else None
        raise StorageSchemaError(f"Unsupported collection schema (version={version!r})")

    practices: List[Practice] = []
    seen_ids = set()
    for index, item in enumerate(items):
        if isinstance(item, dict):
            missing = [f for f in REQUIRED_STORED_FIELDS if f not in item]
            if missing:
                logger.warning(f"Skipping practice at index {index}, missing {', '.join(missing)}")
                continue
        try:
            practice = Practice.model_validate(item)
        except ValidationError as e:
            logger.warning(f"Skipping unreadable practice at index {index}: {e}")
            continue
        if practice.id in seen_ids:
            logger.warning(f"Skipping duplicate practice id {practice.id}")
            continue
        seen_ids.add(practice.id)
        practices.append(practice)
    return practices


# ---------------------------------------------------------
# Adapter
# ---------------------------------------------------------
class PersistenceAdapter:
    """Reads and writes the whole practice collection under one key."""

    def __init__(self, client: KeyValueClient, key: str):
        self.client = client
        self.key = key

    async def read(self) -> List[Practice]:
        try:
            raw = await self.client.get(self.key)
            if raw is None:
                logger.info("No existing practices found, starting fresh")
                return []
            return decode_collection(raw)
        except Exception as e:
            logger.warning(f"Could not load practices from '{self.key}': {str(e)}")
            return []

    async def write(self, practices: List[Practice]) -> bool:
        try:
            await self.client.set(self.key, encode_collection(practices))
            return True
        except Exception as e:
            logger.error(f"Error saving practices to '{self.key}': {str(e)}")
            return False
