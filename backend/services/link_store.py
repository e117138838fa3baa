import logging
import time
from datetime import datetime, timezone
from typing import List, Optional
from models.schemas import ShortcutLink
from .errors import LinkValidationError

logger = logging.getLogger(__name__)

class LinkStore:
    """In-memory store of user shortcuts, kept for the lifetime of the process.

    Records are appended in creation order and only ever removed by id.
    Nothing is written to disk.
    """

    def __init__(self):
        self._links: List[ShortcutLink] = []
        self._last_id = 0

    def __len__(self) -> int:
        return len(self._links)

    def _next_id(self) -> int:
        # Epoch milliseconds, bumped when two links land in the same millisecond
        link_id = max(int(time.time() * 1000), self._last_id + 1)
        self._last_id = link_id
        return link_id

    def add(self, keywords: Optional[str], url: Optional[str], description: Optional[str]) -> ShortcutLink:
        missing = [
            name for name, value in (("keywords", keywords), ("url", url), ("description", description))
            if value is None or not str(value).strip()
        ]
        if missing:
            raise LinkValidationError(f"Missing required fields: {', '.join(missing)}")

        link = ShortcutLink(
            id=self._next_id(),
            keywords=keywords,
            url=url,
            description=description,
            created_at=datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z"),
        )
        self._links.append(link)
        logger.info(f"Saved link {link.id} for keywords '{keywords}'")
        return link

    def list(self) -> List[ShortcutLink]:
        return list(self._links)

    def get(self, link_id: int) -> Optional[ShortcutLink]:
        return next((link for link in self._links if link.id == link_id), None)

    def remove(self, link_id: int) -> bool:
        for index, link in enumerate(self._links):
            if link.id == link_id:
                del self._links[index]
                logger.info(f"Deleted link {link_id}")
                return True
        return False
