import logging
from typing import Optional

from sqlalchemy.orm import Session

from shortlinks.services import RedisURLCache
from shortlinks.services.registry import LinkRegistry
from shortlinks.utils.short_code import is_valid_short_code

logger = logging.getLogger(__name__)


class RedirectResolver:

    @staticmethod
    def resolve(db: Session, short_code: str) -> Optional[str]:
        """
        Destination URL for a short code, or None when there is none.
        Registry failures propagate as StorageError.
        """
        # Nothing outside the code format can have been stored
        if not is_valid_short_code(short_code):
            return None

        cached_url = RedisURLCache.get(short_code)
        if cached_url:
            return cached_url

        link = LinkRegistry.resolve_by_code(db, short_code)
        if link is None:
            return None

        RedisURLCache.put(short_code, link.url)
        logger.debug(f"Redirect cache MISS/DB HIT for {short_code} -> {link.url[:50]}")
        return link.url
