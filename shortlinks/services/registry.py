from contextlib import contextmanager
from typing import List, Optional
import logging

import redis.exceptions
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from shortlinks.core.errors import ConflictError, NotFoundError, RegistryError, StorageError
from shortlinks.db import repository
from shortlinks.db.Models.models import Link
from shortlinks.services import RedisURLCache
from shortlinks.services.validation import validate_link_input


logger = logging.getLogger(__name__)


@contextmanager
def _storage_errors(db: Session, action: str):
    """Translate storage failures into StorageError and end the transaction on any failure."""
    try:
        yield
    except RegistryError:
        db.rollback()
        raise
    except (SQLAlchemyError, redis.exceptions.RedisError) as exc:
        db.rollback()
        logger.exception("Storage failure while trying to %s", action)
        raise StorageError(f"Failed to {action}. Please try again.") from exc


class LinkRegistry:
    """
    Sole reader/writer of the links table.

    The unique index on short_code is what guarantees uniqueness. The
    short_code_taken() pre-check only exists to fail fast with a friendly
    message; a write that loses a race is caught as an IntegrityError and
    re-checked before being reported as a conflict.
    """

    @staticmethod
    def _raise_if_code_taken(db: Session, short_code: str, exc: IntegrityError, exclude_id: Optional[int] = None):
        holder = repository.get_link_by_short_code(db, short_code)
        if holder is not None and holder.id != exclude_id:
            logger.warning("Short code '%s' claimed concurrently by link %s", short_code, holder.id)
            raise ConflictError() from exc

    @staticmethod
    def create_link(db: Session, owner_id: str, url: str, short_code: str) -> Link:
        validate_link_input(owner_id, url, short_code)

        with _storage_errors(db, "create link"):
            if repository.short_code_taken(db, short_code):
                logger.warning("Short code collision on create: '%s'", short_code)
                raise ConflictError()
            try:
                link = repository.create_link(db, owner_id, url, short_code)
            except IntegrityError as exc:
                LinkRegistry._raise_if_code_taken(db, short_code, exc)
                raise

        RedisURLCache.put(link.short_code, link.url)
        logger.info("Created link %s: '%s' -> %s", link.id, link.short_code, link.url[:50])
        return link

    @staticmethod
    def get_link(db: Session, link_id: int, owner_id: str) -> Link:
        with _storage_errors(db, "load link"):
            link = repository.get_owned_link(db, link_id, owner_id)
        if link is None:
            raise NotFoundError()
        return link

    @staticmethod
    def update_link(db: Session, link_id: int, owner_id: str, url: str, short_code: str) -> Link:
        validate_link_input(owner_id, url, short_code)

        with _storage_errors(db, "update link"):
            # Row is locked for the rest of the transaction (no-op on SQLite)
            link = repository.get_owned_link(db, link_id, owner_id, for_update=True)
            if link is None:
                logger.warning("Update rejected: link %s not found for owner", link_id)
                raise NotFoundError()

            previous_code = link.short_code
            if short_code != previous_code and repository.short_code_taken(db, short_code, exclude_id=link.id):
                logger.warning("Short code collision on update of link %s: '%s'", link_id, short_code)
                raise ConflictError()

            # A failed eviction rolls the update back; the old code must not outlive it in the cache
            RedisURLCache.invalidate(previous_code)
            try:
                link = repository.update_link(db, link, url, short_code)
            except IntegrityError as exc:
                LinkRegistry._raise_if_code_taken(db, short_code, exc, exclude_id=link_id)
                raise

        # Again after commit, in case a concurrent redirect re-cached the old row
        RedisURLCache.discard(previous_code)
        RedisURLCache.put(link.short_code, link.url)
        logger.info("Updated link %s: '%s' -> %s", link.id, link.short_code, link.url[:50])
        return link

    @staticmethod
    def delete_link(db: Session, link_id: int, owner_id: str) -> None:
        with _storage_errors(db, "delete link"):
            link = repository.get_owned_link(db, link_id, owner_id, for_update=True)
            if link is None:
                logger.warning("Delete rejected: link %s not found for owner", link_id)
                raise NotFoundError()
            short_code = link.short_code
            RedisURLCache.invalidate(short_code)
            repository.delete_link(db, link)

        RedisURLCache.discard(short_code)
        logger.info("Deleted link %s ('%s')", link_id, short_code)

    @staticmethod
    def list_links(db: Session, owner_id: str) -> List[Link]:
        # Unbounded: the dashboard shows every link an owner has
        with _storage_errors(db, "list links"):
            return repository.list_links_by_owner(db, owner_id)

    @staticmethod
    def resolve_by_code(db: Session, short_code: str) -> Optional[Link]:
        with _storage_errors(db, "resolve short code"):
            return repository.get_link_by_short_code(db, short_code)
