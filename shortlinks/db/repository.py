from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
import logging

from shortlinks.db.Models.models import Link, utcnow

logger = logging.getLogger(__name__)


def get_link_by_short_code(db: Session, short_code: str) -> Optional[Link]:
    return db.query(Link).filter(Link.short_code == short_code).first()


def get_owned_link(db: Session, link_id: int, owner_id: str, for_update: bool = False) -> Optional[Link]:
    # Ownership is part of the query itself; a row owned by someone else is simply not found.
    query = db.query(Link).filter(Link.id == link_id, Link.owner_id == owner_id)
    if for_update:
        query = query.with_for_update()
    return query.first()


def short_code_taken(db: Session, short_code: str, exclude_id: Optional[int] = None) -> bool:
    query = db.query(Link.id).filter(Link.short_code == short_code)
    if exclude_id is not None:
        query = query.filter(Link.id != exclude_id)
    return db.query(query.exists()).scalar()


def list_links_by_owner(db: Session, owner_id: str) -> List[Link]:
    return (
        db.query(Link)
        .filter(Link.owner_id == owner_id)
        .order_by(Link.updated_at.desc(), Link.id.desc())
        .all()
    )


def _commit_and_refresh(db: Session, link: Link) -> Link:
    try:
        db.add(link)
        db.commit()
        db.refresh(link)
        return link
    except IntegrityError as e:
        db.rollback()
        logger.warning(
            "IntegrityError writing Link short_code=%s owner=%s: %s",
            link.short_code, link.owner_id, str(e.orig) if hasattr(e, "orig") else str(e)
        )
        raise


def create_link(db: Session, owner_id: str, url: str, short_code: str) -> Link:
    link = Link(owner_id=owner_id, url=url, short_code=short_code)
    return _commit_and_refresh(db, link)


def update_link(db: Session, link: Link, url: str, short_code: str) -> Link:
    link.url = url
    link.short_code = short_code
    # Set explicitly so an update with unchanged values still counts as a touch
    link.updated_at = utcnow()
    return _commit_and_refresh(db, link)


def delete_link(db: Session, link: Link) -> None:
    db.delete(link)
    db.commit()
