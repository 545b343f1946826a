"""
Seed a handful of example links for one owner.

    python -m shortlinks.scripts.seed_example_links [owner_id]

Falls back to SEED_OWNER_ID when no owner is given. Links go through the
registry, so codes that are already taken are skipped rather than duplicated.
"""
import logging
import sys
from typing import List, Optional

from sqlalchemy.orm import Session

from shortlinks.core.config import settings
from shortlinks.core.errors import ConflictError
from shortlinks.core.logging_config import configure_logging
from shortlinks.db.Connection import database
from shortlinks.db.Models import models
from shortlinks.services.registry import LinkRegistry

logger = logging.getLogger(__name__)

EXAMPLE_LINKS = [
    ("https://developer.mozilla.org/en-US/docs/Web/JavaScript", "mdn-js"),
    ("https://www.typescriptlang.org/docs/", "ts-docs"),
    ("https://react.dev/learn", "react"),
    ("https://nodejs.org/en/docs/", "nodejs"),
    ("https://stackoverflow.com/questions/tagged/typescript", "so-ts"),
    ("https://www.postgresql.org/docs/", "pg-docs"),
    ("https://vitejs.dev/guide/", "vite"),
    ("https://code.visualstudio.com/docs", "vscode"),
    ("https://www.reddit.com/r/webdev/", "r-webdev"),
    ("https://css-tricks.com/", "css-tricks"),
]


def seed_example_links(db: Session, owner_id: str) -> List[models.Link]:
    created = []
    for url, short_code in EXAMPLE_LINKS:
        try:
            created.append(LinkRegistry.create_link(db, owner_id, url, short_code))
        except ConflictError:
            logger.warning("Skipping '%s': short code already taken", short_code)
    return created


def main(argv: Optional[List[str]] = None) -> int:
    configure_logging()
    argv = sys.argv[1:] if argv is None else argv
    owner_id = argv[0] if argv else settings.SEED_OWNER_ID
    if not owner_id:
        logger.error("No owner given: pass one as an argument or set SEED_OWNER_ID")
        return 1

    models.Base.metadata.create_all(bind=database.engine)
    db = database.SessionLocal()
    try:
        created = [(link.short_code, link.url) for link in seed_example_links(db, owner_id)]
    finally:
        db.close()

    print(f"Inserted {len(created)} example links")
    for short_code, url in created:
        print(f"- /{short_code} -> {url}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
