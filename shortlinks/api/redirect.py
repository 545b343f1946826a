from fastapi import APIRouter, Depends, status
from fastapi.responses import PlainTextResponse, RedirectResponse
from sqlalchemy.orm import Session
import logging

from shortlinks.core.errors import StorageError
from shortlinks.db.Connection import database
from shortlinks.services.resolver import RedirectResolver

logger = logging.getLogger(__name__)

router = APIRouter(tags=["redirect"])


def redirect_to_url_endpoint(short_code: str, db: Session = Depends(database.get_db)):
    """
    Public, unauthenticated. 307 keeps clients from caching the target,
    so edits to a link apply to the very next visit.
    Failures are answered in plain text, since browsers land here directly.
    """
    try:
        url = RedirectResolver.resolve(db, short_code)
    except StorageError:
        logger.error(f"Redirect 500: lookup failed for {short_code}")
        return PlainTextResponse("Internal server error", status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

    if url is None:
        logger.warning(f"Redirect 404: Short code not found: {short_code}")
        return PlainTextResponse("Link not found", status_code=status.HTTP_404_NOT_FOUND)

    return RedirectResponse(url=url, status_code=status.HTTP_307_TEMPORARY_REDIRECT)


# /l/ is the long-standing public path; the bare path must stay last in the route table.
router.add_api_route("/l/{short_code}", redirect_to_url_endpoint, methods=["GET"])
router.add_api_route("/{short_code}", redirect_to_url_endpoint, methods=["GET"])
