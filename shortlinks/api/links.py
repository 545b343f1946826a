from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from shortlinks.core.security import get_current_owner
from shortlinks.db.Connection import database
from shortlinks.schemas import ErrorResponse, LinkList, LinkResponse, LinkWriteRequest
from shortlinks.services.registry import LinkRegistry

router = APIRouter(
    prefix="/links",
    tags=["links"],
    responses={
        401: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)

# owner_id is declared before the session so an unauthenticated call is
# rejected without opening one.


@router.post(
    "",
    response_model=LinkResponse,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
def create_link_endpoint(
    link_request: LinkWriteRequest,
    owner_id: str = Depends(get_current_owner),
    db: Session = Depends(database.get_db),
):
    link = LinkRegistry.create_link(db, owner_id, link_request.url, link_request.short_code)
    return LinkResponse.from_link(link)


@router.get("", response_model=LinkList)
def list_links_endpoint(
    owner_id: str = Depends(get_current_owner),
    db: Session = Depends(database.get_db),
):
    links = LinkRegistry.list_links(db, owner_id)
    return LinkList(total=len(links), links=[LinkResponse.from_link(link) for link in links])


@router.get("/{link_id}", response_model=LinkResponse)
def get_link_endpoint(
    link_id: int,
    owner_id: str = Depends(get_current_owner),
    db: Session = Depends(database.get_db),
):
    return LinkResponse.from_link(LinkRegistry.get_link(db, link_id, owner_id))


@router.put(
    "/{link_id}",
    response_model=LinkResponse,
    responses={409: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
def update_link_endpoint(
    link_id: int,
    link_request: LinkWriteRequest,
    owner_id: str = Depends(get_current_owner),
    db: Session = Depends(database.get_db),
):
    link = LinkRegistry.update_link(db, link_id, owner_id, link_request.url, link_request.short_code)
    return LinkResponse.from_link(link)


@router.delete("/{link_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_link_endpoint(
    link_id: int,
    owner_id: str = Depends(get_current_owner),
    db: Session = Depends(database.get_db),
):
    LinkRegistry.delete_link(db, link_id, owner_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
