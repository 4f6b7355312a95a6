# app/ticket/routes.py
import logging
import math
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Path, Query, Request, Response
from fastapi.responses import PlainTextResponse
from sqlalchemy.orm.exc import StaleDataError

from app.ticket.repository import TicketRepository, get_ticket_repository
from app.ticket.schemas import (
    MAX_ID, MIN_ID, PaginationMeta, TicketCreate, TicketOut, TicketPage, TicketUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/tickets", tags=["Tickets"])

TicketId = Annotated[int, Path(ge=MIN_ID, le=MAX_ID)]


class TicketNotFound(Exception):
    """Answered with a bodyless 404 by the app-level handler."""

    def __init__(self, ticket_id: int):
        super().__init__(f"Ticket {ticket_id} not found")
        self.ticket_id = ticket_id


def _not_found(ticket_id: int) -> TicketNotFound:
    logger.info("Ticket %s not found", ticket_id)
    return TicketNotFound(ticket_id)


@router.get("", response_model=TicketPage)
def list_page(
    page_number: int = Query(default=1, alias="pageNumber", le=MAX_ID),
    page_size: int = Query(default=10, alias="pageSize", le=MAX_ID),
    repo: TicketRepository = Depends(get_ticket_repository),
):
    if page_number < 1 or page_size < 1:
        raise HTTPException(
            status_code=400,
            detail="Page number and page size must be greater than zero.",
        )

    result = repo.list_page(page_number, page_size)
    return TicketPage(
        data=[TicketOut.model_validate(t) for t in result.items],
        pagination=PaginationMeta(
            total_count=result.total_count,
            page_size=page_size,
            current_page=page_number,
            total_pages=math.ceil(result.total_count / page_size),
        ),
    )


@router.get("/{ticket_id}", response_model=TicketOut, name="get_ticket")
def get(ticket_id: TicketId, repo: TicketRepository = Depends(get_ticket_repository)):
    ticket = repo.get_by_id(ticket_id)
    if not ticket:
        raise _not_found(ticket_id)
    return ticket


@router.post("", response_model=TicketOut, status_code=201)
def create(
    ticket: TicketCreate,
    request: Request,
    response: Response,
    repo: TicketRepository = Depends(get_ticket_repository),
):
    created = repo.create(ticket)
    response.headers["Location"] = str(request.url_for("get_ticket", ticket_id=created.id))
    return created


@router.put("/{ticket_id}", response_class=PlainTextResponse)
def update(
    ticket_id: TicketId,
    ticket: TicketUpdate,
    repo: TicketRepository = Depends(get_ticket_repository),
):
    if ticket_id != ticket.id:
        raise HTTPException(
            status_code=400,
            detail=f"Ticket id {ticket.id} in body does not match id {ticket_id} in path.",
        )

    try:
        updated = repo.update(ticket_id, ticket.description, ticket.status)
    except StaleDataError:
        if not repo.exists(ticket_id):
            raise _not_found(ticket_id)
        logger.warning("Concurrent modification of ticket %s", ticket_id)
        raise HTTPException(status_code=409, detail="Ticket was modified concurrently")

    if not updated:
        raise _not_found(ticket_id)
    return "Updated successfully"


@router.delete("/{ticket_id}", response_class=PlainTextResponse)
def delete(ticket_id: TicketId, repo: TicketRepository = Depends(get_ticket_repository)):
    if not repo.exists(ticket_id):
        raise _not_found(ticket_id)
    repo.delete(ticket_id)
    return "Deleted successfully"
