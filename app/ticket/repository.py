# app/ticket/repository.py
import logging
from dataclasses import dataclass

from fastapi import Depends
from sqlalchemy import func
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from app.core.database import get_db
from app.ticket.models import Ticket, TicketStatus, utcnow
from app.ticket.schemas import TicketCreate

logger = logging.getLogger(__name__)


@dataclass
class PagedResult:
    items: list[Ticket]
    total_count: int


class TicketRepository:
    """Ticket persistence over a single SQLAlchemy session."""

    def __init__(self, db: Session):
        self.db = db

    def list_page(self, page_number: int, page_size: int) -> PagedResult:
        """Return one page of tickets, most recently updated first.

        Pages past the end come back empty; ``total_count`` is always the
        number of rows in the table.
        """
        total = self.db.query(func.count(Ticket.id)).scalar() or 0
        items = (
            self.db.query(Ticket)
            .order_by(Ticket.updated_at.desc(), Ticket.id.desc())
            .offset((page_number - 1) * page_size)
            .limit(page_size)
            .all()
        )
        return PagedResult(items=items, total_count=total)

    def get_by_id(self, ticket_id: int) -> Ticket | None:
        return self.db.query(Ticket).filter(Ticket.id == ticket_id).first()

    def create(self, payload: TicketCreate) -> Ticket:
        now = utcnow()
        db_ticket = Ticket(
            description=payload.description,
            status=TicketStatus.Open,
            created_at=now,
            updated_at=now,
        )
        self.db.add(db_ticket)
        self.db.commit()
        self.db.refresh(db_ticket)
        logger.info("Created ticket %s", db_ticket.id)
        return db_ticket

    def update(self, ticket_id: int, description: str, status: TicketStatus) -> Ticket | None:
        """Overwrite description and status, refreshing ``updated_at``.

        Returns ``None`` when the ticket does not exist. A row deleted by
        another transaction between load and flush raises ``StaleDataError``.
        """
        db_ticket = self.get_by_id(ticket_id)
        if not db_ticket:
            return None
        db_ticket.description = description
        db_ticket.status = status
        db_ticket.updated_at = utcnow()
        try:
            self.db.commit()
        except StaleDataError:
            self.db.rollback()
            raise
        self.db.refresh(db_ticket)
        logger.info("Updated ticket %s (status=%s)", ticket_id, status.value)
        return db_ticket

    def delete(self, ticket_id: int) -> bool:
        db_ticket = self.get_by_id(ticket_id)
        if not db_ticket:
            return False
        self.db.delete(db_ticket)
        self.db.commit()
        logger.info("Deleted ticket %s", ticket_id)
        return True

    def exists(self, ticket_id: int) -> bool:
        return self.db.query(Ticket.id).filter(Ticket.id == ticket_id).first() is not None


def get_ticket_repository(db: Session = Depends(get_db)) -> TicketRepository:
    return TicketRepository(db)
