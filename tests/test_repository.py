# tests/test_repository.py
import pytest
from sqlalchemy import event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.orm.exc import StaleDataError

from app.core.database import Base, make_engine
from app.ticket.models import TicketStatus
from app.ticket.repository import TicketRepository
from app.ticket.schemas import TicketCreate


def make(repo, description="d", status=TicketStatus.Closed):
    return repo.create(TicketCreate(description=description, status=status))


def test_create_assigns_id_timestamps_and_open_status(db):
    repo = TicketRepository(db)
    t = make(repo, "printer jam")
    assert t.id == 1
    assert t.status is TicketStatus.Open
    assert t.created_at == t.updated_at


def test_list_page_orders_by_updated_at_desc(db):
    repo = TicketRepository(db)
    a, b, c = make(repo, "a"), make(repo, "b"), make(repo, "c")
    repo.update(a.id, "a", TicketStatus.Closed)

    page = repo.list_page(1, 10)
    assert page.total_count == 3
    assert [t.id for t in page.items] == [a.id, c.id, b.id]


def test_list_page_out_of_range_is_empty(db):
    repo = TicketRepository(db)
    make(repo)
    page = repo.list_page(5, 10)
    assert page.items == []
    assert page.total_count == 1


def test_update_missing_returns_none(db):
    repo = TicketRepository(db)
    assert repo.update(123, "nothing", TicketStatus.Open) is None
    assert repo.list_page(1, 10).total_count == 0


def test_update_refreshes_updated_at_only(db):
    repo = TicketRepository(db)
    t = make(repo, "before")
    created_at = t.created_at

    updated = repo.update(t.id, "after", TicketStatus.Closed)
    assert updated.description == "after"
    assert updated.status is TicketStatus.Closed
    assert updated.created_at == created_at
    assert updated.updated_at > updated.created_at


def test_delete_and_exists(db):
    repo = TicketRepository(db)
    t = make(repo)
    assert repo.exists(t.id)
    assert repo.delete(t.id) is True
    assert not repo.exists(t.id)
    assert repo.get_by_id(t.id) is None
    assert repo.delete(t.id) is False


def test_update_of_row_deleted_mid_flush_raises_stale_data(tmp_path):
    engine = make_engine(f"sqlite:///{tmp_path / 'tickets.db'}")
    Base.metadata.create_all(bind=engine)
    Session = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    first, second = Session(), Session()
    try:
        repo = TicketRepository(first)
        t = make(repo, "racy")

        # another client deletes the row after it was loaded but before the UPDATE
        @event.listens_for(first, "before_flush", once=True)
        def delete_elsewhere(session, flush_context, instances):
            TicketRepository(second).delete(t.id)

        with pytest.raises(StaleDataError):
            repo.update(t.id, "changed", TicketStatus.Closed)

        assert not repo.exists(t.id)
        assert repo.list_page(1, 10).total_count == 0
    finally:
        first.close()
        second.close()
        engine.dispose()
