from __future__ import annotations

import pytest
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from finstore.domain.errors import NotFoundError
from finstore.models import Institution, Provider, ProviderInstitution
from finstore.services import InstitutionsService


@pytest.fixture()
def service() -> InstitutionsService:
    return InstitutionsService()


def test_upsert_creates_then_refreshes(service: InstitutionsService, session: Session) -> None:
    created = service.upsert_provider_institution(
        session, Provider.PLAID, "ins_1", name="Chase", oauth=True
    )
    refreshed = service.upsert_provider_institution(
        session, Provider.PLAID, "ins_1", name="JPMorgan Chase", rank=3
    )

    assert refreshed is created
    assert refreshed.name == "JPMorgan Chase"
    assert refreshed.oauth is True
    assert refreshed.rank == 3
    assert session.scalar(select(func.count()).select_from(ProviderInstitution)) == 1


def test_upsert_rejects_unknown_fields(service: InstitutionsService, session: Session) -> None:
    with pytest.raises(ValueError):
        service.upsert_provider_institution(
            session, Provider.TELLER, "chase", name="Chase", institution_id=1
        )


def test_link_and_unlink(service: InstitutionsService, session: Session) -> None:
    institution = Institution(name="Chase")
    session.add(institution)
    record = service.upsert_provider_institution(session, Provider.TELLER, "chase", name="Chase")

    service.link(session, record.id, institution.id)
    assert record.institution is institution

    service.link(session, record.id, None)
    assert record.institution_id is None


def test_link_to_missing_institution(service: InstitutionsService, session: Session) -> None:
    record = service.upsert_provider_institution(session, Provider.PLAID, "ins_9", name="Bank")

    with pytest.raises(NotFoundError):
        service.link(session, record.id, 77)
