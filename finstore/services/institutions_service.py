"""Provider institution directory maintenance."""
from __future__ import annotations

from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from finstore.core.logger import get_logger
from finstore.domain.enums import Provider
from finstore.domain.errors import NotFoundError
from finstore.models import Institution, ProviderInstitution

LOGGER = get_logger(__name__)

_UPDATABLE_FIELDS = frozenset(
    {"name", "url", "logo", "logo_url", "primary_color", "oauth", "rank", "data"}
)


class InstitutionsService:
    def upsert_provider_institution(
        self,
        session: Session,
        provider: Provider,
        provider_id: str,
        **fields: Any,
    ) -> ProviderInstitution:
        """Create or refresh the record keyed by (``provider``, ``provider_id``)."""

        unknown = set(fields) - _UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Unknown provider institution fields: {sorted(unknown)}")

        record = session.scalars(
            select(ProviderInstitution).where(
                ProviderInstitution.provider == provider,
                ProviderInstitution.provider_id == provider_id,
            )
        ).one_or_none()

        if record is None:
            record = ProviderInstitution(provider=provider, provider_id=provider_id, **fields)
            session.add(record)
            LOGGER.debug("New %s institution %s", provider.value, provider_id)
        else:
            for key, value in fields.items():
                setattr(record, key, value)

        session.flush()
        return record

    def link(
        self, session: Session, provider_institution_id: int, institution_id: int | None
    ) -> ProviderInstitution:
        """Point a provider record at a canonical institution, or detach it with ``None``."""

        record = session.get(ProviderInstitution, provider_institution_id)
        if record is None:
            raise NotFoundError(f"Provider institution {provider_institution_id} not found")
        if institution_id is not None and session.get(Institution, institution_id) is None:
            raise NotFoundError(f"Institution {institution_id} not found")

        record.institution_id = institution_id
        session.flush()
        return record
