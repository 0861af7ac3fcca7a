# nexsched/booking.py

import logging
from datetime import datetime, timedelta
from typing import Any, Optional

from .availability import ensure_bookable
from .errors import NotFoundError
from .models import (
    GUEST_CLIENT_ID,
    Appointment,
    AppointmentStatus,
    Company,
    Service,
    UserRole,
    new_id,
)
from .store import InMemoryStore

logger = logging.getLogger(__name__)

UNASSIGNED_PROVIDER_ID = "unassigned"
COMPANY_NOT_FOUND = "Empresa não encontrada."
SERVICE_NOT_FOUND = "Serviço não encontrado."
PROVIDER_NOT_FOUND = "Profissional não encontrado."


def resolve_company(store: InMemoryStore, slug: str) -> Company:
    company = store.get_company_by_slug(slug)
    if company is None:
        raise NotFoundError(COMPANY_NOT_FOUND)
    return company


def resolve_service(store: InMemoryStore, company: Company, service_id: str) -> Service:
    service = store.get_service(service_id)
    if service is None or service.company_id != company.id:
        raise NotFoundError(SERVICE_NOT_FOUND)
    return service


def resolve_provider_id(store: InMemoryStore, company: Company, provider_id: Optional[str]) -> str:
    if provider_id is None:
        return default_provider_id(store, company.id)
    provider = store.get_user(provider_id)
    if provider is None or provider.company_id != company.id:
        raise NotFoundError(PROVIDER_NOT_FOUND)
    return provider.id


def default_provider_id(store: InMemoryStore, company_id: str) -> str:
    staff = [u for u in store.users if u.company_id == company_id]
    for role in (UserRole.provider, UserRole.company_admin):
        for u in staff:
            if u.role == role:
                return u.id
    return UNASSIGNED_PROVIDER_ID


def _local_naive(value: datetime) -> datetime:
    # appointments are kept in naive local wall-clock time
    if value.tzinfo is not None:
        return value.astimezone().replace(tzinfo=None)
    return value


def book_appointment(
    store: InMemoryStore,
    slug: str,
    service_id: str,
    start: datetime,
    client_name: str,
    client_phone: str,
    provider_id: Optional[str] = None,
    notes: Optional[str] = None,
    custom_form_data: Optional[dict[str, Any]] = None,
    enforce_availability: bool = False,
) -> Appointment:
    """Public booking: always a PENDING appointment for the guest client."""
    company = resolve_company(store, slug)
    service = resolve_service(store, company, service_id)

    start = _local_naive(start)
    end = start + timedelta(minutes=service.duration_minutes)
    provider_id = resolve_provider_id(store, company, provider_id)

    if enforce_availability:
        ensure_bookable(store, provider_id, start, end)

    appt = Appointment(
        id=new_id("apt"),
        company_id=company.id,
        service_id=service.id,
        provider_id=provider_id,
        client_id=GUEST_CLIENT_ID,
        client_name=client_name,
        client_phone=client_phone,
        start=start,
        end=end,
        status=AppointmentStatus.pending,
        notes=notes,
        custom_form_data=custom_form_data,
    )
    store.add_appointment(appt)
    logger.info(
        "Public booking %s for service %s at %s",
        appt.id,
        service.id,
        start.isoformat(),
        extra={"company_id": company.id},
    )
    return appt


def share_link(public_base_url: str, company: Company) -> str:
    return f"{public_base_url}/#/schedule/{company.slug}"
