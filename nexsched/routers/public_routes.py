# nexsched/routers/public_routes.py

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from nexsched.availability import SLOT_MINUTES, available_starts, effective_day
from nexsched.booking import PROVIDER_NOT_FOUND, SERVICE_NOT_FOUND, book_appointment, resolve_company
from nexsched.config import Settings
from nexsched.deps import get_settings, get_store
from nexsched.errors import BookingConflictError, NotFoundError
from nexsched.models import Appointment
from nexsched.schemas import AvailabilityResponse, BookingCreate, CompanyPublic
from nexsched.store import InMemoryStore

router = APIRouter(
    prefix="/schedule",
    tags=["booking"],
)


@router.get("/{slug}", response_model=CompanyPublic)
def public_company(slug: str, store: InMemoryStore = Depends(get_store)):
    try:
        company = resolve_company(store, slug)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))

    return {
        **company.model_dump(include={"id", "name", "slug", "logo_url", "theme_color", "custom_form_fields"}),
        "services": store.services_for_company(company.id),
    }


@router.post("/{slug}/appointments", response_model=Appointment, status_code=201)
def public_booking(
    slug: str,
    booking: BookingCreate,
    store: InMemoryStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
):
    try:
        return book_appointment(
            store,
            slug,
            booking.service_id,
            booking.start,
            booking.client_name,
            booking.client_phone,
            provider_id=booking.provider_id,
            notes=booking.notes,
            custom_form_data=booking.custom_form_data,
            enforce_availability=settings.booking_enforce_availability,
        )
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except BookingConflictError as exc:
        raise HTTPException(status_code=409, detail=str(exc))


@router.get("/{slug}/providers/{provider_id}/availability", response_model=AvailabilityResponse)
def provider_availability(
    slug: str,
    provider_id: str,
    on_date: date,
    service_id: Optional[str] = None,
    store: InMemoryStore = Depends(get_store),
):
    try:
        company = resolve_company(store, slug)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))

    provider = store.get_user(provider_id)
    if provider is None or provider.company_id != company.id:
        raise HTTPException(status_code=404, detail=PROVIDER_NOT_FOUND)

    duration = SLOT_MINUTES
    if service_id is not None:
        service = store.get_service(service_id)
        if service is None or service.company_id != company.id:
            raise HTTPException(status_code=404, detail=SERVICE_NOT_FOUND)
        duration = service.duration_minutes

    day = effective_day(store, provider_id, on_date)
    return {
        "provider_id": provider_id,
        "date": on_date,
        "is_open": day.is_open,
        "slots": day.slots,
        "available_starts": available_starts(store, provider_id, on_date, duration_minutes=duration),
    }
