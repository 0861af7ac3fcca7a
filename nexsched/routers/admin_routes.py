# nexsched/routers/admin_routes.py

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Response

from nexsched.ai.service import generate_reminder_message, summarize_financials
from nexsched.auth import Actor
from nexsched.booking import share_link
from nexsched.config import Settings
from nexsched.deps import company_admin, get_settings, get_store, get_text_provider
from nexsched.finance import company_dashboard, summarize
from nexsched.models import (
    Appointment,
    AppointmentStatus,
    DayException,
    Service,
    User,
    WeeklySchedule,
    new_id,
)
from nexsched.schemas import (
    AnalysisResponse,
    CompanyDashboard,
    DayExceptionUpsert,
    FinanceResponse,
    ReminderResponse,
    ScheduleUpdate,
    ServiceCreate,
    ShareLinkResponse,
    StatusUpdate,
)
from nexsched.store import InMemoryStore

router = APIRouter(
    prefix="/admin",
    tags=["admin"],
)


def _company_appointment(store: InMemoryStore, actor: Actor, appt_id: str) -> Appointment:
    appt = store.get_appointment(appt_id)
    if appt is None or appt.company_id != actor.company_id:
        raise HTTPException(status_code=404, detail="Appointment not found")
    return appt


def _company_provider(store: InMemoryStore, actor: Actor, provider_id: str) -> User:
    provider = store.get_user(provider_id)
    if provider is None or provider.company_id != actor.company_id:
        raise HTTPException(status_code=404, detail="Provider not found")
    return provider


@router.get("/dashboard", response_model=CompanyDashboard)
def dashboard(
    actor: Actor = Depends(company_admin),
    store: InMemoryStore = Depends(get_store),
):
    return company_dashboard(store, actor.company_id)


@router.get("/appointments", response_model=List[Appointment])
def list_appointments(
    status: Optional[AppointmentStatus] = None,
    actor: Actor = Depends(company_admin),
    store: InMemoryStore = Depends(get_store),
):
    appts = store.appointments_for_company(actor.company_id)
    if status is not None:
        appts = [a for a in appts if a.status == status]
    return sorted(appts, key=lambda a: a.start)


@router.patch("/appointments/{appt_id}/status", response_model=Appointment)
def update_status(
    appt_id: str,
    update: StatusUpdate,
    actor: Actor = Depends(company_admin),
    store: InMemoryStore = Depends(get_store),
):
    _company_appointment(store, actor, appt_id)
    # any status may follow any other
    store.update_appointment_status(appt_id, update.status)
    return store.get_appointment(appt_id)


@router.post("/appointments/{appt_id}/reminder", response_model=ReminderResponse)
def appointment_reminder(
    appt_id: str,
    actor: Actor = Depends(company_admin),
    store: InMemoryStore = Depends(get_store),
    provider=Depends(get_text_provider),
):
    appt = _company_appointment(store, actor, appt_id)
    company = store.get_company(appt.company_id)
    if company is None:
        raise HTTPException(status_code=404, detail="Empresa não encontrada.")
    message = generate_reminder_message(provider, appt, company.name)
    return {"appointment_id": appt.id, "message": message}


@router.get("/services", response_model=List[Service])
def list_services(
    actor: Actor = Depends(company_admin),
    store: InMemoryStore = Depends(get_store),
):
    return store.services_for_company(actor.company_id)


@router.post("/services", response_model=Service, status_code=201)
def create_service(
    payload: ServiceCreate,
    actor: Actor = Depends(company_admin),
    store: InMemoryStore = Depends(get_store),
):
    service = Service(
        id=new_id("srv"),
        company_id=actor.company_id,
        name=payload.name,
        duration_minutes=payload.duration_minutes,
        price=payload.price,
        color=payload.color,
    )
    store.add_service(service)
    return service


@router.delete("/services/{service_id}", status_code=204)
def remove_service(
    service_id: str,
    actor: Actor = Depends(company_admin),
    store: InMemoryStore = Depends(get_store),
):
    service = store.get_service(service_id)
    if service is None or service.company_id != actor.company_id:
        raise HTTPException(status_code=404, detail="Serviço não encontrado.")
    store.delete_service(service_id)
    return Response(status_code=204)


@router.get("/providers", response_model=List[User])
def list_providers(
    actor: Actor = Depends(company_admin),
    store: InMemoryStore = Depends(get_store),
):
    return store.providers_for_company(actor.company_id)


@router.get("/providers/{provider_id}/schedule", response_model=WeeklySchedule)
def get_schedule(
    provider_id: str,
    actor: Actor = Depends(company_admin),
    store: InMemoryStore = Depends(get_store),
):
    _company_provider(store, actor, provider_id)
    schedule = store.get_weekly_schedule(provider_id)
    if schedule is None:
        raise HTTPException(status_code=404, detail="Schedule not set")
    return schedule


@router.put("/providers/{provider_id}/schedule", response_model=WeeklySchedule)
def put_schedule(
    provider_id: str,
    payload: ScheduleUpdate,
    actor: Actor = Depends(company_admin),
    store: InMemoryStore = Depends(get_store),
):
    _company_provider(store, actor, provider_id)
    try:
        schedule = WeeklySchedule(provider_id=provider_id, schedule=payload.schedule)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    store.upsert_weekly_schedule(schedule)
    return schedule


@router.put("/providers/{provider_id}/exceptions", response_model=DayException)
def put_exception(
    provider_id: str,
    payload: DayExceptionUpsert,
    actor: Actor = Depends(company_admin),
    store: InMemoryStore = Depends(get_store),
):
    _company_provider(store, actor, provider_id)
    existing = store.get_day_exception(provider_id, payload.date)
    exception = DayException(
        id=existing.id if existing is not None else new_id("exc"),
        provider_id=provider_id,
        date=payload.date,
        is_open=payload.is_open,
        slots=payload.slots,
    )
    store.upsert_day_exception(exception)
    return exception


@router.get("/providers/{provider_id}/exceptions", response_model=List[DayException])
def list_exceptions(
    provider_id: str,
    actor: Actor = Depends(company_admin),
    store: InMemoryStore = Depends(get_store),
):
    _company_provider(store, actor, provider_id)
    return sorted(
        (e for e in store.day_exceptions if e.provider_id == provider_id),
        key=lambda e: e.date,
    )


@router.get("/finance", response_model=FinanceResponse)
def finance(
    actor: Actor = Depends(company_admin),
    store: InMemoryStore = Depends(get_store),
):
    records = store.financials_for_company(actor.company_id)
    return {"records": records, "summary": summarize(records)}


@router.post("/finance/analysis", response_model=AnalysisResponse)
def finance_analysis(
    actor: Actor = Depends(company_admin),
    store: InMemoryStore = Depends(get_store),
    provider=Depends(get_text_provider),
):
    records = store.financials_for_company(actor.company_id)
    return {"analysis": summarize_financials(provider, records)}


@router.get("/share-link", response_model=ShareLinkResponse)
def get_share_link(
    actor: Actor = Depends(company_admin),
    store: InMemoryStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
):
    company = store.get_company(actor.company_id)
    if company is None:
        raise HTTPException(status_code=404, detail="Empresa não encontrada.")
    return {"slug": company.slug, "link": share_link(settings.public_base_url, company)}
