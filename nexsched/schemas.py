# nexsched/schemas.py

from datetime import datetime, date as Date
from decimal import Decimal
from typing import Any, List, Optional

from pydantic import BaseModel, Field

from .models import (
    DEFAULT_SERVICE_COLOR,
    Appointment,
    AppointmentStatus,
    DaySchedule,
    FinancialRecord,
    FormField,
    Service,
    SubscriptionPlan,
    TimeSlot,
    User,
    UserRole,
)


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


class ClientPublic(BaseModel):
    id: str
    name: str
    email: str
    phone: str
    created_at: datetime


class LoginRequest(BaseModel):
    email: str
    role: UserRole = UserRole.client
    password: Optional[str] = None


class LoginResponse(Token):
    role: UserRole
    user: Optional[User] = None
    client: Optional[ClientPublic] = None


class RegisterRequest(BaseModel):
    email: str
    password: str = Field(min_length=6, max_length=72)
    name: str
    role: UserRole = UserRole.client


class ProfilePublic(BaseModel):
    id: str
    email: str
    name: str
    role: UserRole
    company_id: Optional[str] = None


class SessionState(BaseModel):
    user: Optional[User] = None
    client: Optional[ClientPublic] = None
    demo_mode: bool


class MeResponse(BaseModel):
    role: UserRole
    user: Optional[User] = None
    client: Optional[ClientPublic] = None


class CompanySummary(BaseModel):
    id: str
    name: str
    slug: str
    theme_color: str
    is_active: bool
    subscription_plan: SubscriptionPlan


class CompanyPublic(BaseModel):
    id: str
    name: str
    slug: str
    logo_url: Optional[str] = None
    theme_color: str
    custom_form_fields: List[FormField]
    services: List[Service]


class BookingCreate(BaseModel):
    service_id: str
    start: datetime
    client_name: str
    client_phone: str
    provider_id: Optional[str] = None
    notes: Optional[str] = None
    custom_form_data: Optional[dict[str, Any]] = None


class AvailabilityResponse(BaseModel):
    provider_id: str
    date: Date
    is_open: bool
    slots: List[TimeSlot]
    available_starts: List[str]


class StatusUpdate(BaseModel):
    status: AppointmentStatus


class ServiceCreate(BaseModel):
    name: str
    duration_minutes: int = Field(default=30, gt=0)
    price: Decimal = Field(default=Decimal("0"), ge=0)
    color: str = DEFAULT_SERVICE_COLOR


class ScheduleUpdate(BaseModel):
    schedule: dict[int, DaySchedule]


class DayExceptionUpsert(BaseModel):
    date: Date
    is_open: bool
    slots: List[TimeSlot] = Field(default_factory=list)


class ReminderResponse(BaseModel):
    appointment_id: str
    message: str


class AnalysisResponse(BaseModel):
    analysis: str


class FinanceSummary(BaseModel):
    income: Decimal
    expenses: Decimal
    balance: Decimal
    count: int


class FinanceResponse(BaseModel):
    records: List[FinancialRecord]
    summary: FinanceSummary


class ShareLinkResponse(BaseModel):
    slug: str
    link: str


class CompanyDashboard(BaseModel):
    appointments: int
    pending: int
    revenue: Decimal
    services: int
    latest_appointments: List[Appointment]


class ClientDashboard(BaseModel):
    total: int
    upcoming: int
    next_appointment: Optional[Appointment] = None


class ClientProfileUpdate(BaseModel):
    name: str
    phone: str


class MasterOverview(BaseModel):
    companies: int
    active_companies: int
    staff_by_role: dict[str, int]
    clients: int
    appointments: int
    finance: FinanceSummary
