# nexsched/models.py

import uuid
from datetime import datetime, date as Date
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator, model_validator
from sqlmodel import SQLModel, Field as SQLField

GUEST_CLIENT_ID = "guest"
DEFAULT_SERVICE_COLOR = "#3b82f6"


def new_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex[:12]}"


def normalize_amount(amount: Decimal) -> Decimal:
    """Amounts are stored positive; the sign is carried by the record type."""
    return abs(amount)


class UserRole(str, Enum):
    master_admin = "MASTER_ADMIN"
    company_admin = "COMPANY_ADMIN"
    provider = "PROVIDER"
    client = "CLIENT"


STAFF_ROLES = (UserRole.master_admin, UserRole.company_admin, UserRole.provider)


class AppointmentStatus(str, Enum):
    pending = "PENDING"
    confirmed = "CONFIRMED"
    en_route = "EN_ROUTE"
    in_progress = "IN_PROGRESS"
    completed = "COMPLETED"
    cancelled = "CANCELLED"


class SubscriptionPlan(str, Enum):
    basic = "BASIC"
    pro = "PRO"
    enterprise = "ENTERPRISE"


class FormFieldType(str, Enum):
    text = "text"
    number = "number"
    email = "email"
    select = "select"
    checkbox = "checkbox"
    file = "file"


class FinancialType(str, Enum):
    income = "INCOME"
    expense = "EXPENSE"


class FormField(BaseModel):
    id: str
    label: str
    type: FormFieldType
    options: Optional[list[str]] = None  # for select
    required: bool = False


class Company(BaseModel):
    id: str
    name: str
    slug: str  # public booking url key
    logo_url: Optional[str] = None
    theme_color: str = "blue"
    is_active: bool = True
    subscription_plan: SubscriptionPlan = SubscriptionPlan.basic
    custom_form_fields: list[FormField] = Field(default_factory=list)


class User(BaseModel):
    id: str
    name: str
    email: str
    phone: str = ""
    role: UserRole
    company_id: Optional[str] = None  # None only for master admins
    avatar_url: Optional[str] = None
    specialty: Optional[str] = None  # providers

    @model_validator(mode="after")
    def _company_required_for_staff(self):
        if self.role == UserRole.client:
            raise ValueError("CLIENT is not a staff role")
        if self.role != UserRole.master_admin and not self.company_id:
            raise ValueError("company_id is required for non-master users")
        return self


class ClientUser(BaseModel):
    id: str
    name: str
    email: str
    phone: str = ""
    password_hash: str = ""
    created_at: datetime


class Service(BaseModel):
    id: str
    company_id: str
    name: str
    duration_minutes: int = Field(gt=0)
    price: Decimal = Field(ge=0)
    color: str = DEFAULT_SERVICE_COLOR


class Appointment(BaseModel):
    id: str
    company_id: str
    service_id: str
    provider_id: str
    client_id: str  # ClientUser.id or GUEST_CLIENT_ID
    client_name: str
    client_phone: str
    start: datetime
    end: datetime
    status: AppointmentStatus = AppointmentStatus.pending
    notes: Optional[str] = None
    custom_form_data: Optional[dict[str, Any]] = None

    @model_validator(mode="after")
    def _end_after_start(self):
        if self.end <= self.start:
            raise ValueError("end must be after start")
        return self


class FinancialRecord(BaseModel):
    id: str
    company_id: str
    amount: Decimal
    type: FinancialType
    date: Date
    description: str

    @field_validator("amount")
    @classmethod
    def _positive_amount(cls, value: Decimal) -> Decimal:
        return normalize_amount(value)

    @property
    def signed_amount(self) -> Decimal:
        if self.type == FinancialType.expense:
            return -self.amount
        return self.amount


class TimeSlot(BaseModel):
    start: str = Field(pattern=r"^\d{2}:\d{2}$")  # "08:00"
    end: str = Field(pattern=r"^\d{2}:\d{2}$")

    @field_validator("start", "end")
    @classmethod
    def _clock_time(cls, value: str) -> str:
        hours, minutes = value.split(":")
        if int(hours) > 23 or int(minutes) > 59:
            raise ValueError(f"invalid time of day: {value}")
        return value


class DaySchedule(BaseModel):
    is_open: bool = False
    slots: list[TimeSlot] = Field(default_factory=list)


class WeeklySchedule(BaseModel):
    provider_id: str
    schedule: dict[int, DaySchedule]  # 0 (Sun) .. 6 (Sat)

    @field_validator("schedule")
    @classmethod
    def _weekday_keys(cls, value: dict[int, DaySchedule]) -> dict[int, DaySchedule]:
        for day in value:
            if not (0 <= day <= 6):
                raise ValueError("weekday keys must be integers between 0 and 6")
        return value


class DayException(BaseModel):
    id: str
    provider_id: str
    date: Date
    is_open: bool
    slots: list[TimeSlot] = Field(default_factory=list)


class SessionRecord(SQLModel, table=True):
    __tablename__ = "session_records"

    key: str = SQLField(primary_key=True)
    value: str
    updated_at: datetime
