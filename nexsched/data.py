# nexsched/data.py
"""Fixed sample data the in-memory store is seeded with."""

from datetime import date, datetime, time, timezone
from decimal import Decimal
from functools import lru_cache

from .auth import hash_password
from .models import (
    Appointment,
    AppointmentStatus,
    ClientUser,
    Company,
    DayException,
    DaySchedule,
    FinancialRecord,
    FinancialType,
    FormField,
    FormFieldType,
    Service,
    SubscriptionPlan,
    TimeSlot,
    User,
    UserRole,
    WeeklySchedule,
)

DEMO_CLIENT_PASSWORD = "123456"


@lru_cache(maxsize=1)
def _demo_password_hash() -> str:
    return hash_password(DEMO_CLIENT_PASSWORD)


def sample_companies() -> list[Company]:
    return [
        Company(
            id="c1",
            name="Clínica TechHealth",
            slug="tech-health",
            theme_color="blue",
            is_active=True,
            subscription_plan=SubscriptionPlan.pro,
            custom_form_fields=[
                FormField(id="f1", label="Alergias", type=FormFieldType.text, required=False),
                FormField(
                    id="f2",
                    label="Convênio Médico",
                    type=FormFieldType.select,
                    options=["Unimed", "Bradesco Saúde", "Particular"],
                    required=True,
                ),
            ],
        ),
        Company(
            id="c2",
            name="Barbearia Elite",
            slug="elite-barber",
            theme_color="slate",
            is_active=True,
            subscription_plan=SubscriptionPlan.basic,
            custom_form_fields=[
                FormField(id="f3", label="Estilo Preferido", type=FormFieldType.text, required=True),
            ],
        ),
    ]


def sample_users() -> list[User]:
    return [
        User(id="u1", name="Administrador Geral", email="master@nexsched.com", phone="000",
             role=UserRole.master_admin),
        User(id="u2", name="Dra. Sarah Silva", email="sarah@techhealth.com", phone="11999990000",
             role=UserRole.company_admin, company_id="c1"),
        User(id="u3", name="João Santos", email="joao@techhealth.com", phone="11999991111",
             role=UserRole.provider, company_id="c1", specialty="Clínico Geral"),
        User(id="u4", name="Mike Tesoura", email="mike@elitebarber.com", phone="11999992222",
             role=UserRole.company_admin, company_id="c2", specialty="Barbeiro Sênior"),
    ]


def sample_client_users() -> list[ClientUser]:
    return [
        ClientUser(
            id="cli1",
            name="Alice Ferreira",
            email="alice@email.com",
            phone="5511987654321",
            password_hash=_demo_password_hash(),
            created_at=datetime(2023, 1, 15, 10, 0, tzinfo=timezone.utc),
        ),
        ClientUser(
            id="cli2",
            name="Roberto Oliveira",
            email="roberto@email.com",
            phone="5511912345678",
            password_hash=_demo_password_hash(),
            created_at=datetime(2023, 2, 20, 14, 30, tzinfo=timezone.utc),
        ),
    ]


def sample_services() -> list[Service]:
    return [
        Service(id="s1", company_id="c1", name="Consulta Geral", duration_minutes=30,
                price=Decimal("200"), color="#3b82f6"),
        Service(id="s2", company_id="c1", name="Limpeza Dental", duration_minutes=60,
                price=Decimal("350"), color="#10b981"),
        Service(id="s3", company_id="c2", name="Corte & Barba", duration_minutes=45,
                price=Decimal("80"), color="#64748b"),
    ]


def sample_appointments(today: date) -> list[Appointment]:
    # both sample appointments fall on the day the store is seeded
    return [
        Appointment(
            id="a1",
            company_id="c1",
            service_id="s1",
            provider_id="u3",
            client_id="cli1",
            client_name="Alice Ferreira",
            client_phone="5511987654321",
            start=datetime.combine(today, time(10, 0)),
            end=datetime.combine(today, time(10, 30)),
            status=AppointmentStatus.confirmed,
            notes="Primeira visita",
            custom_form_data={"Alergias": "Amendoim"},
        ),
        Appointment(
            id="a2",
            company_id="c1",
            service_id="s2",
            provider_id="u3",
            client_id="cli2",
            client_name="Roberto Oliveira",
            client_phone="5511912345678",
            start=datetime.combine(today, time(14, 0)),
            end=datetime.combine(today, time(15, 0)),
            status=AppointmentStatus.pending,
        ),
    ]


def sample_financials() -> list[FinancialRecord]:
    return [
        FinancialRecord(id="fin1", company_id="c1", amount=Decimal("200"), type=FinancialType.income,
                        date=date(2023, 10, 25), description="Taxa de Consulta"),
        FinancialRecord(id="fin2", company_id="c1", amount=Decimal("350"), type=FinancialType.income,
                        date=date(2023, 10, 26), description="Procedimento Dental"),
        # recorded pre-negated upstream; the model normalises it
        FinancialRecord(id="fin3", company_id="c1", amount=Decimal("-500"), type=FinancialType.expense,
                        date=date(2023, 10, 20), description="Materiais Médicos"),
        FinancialRecord(id="fin4", company_id="c2", amount=Decimal("80"), type=FinancialType.income,
                        date=date(2023, 10, 25), description="Corte de Cabelo"),
    ]


def _slots(*pairs: tuple[str, str]) -> list[TimeSlot]:
    return [TimeSlot(start=start, end=end) for start, end in pairs]


def sample_weekly_schedules() -> list[WeeklySchedule]:
    weekday = _slots(("09:00", "12:00"), ("13:00", "18:00"))
    return [
        WeeklySchedule(
            provider_id="u3",
            schedule={
                0: DaySchedule(is_open=False),
                1: DaySchedule(is_open=True, slots=weekday),
                2: DaySchedule(is_open=True, slots=weekday),
                3: DaySchedule(is_open=True, slots=weekday),
                4: DaySchedule(is_open=True, slots=weekday),
                5: DaySchedule(is_open=True, slots=_slots(("09:00", "13:00"))),
                6: DaySchedule(is_open=False),
            },
        )
    ]


def sample_day_exceptions() -> list[DayException]:
    return [
        DayException(id="exc1", provider_id="u3", date=date(2023, 12, 25), is_open=False),  # Christmas
    ]
