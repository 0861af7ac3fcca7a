# nexsched/store.py

import logging
import threading
from datetime import date as Date
from typing import Optional

from . import data
from .errors import DuplicateSlugError
from .models import (
    Appointment,
    AppointmentStatus,
    ClientUser,
    Company,
    DayException,
    FinancialRecord,
    Service,
    User,
    UserRole,
    WeeklySchedule,
)

logger = logging.getLogger(__name__)


class InMemoryStore:
    """Authoritative collections for one running application.

    Mutations are best-effort CRUD: they never reject input and never raise,
    with the single exception of duplicate company slugs.
    """

    def __init__(
        self,
        companies: Optional[list[Company]] = None,
        users: Optional[list[User]] = None,
        client_users: Optional[list[ClientUser]] = None,
        services: Optional[list[Service]] = None,
        appointments: Optional[list[Appointment]] = None,
        financials: Optional[list[FinancialRecord]] = None,
        weekly_schedules: Optional[list[WeeklySchedule]] = None,
        day_exceptions: Optional[list[DayException]] = None,
    ):
        self._lock = threading.Lock()
        self.companies: list[Company] = []
        for company in companies or []:
            self.add_company(company)
        self.users: list[User] = list(users or [])
        self.client_users: list[ClientUser] = list(client_users or [])
        self.services: list[Service] = list(services or [])
        self.appointments: list[Appointment] = list(appointments or [])
        self.financials: list[FinancialRecord] = list(financials or [])
        self.weekly_schedules: list[WeeklySchedule] = list(weekly_schedules or [])
        self.day_exceptions: list[DayException] = list(day_exceptions or [])

    @classmethod
    def seeded(cls, today: Optional[Date] = None) -> "InMemoryStore":
        today = today or Date.today()
        return cls(
            companies=data.sample_companies(),
            users=data.sample_users(),
            client_users=data.sample_client_users(),
            services=data.sample_services(),
            appointments=data.sample_appointments(today),
            financials=data.sample_financials(),
            weekly_schedules=data.sample_weekly_schedules(),
            day_exceptions=data.sample_day_exceptions(),
        )

    # --- companies -------------------------------------------------------

    def add_company(self, company: Company) -> None:
        with self._lock:
            if any(c.slug == company.slug for c in self.companies):
                raise DuplicateSlugError(f"Slug already in use: {company.slug}")
            self.companies.append(company)

    def get_company(self, company_id: Optional[str]) -> Optional[Company]:
        for c in self.companies:
            if c.id == company_id:
                return c
        return None

    def get_company_by_slug(self, slug: str) -> Optional[Company]:
        # exact, case-sensitive match
        for c in self.companies:
            if c.slug == slug:
                return c
        return None

    # --- staff and clients -----------------------------------------------

    def add_user(self, user: User) -> None:
        with self._lock:
            self.users.append(user)

    def get_user(self, user_id: str) -> Optional[User]:
        for u in self.users:
            if u.id == user_id:
                return u
        return None

    def find_user_by_email(self, email: str) -> Optional[User]:
        for u in self.users:
            if u.email == email:
                return u
        return None

    def providers_for_company(self, company_id: str) -> list[User]:
        return [
            u for u in self.users
            if u.company_id == company_id and u.role in (UserRole.provider, UserRole.company_admin)
        ]

    def add_client(self, client: ClientUser) -> None:
        with self._lock:
            self.client_users.append(client)

    def get_client(self, client_id: str) -> Optional[ClientUser]:
        for c in self.client_users:
            if c.id == client_id:
                return c
        return None

    def find_client_by_email(self, email: str) -> Optional[ClientUser]:
        for c in self.client_users:
            if c.email == email:
                return c
        return None

    def update_client_profile(self, client: ClientUser) -> None:
        with self._lock:
            self.client_users = [client if c.id == client.id else c for c in self.client_users]

    # --- services --------------------------------------------------------

    def add_service(self, service: Service) -> None:
        with self._lock:
            self.services.append(service)
        logger.info("Service %s added", service.id, extra={"company_id": service.company_id})

    def delete_service(self, service_id: str) -> None:
        with self._lock:
            self.services = [s for s in self.services if s.id != service_id]

    def get_service(self, service_id: str) -> Optional[Service]:
        for s in self.services:
            if s.id == service_id:
                return s
        return None

    def services_for_company(self, company_id: str) -> list[Service]:
        return [s for s in self.services if s.company_id == company_id]

    # --- appointments ----------------------------------------------------

    def add_appointment(self, appt: Appointment) -> None:
        # no conflict check: double-booking is allowed here
        with self._lock:
            self.appointments.append(appt)
        logger.info("Appointment %s added", appt.id, extra={"company_id": appt.company_id})

    def update_appointment_status(self, appt_id: str, status: AppointmentStatus) -> None:
        with self._lock:
            self.appointments = [
                a.model_copy(update={"status": status}) if a.id == appt_id else a
                for a in self.appointments
            ]

    def get_appointment(self, appt_id: str) -> Optional[Appointment]:
        for a in self.appointments:
            if a.id == appt_id:
                return a
        return None

    def appointments_for_company(self, company_id: str) -> list[Appointment]:
        return [a for a in self.appointments if a.company_id == company_id]

    def appointments_for_client(self, client_id: str) -> list[Appointment]:
        return [a for a in self.appointments if a.client_id == client_id]

    def appointments_for_provider(self, provider_id: str, on_date: Optional[Date] = None) -> list[Appointment]:
        return [
            a for a in self.appointments
            if a.provider_id == provider_id and (on_date is None or a.start.date() == on_date)
        ]

    # --- finance ---------------------------------------------------------

    def financials_for_company(self, company_id: str) -> list[FinancialRecord]:
        return [f for f in self.financials if f.company_id == company_id]

    # --- availability ----------------------------------------------------

    def upsert_weekly_schedule(self, schedule: WeeklySchedule) -> None:
        with self._lock:
            for idx, existing in enumerate(self.weekly_schedules):
                if existing.provider_id == schedule.provider_id:
                    self.weekly_schedules[idx] = schedule
                    return
            self.weekly_schedules.append(schedule)

    def get_weekly_schedule(self, provider_id: str) -> Optional[WeeklySchedule]:
        for s in self.weekly_schedules:
            if s.provider_id == provider_id:
                return s
        return None

    def upsert_day_exception(self, exception: DayException) -> None:
        with self._lock:
            for idx, existing in enumerate(self.day_exceptions):
                if existing.provider_id == exception.provider_id and existing.date == exception.date:
                    self.day_exceptions[idx] = exception
                    return
            self.day_exceptions.append(exception)

    def get_day_exception(self, provider_id: str, on_date: Date) -> Optional[DayException]:
        for e in self.day_exceptions:
            if e.provider_id == provider_id and e.date == on_date:
                return e
        return None
