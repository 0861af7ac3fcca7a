# nexsched/finance.py

from datetime import datetime
from decimal import Decimal
from typing import Any, Iterable, Optional

from .models import AppointmentStatus, FinancialRecord, FinancialType, UserRole
from .store import InMemoryStore

RECENT_APPOINTMENTS_LIMIT = 5


def summarize(records: Iterable[FinancialRecord]) -> dict[str, Any]:
    income = Decimal("0")
    expenses = Decimal("0")
    count = 0
    for rec in records:
        count += 1
        if rec.type == FinancialType.income:
            income += rec.amount
        else:
            expenses += rec.amount
    return {
        "income": income,
        "expenses": expenses,
        "balance": income - expenses,
        "count": count,
    }


def company_dashboard(store: InMemoryStore, company_id: str) -> dict[str, Any]:
    appts = store.appointments_for_company(company_id)
    totals = summarize(store.financials_for_company(company_id))
    latest = sorted(appts, key=lambda a: a.start, reverse=True)[:RECENT_APPOINTMENTS_LIMIT]
    return {
        "appointments": len(appts),
        "pending": sum(1 for a in appts if a.status == AppointmentStatus.pending),
        "revenue": totals["income"],
        "services": len(store.services_for_company(company_id)),
        "latest_appointments": latest,
    }


def client_dashboard(store: InMemoryStore, client_id: str, now: Optional[datetime] = None) -> dict[str, Any]:
    now = now or datetime.now()
    appts = store.appointments_for_client(client_id)
    upcoming = sorted((a for a in appts if a.start > now), key=lambda a: a.start)
    return {
        "total": len(appts),
        "upcoming": len(upcoming),
        "next_appointment": upcoming[0] if upcoming else None,
    }


def master_overview(store: InMemoryStore) -> dict[str, Any]:
    staff_by_role = {role.value: 0 for role in (UserRole.master_admin, UserRole.company_admin, UserRole.provider)}
    for u in store.users:
        staff_by_role[u.role.value] += 1
    return {
        "companies": len(store.companies),
        "active_companies": sum(1 for c in store.companies if c.is_active),
        "staff_by_role": staff_by_role,
        "clients": len(store.client_users),
        "appointments": len(store.appointments),
        "finance": summarize(store.financials),
    }
