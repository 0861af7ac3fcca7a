# nexsched/routers/master_routes.py

from typing import List

from fastapi import APIRouter, Depends

from nexsched.auth import Actor
from nexsched.deps import get_store, master_admin
from nexsched.finance import master_overview, summarize
from nexsched.schemas import CompanySummary, FinanceResponse, MasterOverview
from nexsched.store import InMemoryStore

router = APIRouter(
    prefix="/master",
    tags=["master"],
)


@router.get("/overview", response_model=MasterOverview)
def overview(
    actor: Actor = Depends(master_admin),
    store: InMemoryStore = Depends(get_store),
):
    return master_overview(store)


@router.get("/companies", response_model=List[CompanySummary])
def companies(
    actor: Actor = Depends(master_admin),
    store: InMemoryStore = Depends(get_store),
):
    return [c.model_dump() for c in store.companies]


@router.get("/finance", response_model=FinanceResponse)
def global_finance(
    actor: Actor = Depends(master_admin),
    store: InMemoryStore = Depends(get_store),
):
    return {"records": store.financials, "summary": summarize(store.financials)}
