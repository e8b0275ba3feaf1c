from typing import List
from fastapi import APIRouter, Depends, HTTPException, Query
from .schemas import CategoryPerformance, CategoryShare, Dashboard, SeriesPoint
from ..config import default_hidden
from ..pipeline.orchestrator import dashboard_for, distribution_for, performance_for, series_for
from ..pipeline.views import UnknownViewError, resolve_view
from ..providers.store_adapter import StoreAdapter

router = APIRouter()


def get_store():
    store = StoreAdapter()
    try:
        yield store
    finally:
        store.close()


def _hidden(hidden: List[str] | None) -> set[str]:
    if hidden is None:
        return default_hidden()
    return {h.strip().upper() for h in hidden if h and h.strip()}


def _view(view: str) -> str:
    try:
        return resolve_view(view)
    except UnknownViewError as e:
        raise HTTPException(404, str(e))


@router.get(
    '/health',
    summary="Health check",
    description="Returns service liveness.",
    tags=["Health"],
)
def health():
    return {'ok': True}

@router.get(
    '/subjects/{subject}/series/{view}',
    response_model=List[SeriesPoint],
    summary="Chart series",
    description=(
        "Quarterly peak series for view=overall; trailing 12-month forward-filled "
        "series for a tracked category (RENDA_FIXA_POS, RENDA_FIXA_IPCA, ACOES)."
    ),
    tags=["Series"],
)
def series(subject: str, view: str, store: StoreAdapter = Depends(get_store)):
    return series_for(store, subject, _view(view))

@router.get(
    '/subjects/{subject}/distribution',
    response_model=List[CategoryShare],
    summary="Category distribution",
    description="Share of each category in the portfolio. Hidden categories are removed and the rest renormalized.",
    tags=["Distribution"],
)
def distribution(subject: str, hidden: List[str] | None = Query(default=None), store: StoreAdapter = Depends(get_store)):
    return distribution_for(store, subject, _hidden(hidden))

@router.get(
    '/subjects/{subject}/performance',
    response_model=List[CategoryPerformance],
    summary="Category performance",
    description="Month-over-month change per tracked category, net of deposits and withdrawals. Null means insufficient data.",
    tags=["Performance"],
)
def performance(subject: str, store: StoreAdapter = Depends(get_store)):
    return performance_for(store, subject)

@router.get(
    '/subjects/{subject}/dashboard',
    response_model=Dashboard,
    summary="Dashboard payload",
    description="Series, distribution, performance and headline summary in one response.",
    tags=["Dashboard"],
)
def dashboard(
    subject: str,
    view: str = 'overall',
    hidden: List[str] | None = Query(default=None),
    store: StoreAdapter = Depends(get_store),
):
    return dashboard_for(store, subject, _view(view), _hidden(hidden))
