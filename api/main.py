"""
Ovo REST API - FastAPI application for the farm dashboard.
"""

import datetime as dt
from contextlib import asynccontextmanager
from decimal import Decimal
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from ovo import __version__
from ovo.config import Settings, load_settings
from ovo.dashboard import build_dashboard
from ovo.logging_config import configure_logging
from ovo.store.base import DataStore, Expense, ProductionRecord, RecordKind, Sale
from ovo.store.errors import DuplicateRecordError, RecordNotFoundError
from ovo.store.manager import StoreManager
from ovo.store.parsing import record_to_dict, to_category


def init_app(settings: Optional[Settings] = None, application: Optional[FastAPI] = None) -> StoreManager:
    """Create the store manager for the app. Replaces any previous one."""
    application = application or app
    previous = getattr(application.state, "manager", None)
    if previous is not None:
        previous.reset()
    settings = settings or load_settings()
    configure_logging(settings.log_level)
    manager = StoreManager(settings)
    manager.init()
    application.state.manager = manager
    return manager


@asynccontextmanager
async def lifespan(application: FastAPI):
    """Open the data store on startup and release it on shutdown."""
    manager = getattr(application.state, "manager", None)
    if manager is None:
        manager = init_app(application=application)
    else:
        manager.init()
    yield
    manager.reset()


# FastAPI app
app = FastAPI(
    title="Ovo API",
    description="Poultry farm dashboard - expenses, egg production and sales",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_manager(request: Request) -> StoreManager:
    manager = getattr(request.app.state, "manager", None)
    if manager is None:
        return init_app(application=request.app)
    return manager


def get_store(manager: StoreManager = Depends(get_manager)) -> DataStore:
    return manager.store


# Request models
class ExpenseRequest(BaseModel):
    """New expense."""
    category: str = Field("Other", description="Feed, Medicine or Other")
    description: str = Field("", description="What was bought")
    cost: Decimal = Field(..., ge=0, description="Amount spent")
    date: dt.date = Field(default_factory=dt.date.today)


class ProductionRequest(BaseModel):
    """New production record."""
    eggs_produced: int = Field(..., ge=0)
    feed_consumed_kg: Decimal = Field(Decimal("0"), ge=0)
    date: dt.date = Field(default_factory=dt.date.today)


class SaleRequest(BaseModel):
    """New sale."""
    quantity: int = Field(..., ge=0)
    value: Decimal = Field(..., ge=0)
    client: Optional[str] = None
    date: dt.date = Field(default_factory=dt.date.today)


def _store_record(store: DataStore, record) -> dict:
    try:
        stored = store.add(record)
    except DuplicateRecordError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return record_to_dict(stored)


# Routes
@app.get("/")
async def root():
    """API root - info."""
    return {
        "name": "Ovo API",
        "version": __version__,
        "description": "Poultry farm dashboard",
        "endpoints": {
            "dashboard": "/owners/{owner}/dashboard",
            "expenses": "/owners/{owner}/expenses",
            "production": "/owners/{owner}/production",
            "sales": "/owners/{owner}/sales",
        },
    }


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy", "timestamp": dt.datetime.now().isoformat()}


@app.get("/owners/{owner}/dashboard")
def get_dashboard(
    owner: str,
    window: Optional[int] = Query(None, gt=0, description="Days shown in the trend"),
    manager: StoreManager = Depends(get_manager),
):
    """Summary metrics, daily trend and cost distribution for an owner."""
    snapshot = manager.store.snapshot(owner)
    view = build_dashboard(snapshot, window or manager.settings.trend_window)
    return view.to_dict()


@app.get("/owners/{owner}/{kind}")
def list_records(owner: str, kind: RecordKind, store: DataStore = Depends(get_store)):
    """Records of one kind, newest first."""
    return [record_to_dict(r) for r in store.list_records(owner, kind)]


@app.post("/owners/{owner}/expenses", status_code=201)
def add_expense(owner: str, request: ExpenseRequest, store: DataStore = Depends(get_store)):
    record = Expense(
        id="",
        owner=owner,
        category=to_category(request.category),
        description=request.description,
        cost=request.cost,
        date=request.date,
    )
    return _store_record(store, record)


@app.post("/owners/{owner}/production", status_code=201)
def add_production(owner: str, request: ProductionRequest, store: DataStore = Depends(get_store)):
    record = ProductionRecord(
        id="",
        owner=owner,
        date=request.date,
        eggs_produced=request.eggs_produced,
        feed_consumed_kg=request.feed_consumed_kg,
    )
    return _store_record(store, record)


@app.post("/owners/{owner}/sales", status_code=201)
def add_sale(owner: str, request: SaleRequest, store: DataStore = Depends(get_store)):
    record = Sale(
        id="",
        owner=owner,
        date=request.date,
        quantity=request.quantity,
        value=request.value,
        client=request.client,
    )
    return _store_record(store, record)


@app.delete("/owners/{owner}/{kind}/{record_id}", status_code=204)
def delete_record(
    owner: str,
    kind: RecordKind,
    record_id: str,
    store: DataStore = Depends(get_store),
):
    try:
        store.delete(owner, kind, record_id)
    except RecordNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return Response(status_code=204)


# Run with: uvicorn api.main:app --reload
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
