"""
HTTP API — the dashboard, report and transaction-listing endpoints.

Authentication is handled upstream; the authenticated owner arrives in the
``X-User-Id`` header.

Run locally:
    bizledger serve --config bizledger.yaml
"""

from __future__ import annotations

import logging
from datetime import date, datetime, time

from fastapi import APIRouter, Depends, FastAPI, Header, HTTPException, Query, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from bizledger import __version__
from bizledger.config import BizLedgerConfig
from bizledger.engine.ledger import to_reference
from bizledger.models.financial import TransactionFilters, TransactionType
from bizledger.service import BizLedger

logger = logging.getLogger("bizledger.api")

router = APIRouter(prefix="/api")


def get_owner_id(x_user_id: str | None = Header(None)) -> int:
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Missing user identity.")
    try:
        return int(x_user_id)
    except ValueError as exc:
        raise HTTPException(status_code=401, detail="Invalid user identity.") from exc


def get_ledger(request: Request) -> BizLedger:
    return request.app.state.ledger


def _parse_when(raw: str | None) -> date | datetime | None:
    """Parse an ISO date or date-time; ``None`` when missing or malformed.

    Offset-qualified date-times are converted to naive UTC, matching how the
    engine compares against stored transaction dates.
    """
    if not raw:
        return None
    try:
        if len(raw) == 10:
            return date.fromisoformat(raw)
        return to_reference(datetime.fromisoformat(raw.replace("Z", "+00:00")), None)
    except ValueError:
        return None


def _message(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message})


@router.get("/dashboard/stats")
async def dashboard_stats(
    owner_id: int = Depends(get_owner_id),
    ledger: BizLedger = Depends(get_ledger),
) -> JSONResponse:
    try:
        stats = await ledger.dashboard_stats(owner_id)
    except Exception:
        logger.exception("Dashboard stats failed for owner %s", owner_id)
        return _message(500, "Failed to fetch dashboard stats")
    return JSONResponse(stats.to_dict())


@router.get("/reports/financial")
async def financial_report(
    start_date: str | None = Query(None, alias="startDate"),
    end_date: str | None = Query(None, alias="endDate"),
    outlet: int | None = Query(None, ge=0),
    owner_id: int = Depends(get_owner_id),
    ledger: BizLedger = Depends(get_ledger),
) -> JSONResponse:
    start = _parse_when(start_date)
    end = _parse_when(end_date)
    if start is None or end is None:
        return _message(400, "Start date and end date are required")

    try:
        report = await ledger.financial_report(owner_id, start, end, outlet_id=outlet)
    except Exception:
        logger.exception("Financial report failed for owner %s", owner_id)
        return _message(500, "Failed to generate financial report")
    return JSONResponse(report.to_dict())


@router.get("/transactions")
async def list_transactions(
    start_date: str | None = Query(None, alias="startDate"),
    end_date: str | None = Query(None, alias="endDate"),
    category_id: int | None = Query(None, alias="categoryId"),
    type: TransactionType | None = Query(None),  # noqa: A002
    search: str | None = Query(None),
    page: int = Query(1, ge=1),
    limit: int | None = Query(None, ge=1),
    outlet: int | None = Query(None, ge=0),
    owner_id: int = Depends(get_owner_id),
    ledger: BizLedger = Depends(get_ledger),
) -> JSONResponse:
    api_config = ledger.config.api
    page_size = min(limit or api_config.default_page_size, api_config.max_page_size)

    start = _parse_when(start_date)
    end = _parse_when(end_date)
    if (start_date and start is None) or (end_date and end is None):
        return _message(400, "Invalid date filter")
    if isinstance(start, date) and not isinstance(start, datetime):
        start = datetime.combine(start, time.min)
    if isinstance(end, date) and not isinstance(end, datetime):
        end = datetime.combine(end, time.max)

    try:
        filters = TransactionFilters(
            start_date=start,
            end_date=end,
            category_id=category_id,
            type=type,
            search=search,
            outlet_id=outlet,
            limit=page_size,
            offset=(page - 1) * page_size,
        )
    except ValidationError as exc:
        return _message(400, f"Invalid filters: {exc.error_count()} error(s)")

    try:
        result = await ledger.list_transactions(owner_id, filters)
    except Exception:
        logger.exception("Transaction listing failed for owner %s", owner_id)
        return _message(500, "Failed to fetch transactions")
    return JSONResponse(result.model_dump(mode="json", by_alias=True))


def create_app(ledger: BizLedger | None = None, config: BizLedgerConfig | None = None) -> FastAPI:
    """Build the FastAPI application around a BizLedger instance."""
    if ledger is None:
        ledger = BizLedger(config=config or BizLedgerConfig.load())
        ledger._setup()

    app = FastAPI(title="BizLedger", version=__version__)
    app.state.ledger = ledger
    app.include_router(router)
    return app
