"""Assistant API routes."""
import asyncio
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from bizcoach.assistant.engine import AssistantEngine
from bizcoach.assistant.exceptions import ClientNotFoundError
from bizcoach.assistant.schemas import (
    AnomalyFlag,
    BusinessCoaching,
    ClientBehavior,
    Insight,
    ProposedSale,
    ReminderScanResult,
    ReminderSuggestion,
    RiskScore,
    SalesForecast,
    VipScore,
)
from bizcoach.data.gateway import SqlAlchemyGateway
from bizcoach.database import get_db

router = APIRouter()


async def get_scan_lock(request: Request) -> asyncio.Lock:
    """App-wide lock serialising overdue scans across requests."""
    lock = getattr(request.app.state, "reminder_scan_lock", None)
    if lock is None:
        lock = asyncio.Lock()
        request.app.state.reminder_scan_lock = lock
    return lock


async def get_engine(
    db: AsyncSession = Depends(get_db),
    scan_lock: asyncio.Lock = Depends(get_scan_lock),
) -> AssistantEngine:
    """One engine per request, bound to the request's session."""
    return AssistantEngine(gateway=SqlAlchemyGateway(db), scan_lock=scan_lock)


# =============================================================================
# Credit
# =============================================================================

@router.get("/risk-scores", response_model=List[RiskScore])
async def get_risk_scores(engine: AssistantEngine = Depends(get_engine)):
    """
    Credit risk for every client who currently owes money.

    Riskiest clients first.
    """
    try:
        return await engine.calculate_credit_risk_scores()
    except Exception as e:
        raise HTTPException(
            status_code=500,
            detail=f"Error calculating risk scores: {str(e)}"
        )


@router.get("/reminders", response_model=List[ReminderSuggestion])
async def get_reminders(engine: AssistantEngine = Depends(get_engine)):
    """Suggested collection contacts, most urgent first."""
    try:
        return await engine.get_smart_reminders()
    except Exception as e:
        raise HTTPException(
            status_code=500,
            detail=f"Error building reminders: {str(e)}"
        )


@router.post("/reminders/scan", response_model=ReminderScanResult)
async def scan_overdue_reminders(engine: AssistantEngine = Depends(get_engine)):
    """
    Create reminders for overdue credit sales.

    Safe to call repeatedly: sales with an open reminder are skipped.
    """
    try:
        return await engine.create_overdue_reminders()
    except Exception as e:
        raise HTTPException(
            status_code=500,
            detail=f"Error scanning overdue credits: {str(e)}"
        )


# =============================================================================
# Sales
# =============================================================================

@router.post("/anomalies", response_model=List[AnomalyFlag])
async def check_sale(
    sale: ProposedSale,
    engine: AssistantEngine = Depends(get_engine),
):
    """Check a sale before it is recorded."""
    try:
        return await engine.detect_anomalies(sale)
    except Exception as e:
        raise HTTPException(
            status_code=500,
            detail=f"Error detecting anomalies: {str(e)}"
        )


@router.get("/insights", response_model=List[Insight])
async def get_insights(engine: AssistantEngine = Depends(get_engine)):
    try:
        return await engine.get_business_insights()
    except Exception as e:
        raise HTTPException(
            status_code=500,
            detail=f"Error generating insights: {str(e)}"
        )


@router.get("/forecast", response_model=SalesForecast)
async def get_forecast(engine: AssistantEngine = Depends(get_engine)):
    """End-of-month sales projection."""
    try:
        return await engine.get_sales_forecast()
    except Exception as e:
        raise HTTPException(
            status_code=500,
            detail=f"Error calculating forecast: {str(e)}"
        )


# =============================================================================
# Clients
# =============================================================================

@router.get("/vip", response_model=List[VipScore])
async def get_vip_scores(engine: AssistantEngine = Depends(get_engine)):
    try:
        return await engine.get_vip_scores()
    except Exception as e:
        raise HTTPException(
            status_code=500,
            detail=f"Error calculating VIP scores: {str(e)}"
        )


@router.get("/coaching", response_model=BusinessCoaching)
async def get_coaching(engine: AssistantEngine = Depends(get_engine)):
    try:
        return await engine.get_business_coaching()
    except Exception as e:
        raise HTTPException(
            status_code=500,
            detail=f"Error building coaching: {str(e)}"
        )


@router.get("/clients/{client_id}/behavior", response_model=ClientBehavior)
async def get_client_behavior(
    client_id: str,
    engine: AssistantEngine = Depends(get_engine),
):
    """Payment reliability for one client."""
    try:
        return await engine.analyze_client_behavior(client_id)
    except ClientNotFoundError:
        raise HTTPException(status_code=404, detail="Client not found")
    except Exception as e:
        raise HTTPException(
            status_code=500,
            detail=f"Error analysing client: {str(e)}"
        )
