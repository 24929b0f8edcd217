# Reports & Dashboards Feature - Router

from typing import Optional
from fastapi import APIRouter, Depends, Query
from medischedule.database import get_store
from medischedule.features.auth.dependencies import require_roles
from medischedule.features.reports.schemas import (
    UtilizationReportResponse,
    CountReportResponse,
    AdminDashboardResponse,
    DoctorDashboardResponse,
)
from medischedule.features.reports.service import ReportService
from medischedule.features.schedules.models import ISO_DATE_PATTERN
from medischedule.shared.schemas import Actor
from medischedule.store import DocumentStore


router = APIRouter(prefix="/reports", tags=["Reports"])


@router.get("/utilization", response_model=UtilizationReportResponse)
async def get_ot_utilization(
    month: Optional[str] = Query(None, pattern=r"^\d{4}-\d{2}$", description="YYYY-MM"),
    actor: Actor = Depends(require_roles("admin")),
    store: DocumentStore = Depends(get_store),
):
    """Operations and booked minutes per room per month."""
    return await ReportService.get_utilization(store, month)


@router.get("/procedures", response_model=CountReportResponse)
async def get_surgeries_by_procedure(
    actor: Actor = Depends(require_roles("admin")),
    store: DocumentStore = Depends(get_store),
):
    """Number of operations per procedure."""
    return await ReportService.get_surgeries_by_procedure(store)


@router.get("/doctors", response_model=CountReportResponse)
async def get_surgeries_per_doctor(
    actor: Actor = Depends(require_roles("admin")),
    store: DocumentStore = Depends(get_store),
):
    """Number of operations per doctor."""
    return await ReportService.get_surgeries_per_doctor(store)


@router.get("/dashboard/admin", response_model=AdminDashboardResponse)
async def get_admin_dashboard(
    date: Optional[str] = Query(None, pattern=ISO_DATE_PATTERN),
    actor: Actor = Depends(require_roles("admin")),
    store: DocumentStore = Depends(get_store),
):
    """
    Get the admin overview for a day.
    
    Returns:
    - Operation counts by status
    - Pending surgery requests
    - The day's operations with names resolved
    """
    return await ReportService.get_admin_dashboard(store, date)


@router.get("/dashboard/doctor", response_model=DoctorDashboardResponse)
async def get_doctor_dashboard(
    date: Optional[str] = Query(None, pattern=ISO_DATE_PATTERN),
    actor: Actor = Depends(require_roles("doctor")),
    store: DocumentStore = Depends(get_store),
):
    """Get the current doctor's day, next operation and overdue operations."""
    return await ReportService.get_doctor_dashboard(store, actor, date)
