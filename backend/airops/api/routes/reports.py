"""
Report API Routes
"""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
import structlog

from airops.api.deps import CurrentUser, get_current_user
from airops.api.responses import success_response
from airops.config import settings
from airops.db.database import get_db
from airops.tools.report_tools import (
    build_daily_report,
    build_financial_report,
    build_monthly_report,
    build_performance_report,
    build_weekly_report,
)

logger = structlog.get_logger()
router = APIRouter()


@router.get("/daily")
async def daily_report(
    current: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    try:
        report = await build_daily_report(db)
    except SQLAlchemyError as e:
        logger.error("Daily report failed", error=str(e))
        raise HTTPException(status_code=500, detail="Error generating daily report")
    return success_response(data=report)


@router.get("/weekly")
async def weekly_report(
    current: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    try:
        report = await build_weekly_report(db)
    except SQLAlchemyError as e:
        logger.error("Weekly report failed", error=str(e))
        raise HTTPException(status_code=500, detail="Error generating weekly report")
    return success_response(data=report)


@router.get("/monthly")
async def monthly_report(
    current: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    try:
        report = await build_monthly_report(db)
    except SQLAlchemyError as e:
        logger.error("Monthly report failed", error=str(e))
        raise HTTPException(status_code=500, detail="Error generating monthly report")
    return success_response(data=report)


@router.get("/performance")
async def performance_report(
    current: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    try:
        report = await build_performance_report(db)
    except SQLAlchemyError as e:
        logger.error("Performance report failed", error=str(e))
        raise HTTPException(status_code=500, detail="Error generating performance report")
    return success_response(data=report)


@router.get("/financial")
async def financial_report(
    current: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    try:
        report = await build_financial_report(db, currency=settings.currency)
    except SQLAlchemyError as e:
        logger.error("Financial report failed", error=str(e))
        raise HTTPException(status_code=500, detail="Error generating financial report")
    return success_response(data=report)
