"""
API Routes Package
"""
from fastapi import APIRouter

from .auth import router as auth_router
from .flights import router as flights_router
from .tickets import router as tickets_router
from .weather import router as weather_router
from .reports import router as reports_router
from .ai import router as ai_router

api_router = APIRouter()

api_router.include_router(auth_router, prefix="/auth", tags=["Auth"])
api_router.include_router(flights_router, prefix="/flights", tags=["Flights"])
api_router.include_router(tickets_router, prefix="/tickets", tags=["Tickets"])
api_router.include_router(weather_router, prefix="/weather", tags=["Weather"])
api_router.include_router(reports_router, prefix="/reports", tags=["Reports"])
api_router.include_router(ai_router, prefix="/ai", tags=["AI Analysis"])
