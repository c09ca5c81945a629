"""
AI Analysis API Routes

Heuristic route safety, dynamic pricing, delay, passenger flow and
maintenance predictions. Each endpoint gathers its signals, runs the
matching engine and returns the result in the response envelope.
"""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from datetime import datetime
import asyncio
import random
import structlog

from airops.analysis import calculate_optimal_pricing, calculate_safety_score, generate_alternative_routes
from airops.analysis.operations import (
    run_delay_prediction,
    run_maintenance_prediction,
    run_passenger_flow,
)
from airops.api.deps import CurrentUser, get_current_user, get_rng, get_weather_client
from airops.api.responses import success_response
from airops.config import settings
from airops.db.database import get_db
from airops.schemas import (
    DelayPredictionRequest,
    DynamicPricingRequest,
    MaintenancePredictionRequest,
    PassengerFlowRequest,
    RouteSafetyRequest,
)
from airops.tools.airspace_tools import get_airspace_assessment
from airops.tools.history_tools import get_route_history
from airops.tools.market_tools import analyze_competitor_pricing, get_market_analysis, predict_demand
from airops.tools.weather_tools import WeatherClient, get_route_weather

logger = structlog.get_logger()
router = APIRouter()


@router.post("/route-safety")
async def analyze_route_safety(
    payload: RouteSafetyRequest,
    current: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    rng: random.Random = Depends(get_rng),
    weather_client: WeatherClient = Depends(get_weather_client),
):
    """
    Score a direct route and propose transit alternatives when it scores
    below 80.
    """
    origin = (payload.origin or "").strip()
    destination = (payload.destination or "").strip()
    if not origin or not destination:
        raise HTTPException(status_code=400, detail="Origin and destination are required")

    try:
        weather, history = await asyncio.gather(
            get_route_weather(origin, destination, client=weather_client),
            get_route_history(db, origin, destination),
        )
        airspace = get_airspace_assessment(origin, destination, rng=rng)

        analysis = calculate_safety_score(weather, history, airspace, aircraft=payload.aircraft, rng=rng)
        alternatives = generate_alternative_routes(origin, destination, analysis, rng=rng)
    except Exception as e:
        logger.error("Route safety analysis failed", origin=origin, destination=destination, error=str(e))
        raise HTTPException(status_code=500, detail="Error analyzing route safety")

    logger.info(
        "Route safety analyzed",
        origin=origin,
        destination=destination,
        score=analysis.overall_score,
        risk_level=analysis.risk_level.value,
        alternatives=len(alternatives),
    )

    return success_response(data={
        "route": f"{origin} → {destination}",
        "safetyScore": analysis.overall_score,
        "riskLevel": analysis.risk_level.value,
        "analysis": analysis.categories(),
        "recommendations": analysis.recommendations,
        "alternativeRoutes": [alt.to_dict() for alt in alternatives],
        "conditions": {
            "origin": weather.origin.to_dict(),
            "destination": weather.destination.to_dict(),
            "history": history.to_dict(),
            "airspaceRestrictions": airspace.airspace_restrictions,
        },
        "generatedAt": datetime.utcnow().isoformat(),
    })


@router.post("/dynamic-pricing")
async def generate_dynamic_pricing(
    payload: DynamicPricingRequest,
    current: CurrentUser = Depends(get_current_user),
    rng: random.Random = Depends(get_rng),
):
    """
    Demand-scaled fares per cabin with market and competitor context.
    """
    route = payload.route or ""
    try:
        market = get_market_analysis(route, rng=rng)
        competitors = analyze_competitor_pricing(route, rng=rng)
        demand = predict_demand(route, rng=rng)

        pricing = calculate_optimal_pricing(
            market, competitors, demand, currency=settings.currency, rng=rng
        )
    except Exception as e:
        logger.error("Dynamic pricing failed", route=route, error=str(e))
        raise HTTPException(status_code=500, detail="Error generating AI pricing recommendations")

    return success_response(data={
        "flightNumber": payload.flight_number,
        "route": payload.route,
        "currentDemand": payload.current_demand.value,
        "pricingRecommendations": pricing.recommendations,
        "marketAnalysis": pricing.market,
        "demandForecast": pricing.demand.to_dict(),
        "competitorInsights": [c.to_dict() for c in pricing.competitors],
        "priceOptimization": pricing.optimal.to_dict(),
        "demandMultiplier": pricing.demand_multiplier,
        "revenueProjection": pricing.revenue_projection.to_dict(),
        "generatedAt": datetime.utcnow().isoformat(),
    })


@router.post("/delay-prediction")
async def predict_flight_delay(
    payload: DelayPredictionRequest,
    current: CurrentUser = Depends(get_current_user),
    rng: random.Random = Depends(get_rng),
):
    try:
        prediction = run_delay_prediction(
            payload.origin or "",
            payload.destination or "",
            aircraft=payload.aircraft,
            rng=rng,
        )
    except Exception as e:
        logger.error("Delay prediction failed", flight_number=payload.flight_number, error=str(e))
        raise HTTPException(status_code=500, detail="Error predicting flight delays")

    return success_response(data={
        "flightNumber": payload.flight_number,
        "delayProbability": prediction["probability"],
        "expectedDelay": prediction["expectedMinutes"],
        "confidenceLevel": prediction["confidence"],
        "riskFactors": prediction["factors"],
        "recommendations": prediction["recommendations"],
        "mitigation": prediction["mitigation"],
        "alternativeOptions": prediction["alternatives"],
        "trafficAnalysis": prediction["traffic"],
        "maintenanceStatus": prediction["maintenance"],
        "generatedAt": datetime.utcnow().isoformat(),
    })


@router.post("/passenger-flow")
async def optimize_passenger_flow(
    payload: PassengerFlowRequest,
    current: CurrentUser = Depends(get_current_user),
    rng: random.Random = Depends(get_rng),
):
    try:
        result = run_passenger_flow(payload.expected_passengers, payload.flight_schedule, rng=rng)
    except Exception as e:
        logger.error("Passenger flow optimization failed", terminal=payload.terminal_id, error=str(e))
        raise HTTPException(status_code=500, detail="Error optimizing passenger flow")

    capacity, flow, resources = result["capacity"], result["flow"], result["resources"]
    return success_response(data={
        "terminalId": payload.terminal_id,
        "timeSlot": payload.time_slot,
        "capacityUtilization": capacity["utilization"],
        "currentLoad": capacity["currentLoad"],
        "bottleneckPrediction": flow["bottlenecks"],
        "resourceAllocation": resources["allocation"],
        "recommendations": resources["recommendations"],
        "estimatedWaitTimes": flow["waitTimes"],
        "peakTimes": flow["peakTimes"],
        "optimizationScore": resources["score"],
        "generatedAt": datetime.utcnow().isoformat(),
    })


@router.post("/maintenance-prediction")
async def predict_maintenance(
    payload: MaintenancePredictionRequest,
    current: CurrentUser = Depends(get_current_user),
    rng: random.Random = Depends(get_rng),
):
    try:
        result = run_maintenance_prediction(payload.aircraft or "", payload.flight_hours, rng=rng)
    except Exception as e:
        logger.error("Maintenance prediction failed", aircraft=payload.aircraft, error=str(e))
        raise HTTPException(status_code=500, detail="Error predicting maintenance needs")

    usage, wear, priority = result["usage"], result["wear"], result["priority"]
    return success_response(data={
        "aircraft": payload.aircraft,
        "maintenanceScore": priority["score"],
        "urgencyLevel": priority["urgency"],
        "predictedIssues": wear["issues"],
        "recommendedActions": priority["actions"],
        "costEstimate": priority["cost"],
        "timeframe": priority["timeframe"],
        "riskAssessment": wear["risks"],
        "usageAnalysis": usage,
        "generatedAt": datetime.utcnow().isoformat(),
    })
