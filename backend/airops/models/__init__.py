"""
Database Models Package
"""
from airops.models.flight import Flight, FlightStatus, DelayReason, FuelStatus, AircraftType
from airops.models.ticket import Ticket, DemandLevel, Season, CABIN_CLASSES
from airops.models.user import User, UserRole
from airops.models.login_activity import LoginActivity, LoginFailureReason

__all__ = [
    # Flight
    "Flight", "FlightStatus", "DelayReason", "FuelStatus", "AircraftType",
    # Ticket
    "Ticket", "DemandLevel", "Season", "CABIN_CLASSES",
    # User
    "User", "UserRole",
    # Login activity
    "LoginActivity", "LoginFailureReason",
]
