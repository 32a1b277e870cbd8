from fastapi import APIRouter
from gym_api.routers import (
    people, staff, plans, bookings, sessions, classes, duty_rosters, salaries, menu
)

# Centralized API router hub: main.py only imports this single hub.
api_router = APIRouter()

api_router.include_router(people.branch_router, tags=["Branches"])
api_router.include_router(people.user_router, tags=["Users"])
api_router.include_router(staff.router, tags=["Staff"])
api_router.include_router(plans.router, tags=["Plans"])
api_router.include_router(bookings.router, tags=["Plan Bookings"])
api_router.include_router(sessions.router, tags=["Training Sessions"])
api_router.include_router(classes.router, tags=["Group Classes"])
api_router.include_router(duty_rosters.router, tags=["Duty Roster"])
api_router.include_router(salaries.router, tags=["Salaries"])
api_router.include_router(menu.router, tags=["Navigation"])
