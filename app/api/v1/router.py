from fastapi import APIRouter

# Auth
from app.api.v1.public.auth import router as auth_router

# Public: courts & slot availability
from app.api.v1.public.courts import router as courts_router

# Public: bookings
from app.api.v1.public.bookings import router as bookings_router

# Owner
from app.api.v1.owner.venues import router as owner_venues_router, booking_router as owner_bookings_router

# Admin / payment integration
from app.api.v1.admin.payments import router as payments_router

api_router = APIRouter()

# --- Auth ---
api_router.include_router(auth_router)

# --- Public ---
api_router.include_router(courts_router)
api_router.include_router(bookings_router)

# --- Owner ---
api_router.include_router(owner_venues_router)
api_router.include_router(owner_bookings_router)

# --- Payments ---
api_router.include_router(payments_router)
