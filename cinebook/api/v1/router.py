from fastapi import APIRouter

# Auth
from cinebook.api.v1.public.auth import router as auth_router

# Public: showtimes, seat map, quotes
from cinebook.api.v1.public.showtimes import router as showtimes_router

# Public: bookings
from cinebook.api.v1.public.bookings import router as bookings_router

# Public: user profile & membership
from cinebook.api.v1.public.me import router as me_router

# Admin
from cinebook.api.v1.admin.showtimes import router as admin_showtimes_router
from cinebook.api.v1.admin.bookings import router as admin_bookings_router

api_router = APIRouter()

# --- Auth ---
api_router.include_router(auth_router)

# --- Public ---
api_router.include_router(showtimes_router)
api_router.include_router(bookings_router)
api_router.include_router(me_router)

# --- Admin ---
api_router.include_router(admin_showtimes_router)
api_router.include_router(admin_bookings_router)
