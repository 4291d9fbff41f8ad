# staff-auth/staff_auth/api/api.py
from fastapi import APIRouter

from staff_auth.api.endpoints import auth, protected

api_router = APIRouter()

api_router.include_router(auth.router, tags=["Auth"])
api_router.include_router(protected.router, tags=["Protected"])
