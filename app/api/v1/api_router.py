"""
Main API Router - Consolidates all module routes
"""

from fastapi import APIRouter
from app.api.v1 import equipment

api_router = APIRouter()

# Equipment inventory routes
api_router.include_router(equipment.router, prefix="/equipment", tags=["equipment"])
