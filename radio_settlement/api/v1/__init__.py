"""
API v1 router initialization and setup.
"""
from fastapi import APIRouter
from .endpoints import submissions, stations, bands

api_router = APIRouter()

api_router.include_router(
    submissions.router,
    prefix="/submissions",
    tags=["submissions"]
)

api_router.include_router(
    stations.router,
    prefix="/stations",
    tags=["stations"]
)

api_router.include_router(
    bands.router,
    prefix="/bands",
    tags=["bands"]
)
