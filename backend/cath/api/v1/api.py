"""
Main API router aggregator
"""
from fastapi import APIRouter

from cath.api.v1.endpoints import health, publication

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["Health"])
api_router.include_router(publication.router, prefix="/publication", tags=["Publication"])
