from fastapi import APIRouter
from insight_backend.api.endpoints import contact, health

api_router = APIRouter(prefix="/api")

api_router.include_router(health.router, tags=["Health"])
api_router.include_router(contact.router, tags=["Contact"])
