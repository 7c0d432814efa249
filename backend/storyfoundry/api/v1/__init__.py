"""API v1 router"""
from fastapi import APIRouter

from storyfoundry.api.v1.endpoints import auth, header, projects

api_router = APIRouter()
api_router.include_router(projects.router, prefix="/projects", tags=["Projects"])
api_router.include_router(header.router, tags=["Header"])
api_router.include_router(auth.router, prefix="/auth", tags=["Auth"])
