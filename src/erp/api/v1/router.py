from fastapi import APIRouter

from src.erp.api.v1 import auth, projects, stages, templates, warehouse

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(auth.router)
api_router.include_router(projects.router)
api_router.include_router(stages.router)
api_router.include_router(warehouse.router)
api_router.include_router(templates.router)
