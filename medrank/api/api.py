from fastapi import APIRouter
from medrank.api.endpoints import analysis, dashboard, export, form, subjects, tests

api_router = APIRouter()
api_router.include_router(subjects.router, prefix="/subjects", tags=["subjects"])
api_router.include_router(tests.router, prefix="/tests", tags=["tests"])
api_router.include_router(form.router, prefix="/form", tags=["form"])
api_router.include_router(dashboard.router, tags=["dashboard"])
api_router.include_router(export.router, prefix="/export", tags=["export"])
api_router.include_router(analysis.router, prefix="/analysis", tags=["analysis"])

@api_router.get("/health", tags=["health"])
async def health_check():
    return {"status": "ok"}
