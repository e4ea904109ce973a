from fastapi import APIRouter

from design_cms.api.routes import admin, admin_pages, ai, auth, public, utils

api_router = APIRouter()
api_router.include_router(public.router, prefix="/public", tags=["public"])
api_router.include_router(admin.router, prefix="/admin", tags=["admin"])
api_router.include_router(ai.router, prefix="/ai", tags=["ai"])
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(utils.router)

# Page-level namespace guarded by AdminSessionMiddleware
pages_router = APIRouter()
pages_router.include_router(admin_pages.router, prefix="/admin", tags=["admin-pages"])
