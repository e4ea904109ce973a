import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.routing import APIRoute
from sqlmodel import Session
from starlette.middleware.cors import CORSMiddleware

from design_cms.api.errors import register_exception_handlers
from design_cms.api.main import api_router, pages_router
from design_cms.api.middleware import AdminSessionMiddleware
from design_cms.core.config import settings
from design_cms.core.db import create_db_and_tables, engine, init_db
from design_cms.core.logging import setup_logging

logger = logging.getLogger(__name__)


def custom_generate_unique_id(route: APIRoute) -> str:
    return f"{route.tags[0]}-{route.name}" if route.tags else route.name


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    create_db_and_tables()
    with Session(engine) as session:
        init_db(session)
    logger.info("%s started (%s)", settings.PROJECT_NAME, settings.ENVIRONMENT)
    yield


def create_app(*, with_lifespan: bool = True) -> FastAPI:
    setup_logging()
    app = FastAPI(
        title=settings.PROJECT_NAME,
        openapi_url=f"{settings.API_PREFIX}/openapi.json",
        generate_unique_id_function=custom_generate_unique_id,
        lifespan=lifespan if with_lifespan else None,
    )

    if settings.all_cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.all_cors_origins,
            # Browsers refuse credentialed requests against a wildcard origin.
            allow_credentials=settings.all_cors_origins != ["*"],
            allow_methods=["GET", "OPTIONS"] if settings.all_cors_origins == ["*"] else ["*"],
            allow_headers=["Content-Type", "Authorization"],
        )
    app.add_middleware(AdminSessionMiddleware)

    register_exception_handlers(app)
    app.include_router(api_router, prefix=settings.API_PREFIX)
    app.include_router(pages_router)
    return app


app = create_app()
