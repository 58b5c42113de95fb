# tenantguard/main.py
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tenantguard.core.config import settings
from tenantguard.core.db import create_schema
from tenantguard.core.errors import register_exception_handlers
from tenantguard.core.tenancy import TenantHeaderMiddleware
from tenantguard.api.v1.auth import router as auth_router
from tenantguard.api.v1.tenants import router as tenants_router
from tenantguard.api.v1.users import router as users_router

APP_NAME = "tenantguard"
APP_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.DB_CREATE_SCHEMA:
        create_schema()
    yield


app = FastAPI(title="Tenantguard API", version=APP_VERSION, lifespan=lifespan)

# Added first so CORS (added last) wraps it and answers preflights.
app.add_middleware(TenantHeaderMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins or ["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)


@app.get("/")
def root():
    return {"name": APP_NAME, "version": APP_VERSION, "ok": True}


app.include_router(auth_router)
app.include_router(tenants_router)
app.include_router(users_router)
