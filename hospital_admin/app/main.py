from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from hospital_admin.app.api.v1.api import api_router
from hospital_admin.app.core.config import settings
from hospital_admin.app.core.database import Base, engine
from hospital_admin.app.core.logging_config import configure_logging
from hospital_admin.app.models import inventory, supplier  # noqa: F401  (register tables)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    configure_logging()
    Base.metadata.create_all(bind=engine)
    yield


app = FastAPI(title="Hospital Admin: Pharmacy Payables", lifespan=lifespan)

# ─── CORS: dashboard frontend only ───────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
    allow_headers=["Authorization", "Content-Type", "Accept"],
)

app.include_router(api_router)
