from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config.logging import setup_logging
from config.settings import settings
from routers import (
    detailed_employees,
    employees,
    managers,
    supervisors,
)
from services.database import AsyncSessionLocal, close_db, init_db
from services.hypermedia import Hypermedia, create_hypermedia, get_hypermedia
from services.loader import load_sample_data
from utils.exceptions import EntityNotFound
from utils.hateoas import HALResponse

port = int(os.environ.get("FASTAPIPORT", 8000))

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Lifecycle
# -----------------------------------------------------------------------------
@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    await init_db()
    if settings.SEED_SAMPLE_DATA:
        async with AsyncSessionLocal() as session:
            await load_sample_data(session)
    logger.info("Employees API ready (environment=%s)", settings.ENVIRONMENT)

    yield

    await close_db()
    logger.info("Shutdown complete.")


app = FastAPI(
    title="Employees Hypermedia API",
    description="Employees and managers served as HAL documents with route-registry links.",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Built before the first request; a bad route table or view mapping stops the process here
app.state.hypermedia = create_hypermedia()

# -----------------------------------------------------------------------------
# Exception handlers
# -----------------------------------------------------------------------------

@app.exception_handler(EntityNotFound)
async def entity_not_found_handler(request: Request, exc: EntityNotFound):
    logger.info("%s %s -> 404 (%s)", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=404,
        content={
            "error": "not_found",
            "message": exc.message,
            "details": exc.context,
        },
    )

# -----------------------------------------------------------------------------
# Routers to public RESTful resources
# -----------------------------------------------------------------------------

# detailed_employees first: its literal "/employees/detailed" must win over "/employees/{id}"
app.include_router(router=detailed_employees.router)
app.include_router(router=employees.router)
app.include_router(router=managers.router)
app.include_router(router=supervisors.router)


# -----------------------------------------------------------------------------
# Root
# -----------------------------------------------------------------------------
@app.get("/", name="root", response_class=HALResponse)
def root(hypermedia: Hypermedia = Depends(get_hypermedia)):
    return HALResponse(hypermedia.root().to_hal())


app.state.hypermedia.routes.check_against(app)

# -----------------------------------------------------------------------------
# Entrypoint for `python main.py`
# -----------------------------------------------------------------------------
if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=port, reload=True)
