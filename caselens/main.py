# caselens/main.py
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from caselens.api.api_router import api_router
from caselens.core.config import settings
from caselens.core.logging import configure_logging
from caselens.db import init_db
from caselens.services.errors import CaseLensError

configure_logging()

app = FastAPI(title=settings.APP_NAME, version=settings.APP_VERSION)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix="/api")


@app.exception_handler(CaseLensError)
async def case_lens_error_handler(request: Request, exc: CaseLensError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.on_event("startup")
def on_startup():
    logging.info("Starting up: initializing DB...")
    init_db.init_db()
    logging.info("Startup complete")
