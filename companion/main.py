import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from companion.api.routes import patients
from companion.core.config import CORS_ORIGINS, DB_CREATE_TABLES, LOG_LEVEL
from companion.core.database import engine, init_db
from companion.core.exceptions import DuplicateEmail, NotFound, StoreUnavailable, ValidationFailure
from companion.core.logging_config import configure_logging

configure_logging(LOG_LEVEL)
logger = logging.getLogger(__name__)

app = FastAPI(title="Companion Patients API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
def startup():
    if DB_CREATE_TABLES:
        init_db(engine)
        logger.info("Database schema ready")


@app.exception_handler(NotFound)
async def not_found_handler(request: Request, exc: NotFound):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(DuplicateEmail)
async def duplicate_email_handler(request: Request, exc: DuplicateEmail):
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(ValidationFailure)
async def validation_failure_handler(request: Request, exc: ValidationFailure):
    return JSONResponse(
        status_code=400,
        content={
            "detail": "Invalid patient data",
            "errors": [{"field": v.field, "message": v.message} for v in exc.violations],
        },
    )


@app.exception_handler(StoreUnavailable)
async def store_unavailable_handler(request: Request, exc: StoreUnavailable):
    return JSONResponse(status_code=503, content={"detail": "Patient store unavailable, try again later"})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    # malformed bodies are structural failures too
    return JSONResponse(
        status_code=400,
        content={
            "detail": "Invalid patient data",
            "errors": [
                {"field": ".".join(str(part) for part in err["loc"]), "message": err["msg"]}
                for err in exc.errors()
            ],
        },
    )


app.include_router(patients.router, prefix="/api/patients", tags=["Patients"])


@app.get("/")
def root():
    return {"message": "API is running"}
