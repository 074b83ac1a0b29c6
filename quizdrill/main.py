from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from quizdrill import __version__
from quizdrill.config import settings
from quizdrill.database import SessionLocal, init_db
from quizdrill.errors import InvalidInput, QuizError
from quizdrill.routes import exams, questions, stats, users
from quizdrill.seed import seed_if_empty

logging.basicConfig(level=settings.log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    if settings.seed_on_startup:
        db = SessionLocal()
        try:
            seed_if_empty(db, settings.seed_file)
        finally:
            db.close()
    yield


app = FastAPI(title=settings.app_name, version=__version__, description="Timed multiple-choice exams and learning mode", lifespan=lifespan)

# Credentialed CORS for the browser frontend; the identity cookie is cross-site in production
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_origin_regex=settings.cors_origin_regex,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "OPTIONS"],
    allow_headers=["Content-Type", "X-Public-Id", "Authorization"],
    expose_headers=["X-Public-Id"],
    max_age=12 * 3600,
)


@app.exception_handler(QuizError)
async def quiz_error_handler(request: Request, exc: QuizError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    fields = [".".join(str(part) for part in err["loc"]) for err in exc.errors()]
    error = InvalidInput(f"bad request: {', '.join(fields)}" if fields else None)
    return JSONResponse(status_code=error.status_code, content={**error.to_dict(), "fields": fields})


# Include routers with prefixes and tags
app.include_router(questions.router, prefix="/api/v1", tags=["Learning"])
app.include_router(exams.router, prefix="/api/v1/exams", tags=["Exams"])
app.include_router(users.router, prefix="/api/v1", tags=["Users"])
app.include_router(stats.router, prefix="/api/v1", tags=["Stats"])


@app.get("/healthz")
async def healthz():
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8080)
