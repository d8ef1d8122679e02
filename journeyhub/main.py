from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, RedirectResponse

from journeyhub.core.config import DAILY_GOAL_WORKER_ENABLED
from journeyhub.core.exceptions import JourneyHubError
from journeyhub.db.base import Base, engine
from journeyhub.db import models  # noqa: F401  Import so create_all picks every table up
from journeyhub.goals.worker import DailyGoalWorker

from journeyhub.journeys.routes import router as journeys_router
from journeyhub.users.routes import router as users_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    worker = None
    if DAILY_GOAL_WORKER_ENABLED:
        worker = DailyGoalWorker()
        worker.start()
    app.state.daily_goal_worker = worker
    try:
        yield
    finally:
        if worker is not None:
            worker.stop()


app = FastAPI(title="JourneyHub", version="0.1.0", lifespan=lifespan)

# Create database tables (still useful in dev; in production prefer Alembic)
Base.metadata.create_all(bind=engine)


@app.exception_handler(JourneyHubError)
async def journeyhub_error_handler(request: Request, exc: JourneyHubError):
    print(f"[API] {request.method} {request.url.path} -> {exc.status_code} {exc.message}", flush=True)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


# Include routers
app.include_router(users_router)
app.include_router(journeys_router)


# Redirect root to the interactive API docs
@app.get("/", include_in_schema=False)
def root():
    return RedirectResponse(url="/docs")
