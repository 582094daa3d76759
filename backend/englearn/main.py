import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from .db import init_db
from .settings import settings
from .routers import reading
from .routers import writing
from .routers import listening
from .routers import speaking
from .routers import evaluate
from .routers import progress
from .routers import grade

logging.basicConfig(
	level=settings.log_level.upper(),
	format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
	# Initialize DB schema
	init_db()
	logger.info("Database initialized")
	if not settings.openai_api_key:
		logger.warning("OPENAI_API_KEY is not set; AI endpoints will answer with 500")
	yield


app = FastAPI(title="English Skills Practice API", lifespan=lifespan)
app.include_router(reading.router)
app.include_router(writing.router)
app.include_router(listening.router)
app.include_router(speaking.router)
app.include_router(evaluate.router)
app.include_router(progress.router)
app.include_router(grade.router)


@app.get("/info")
def root():
	return {"status": "ok", "openai_configured": bool(settings.openai_api_key)}


if __name__ == "__main__":
	import uvicorn
	uvicorn.run("englearn.main:app", host="0.0.0.0", port=8000, reload=True)
