from pathlib import Path
import asyncio
import logging

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from fastapi.responses import RedirectResponse

from .db import Base, engine, get_db, ensure_schema
from .cleanup import purge_older_than
from .settings import settings
from .routers import health
from .routers import auth
from .routers import content
from .routers import review
from .routers import upload
from .routers import chat
from .routers import voice

logging.basicConfig(
	level=getattr(logging, settings.log_level.upper(), logging.INFO),
	format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

BASE_DIR = Path(__file__).resolve().parents[2]
FRONTEND_DIR = BASE_DIR / "frontend"

app = FastAPI(title="AI Academic Writing Assistant API")
app.include_router(health.router)
app.include_router(auth.router)
app.include_router(content.router)
app.include_router(review.router)
app.include_router(upload.router)
app.include_router(chat.router)
app.include_router(voice.router)

# Static single-page client at /app when it has been built next to the backend
if FRONTEND_DIR.is_dir():
	app.mount("/app", StaticFiles(directory=FRONTEND_DIR, html=True), name="frontend")

@app.get("/", include_in_schema=False)
async def redirect_root():
	return RedirectResponse(url="/app" if FRONTEND_DIR.is_dir() else "/docs")

@app.get("/info")
def root():
	return {"status": "ok", "gemini_configured": bool(settings.gemini_api_key)}


def _run_cleanup() -> None:
	db = next(get_db())
	try:
		purge_older_than(db)
	finally:
		db.close()


async def _cleanup_watcher():
	# Startup already ran one pass; repeat daily
	while True:
		await asyncio.sleep(24 * 60 * 60)
		try:
			_run_cleanup()
		except Exception:
			logger.exception("Periodic cleanup failed")

@app.on_event("startup")
async def startup_event():
	Base.metadata.create_all(bind=engine)
	try:
		added = ensure_schema()
		if added:
			logger.info("Added columns: %s", ", ".join(added))
	except Exception:
		logger.exception("Schema migration failed")
	try:
		_run_cleanup()
	except Exception:
		logger.exception("Startup cleanup failed")
	asyncio.create_task(_cleanup_watcher())
	if not settings.gemini_api_key:
		logger.warning("GEMINI_API_KEY is not set; AI endpoints will answer 503")
