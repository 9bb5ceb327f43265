from contextlib import asynccontextmanager
import logging, os

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="[%(asctime)s] [%(levelname)s] %(name)s: %(message)s",
)
log = logging.getLogger("uvicorn.error")

from database import Base, engine  # noqa: E402
import models  # noqa: E402,F401  (registers tables)
from routers import generate, image_prompts, posts, prompts, source_data  # noqa: E402
from services import storage  # noqa: E402
from services.errors import GenerationError  # noqa: E402


@asynccontextmanager
async def lifespan(_: FastAPI):
    if os.getenv("AUTO_CREATE_TABLES", "1") == "1":
        Base.metadata.create_all(bind=engine)
        log.info("[db] tables ready at %s", engine.url)
    yield


# ──────────────────────────────────────────────────────────────────────────────
# APP
app = FastAPI(title="Blog Content Console", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=os.getenv("CORS_ALLOW_ORIGINS").split(",") if os.getenv("CORS_ALLOW_ORIGINS") else ["*"],
    allow_credentials=True, allow_methods=["*"], allow_headers=["*"],
)

# generated images live on local disk and are served from here
IMAGES_DIR = storage.storage_dir()
os.makedirs(IMAGES_DIR, exist_ok=True)
app.mount("/static/uploads/blog-images", StaticFiles(directory=IMAGES_DIR), name="blog-images")


@app.get("/health", include_in_schema=False)
def health():
    return {"ok": True}


# ──────────────────────────────────────────────────────────────────────────────
# Errors: every failure leaves as {"error": "..."}; tracebacks stay in the log
@app.exception_handler(StarletteHTTPException)
async def http_error(_: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail}, headers=getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def validation_error(_: Request, exc: RequestValidationError):
    details = [{"loc": list(e.get("loc", ())), "msg": e.get("msg")} for e in exc.errors()]
    return JSONResponse(status_code=400, content={"error": "Invalid request", "details": details})


@app.exception_handler(GenerationError)
async def generation_error(request: Request, exc: GenerationError):
    log.error("[generate] %s %s -> %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=500, content={"error": str(exc) or "Generation failed"})


@app.exception_handler(Exception)
async def unhandled_error(request: Request, exc: Exception):
    log.exception("[app] unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


# ──────────────────────────────────────────────────────────────────────────────
# Routers
app.include_router(source_data.router)
app.include_router(generate.router)
app.include_router(posts.router)
app.include_router(prompts.router)
app.include_router(image_prompts.router)
