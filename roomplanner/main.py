from dotenv import load_dotenv
load_dotenv()

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, StreamingResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
import logging

from .config import ensure_directories, LOG_LEVEL
from .db.connection import init_databases, close_databases
from .routers import rooms, products, designs, files
from .events import subscribe

logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    ensure_directories()
    init_databases()
    yield
    close_databases()

app = FastAPI(title="roomplanner API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StarletteHTTPException)
async def http_error_envelope(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": str(exc.detail)},
    )


@app.exception_handler(RequestValidationError)
async def validation_error_envelope(request: Request, exc: RequestValidationError):
    messages = [
        f"{'.'.join(str(part) for part in error['loc'][1:])}: {error['msg']}"
        for error in exc.errors()
    ]
    logger.info(f"Rejected {request.method} {request.url.path}: {messages}")
    return JSONResponse(
        status_code=400,
        content={"success": False, "message": "; ".join(messages)},
    )


# API routes
app.include_router(rooms.router, prefix="/api/rooms", tags=["rooms"])
app.include_router(products.router, prefix="/api/products", tags=["products"])
app.include_router(designs.router, prefix="/api/designs", tags=["designs"])
app.include_router(files.router, prefix="/api/files", tags=["files"])


@app.get("/api/events")
async def sse_events():
    """Server-Sent Events endpoint for persistence change notifications."""
    return StreamingResponse(
        subscribe(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",
        }
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000, log_level=LOG_LEVEL)
