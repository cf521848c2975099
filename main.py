from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from dotenv import load_dotenv
import os

# Load environment variables
load_dotenv()

from database.connection import engine, Base
from routes import analytics, auth, events, offers, profile, sharing
from services.errors import DomainError
from utils.logging_config import get_logger, init_logging

init_logging()
logger = get_logger("api")

# Create database tables
Base.metadata.create_all(bind=engine)

# Initialize FastAPI app
app = FastAPI(
    title="Flypside API",
    description="Business partner portal for hosting events and running offers",
    version="1.0.0"
)

# CORS configuration - Restrict to specific origins for security
allowed_origins = [
    "https://flypside.com",            # Production
    "http://localhost:5173",           # Local development frontend
    "http://localhost:3000",           # Alternative local dev port
]

if os.getenv("ENVIRONMENT", "development") == "development":
    allowed_origins.append("http://127.0.0.1:5173")

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,  # Session cookie is sent cross-origin
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Content-Type", "Authorization"],
)


@app.exception_handler(DomainError)
async def domain_error_handler(request: Request, exc: DomainError):
    logger.warning(f"{request.method} {request.url.path} -> {exc.status_code} {exc}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Report only the first failing field, as a 400"""
    errors = exc.errors()
    first = errors[0] if errors else {}
    message = str(first.get("msg", "Invalid request")).replace("Value error, ", "")
    location = [str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path")]

    content = {"message": message, "code": "VALIDATION_FAILED"}
    if location:
        content["field"] = ".".join(location)
    logger.warning(f"{request.method} {request.url.path} -> 400 {message}")
    return JSONResponse(status_code=400, content=content)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(status_code=500, content={"message": "Internal server error"})


app.include_router(auth.router, tags=["Auth"])
app.include_router(profile.router, tags=["Profile"])
app.include_router(events.router, tags=["Events"])
app.include_router(sharing.router, tags=["Sharing"])
app.include_router(offers.router, tags=["Offers"])
app.include_router(analytics.router, tags=["Analytics"])


@app.get("/")
def root():
    """Root endpoint"""
    return {"message": "Flypside API", "version": "1.0.0"}


@app.get("/health")
def health_check():
    """Health check endpoint"""
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn
    host = os.getenv("API_HOST", "0.0.0.0")
    port = int(os.getenv("API_PORT", 8000))
    uvicorn.run("main:app", host=host, port=port, reload=True)
