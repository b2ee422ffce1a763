from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from syllabus_calendar.config import settings, get_cors_origins
from syllabus_calendar.logger import setup_logging
from syllabus_calendar.routers import parse_router

setup_logging("DEBUG" if settings.DEBUG else settings.LOG_LEVEL)

# Create FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Turns syllabus text into dated calendar events with pattern and LLM extractors"
)

# Configure CORS: configured origins plus localhost with any port
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_cors_origins(),
    allow_origin_regex=r"^http://localhost:\d+$|^http://127\.0\.0\.1:\d+$",
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(parse_router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Welcome to the AI Syllabus Calendar API",
        "version": settings.APP_VERSION,
        "docs": "/docs"
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("syllabus_calendar.main:app", host="0.0.0.0", port=8000, reload=True)
