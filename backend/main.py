import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from budget_helper.config import settings
from budget_helper.health import router as health_router
from budget_helper.bills.routes import router as bills_router
from budget_helper.bills.dependencies import shutdown_ingestion_service
from budget_helper.budget.routes import router as budget_router
from budget_helper.extraction.routes import router as extraction_router
from budget_helper.extraction.dependencies import close_anthropic_client
from budget_helper.error_handler import exception_handler

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)

# Set log level for application modules to INFO
logging.getLogger('budget_helper').setLevel(logging.INFO)

# Keep external libraries at WARNING to reduce noise
logging.getLogger('uvicorn').setLevel(logging.WARNING)
logging.getLogger('uvicorn.access').setLevel(logging.WARNING)
logging.getLogger('httpx').setLevel(logging.WARNING)

@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    # Shutdown: let running extractions finish, then close the HTTP client
    await shutdown_ingestion_service()
    await close_anthropic_client()

app = FastAPI(
    title="Budget Helper API",
    version="1.0.0",
    docs_url="/docs" if settings.ENV == "development" else None,
    lifespan=lifespan
)

# CORS Configuration
if settings.ENV == "development":
    origins = ["http://localhost:3000", "http://localhost:5173"]  # Vite dev server
else:
    origins = [settings.WEB_APP_URL]  # Production domain

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

exception_handler(app)

app.include_router(health_router, tags=["health"])
app.include_router(bills_router, prefix="/api/bills", tags=["bills"])
app.include_router(extraction_router, prefix="/api", tags=["extraction"])
app.include_router(budget_router, prefix="/api/budget", tags=["budget"])

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=settings.PORT, reload=settings.ENV == "development")
