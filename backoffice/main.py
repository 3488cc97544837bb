import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, status
from backoffice.core.db import init_db, close_db
from backoffice.api.v1.orders import router as orders_router
from backoffice.api.v1.menu import router as menu_router
from backoffice.api.v1.sales import router as sales_router
from backoffice.api.v1.waste import router as waste_router
from backoffice.api.v1.notifications import router as notifications_router
from backoffice.consumers.analysis_scheduler import RecurringJob
from backoffice.core.config import ANALYSIS_ENABLED, LOG_LEVEL, PROJECT_NAME, VERSION
from backoffice.core.exception_handlers import setup_exception_handlers
from backoffice.services.advisory_client import AdvisoryClient
from backoffice.services.menu_analyzer import InventoryMenuAnalyzer
from backoffice.services.notification_service import NotificationDispatcher

logging.basicConfig(level=LOG_LEVEL, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
log = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handles startup and shutdown events."""
    log.info(f"Starting {PROJECT_NAME} v{VERSION}...")
    await init_db()  # Connect to DB and generate schemas

    notifications = NotificationDispatcher()
    analyzer = InventoryMenuAnalyzer(advisory=AdvisoryClient(), notifications=notifications)
    analysis_job = RecurringJob("menu-analysis", analyzer.run)

    app.state.notifications = notifications
    app.state.analyzer = analyzer
    app.state.analysis_job = analysis_job
    if ANALYSIS_ENABLED:
        analysis_job.start()

    yield

    await analysis_job.stop()
    await close_db()
    log.info(f"{PROJECT_NAME} stopped.")

app = FastAPI(
    title=PROJECT_NAME,
    version=VERSION,
    lifespan=lifespan,
    # Configure API documentation and paths
    docs_url="/docs",
    redoc_url="/redoc"
)

# Include routers for modular API structure
app.include_router(orders_router, prefix="/api/v1/orders", tags=["Orders"])
app.include_router(menu_router, prefix="/api/v1/menu", tags=["Menu Costing"])
app.include_router(sales_router, prefix="/api/v1/sales", tags=["Sales Reporting"])
app.include_router(waste_router, prefix="/api/v1/waste", tags=["Waste"])
app.include_router(notifications_router, prefix="/api/v1/notifications", tags=["Notifications"])


setup_exception_handlers(app)

@app.get("/health", status_code=status.HTTP_200_OK)
async def health_check():
    """Simple health check endpoint."""
    return {"status": "ok", "app_name": PROJECT_NAME}
