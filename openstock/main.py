# openstock/main.py
import logging
from contextlib import asynccontextmanager
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from openstock.config import Settings
from openstock.database import open_stores

# Router imports
from openstock.routes.attendance import router as attendance_router
from openstock.routes.categories import router as categories_router
from openstock.routes.dashboard import router as dashboard_router
from openstock.routes.departments import router as departments_router
from openstock.routes.employees import router as employees_router
from openstock.routes.finance import router as finance_router
from openstock.routes.leave import router as leave_router
from openstock.routes.payroll import router as payroll_router
from openstock.routes.products import router as products_router
from openstock.routes.reports import router as reports_router
from openstock.routes.settings import router as settings_router
from openstock.routes.stock import router as stock_router
from openstock.routes.suppliers import router as suppliers_router
from openstock.routes.taxes import router as taxes_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    app.state.stores.dispose()
    logger.info("Stores closed")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    load_dotenv()
    settings = settings or Settings()

    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(title="OpenStock API", version="1.0.0", lifespan=lifespan)

    # Every store is opened (and its schema created) once, then shared by all requests
    app.state.settings = settings
    app.state.stores = open_stores(settings)

    # CORS configuration
    origins = ["http://localhost:3000", "http://127.0.0.1:3000"]
    if settings.FRONTEND_URL:
        origins.append(settings.FRONTEND_URL)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Inventory
    app.include_router(categories_router)
    app.include_router(suppliers_router)
    app.include_router(taxes_router)
    app.include_router(products_router)
    app.include_router(stock_router)
    app.include_router(reports_router)
    app.include_router(dashboard_router)
    app.include_router(settings_router)

    # HR
    app.include_router(departments_router)
    app.include_router(employees_router)
    app.include_router(attendance_router)
    app.include_router(leave_router)
    app.include_router(payroll_router)

    # Finance
    app.include_router(finance_router)

    @app.get("/")
    def read_root():
        return {"message": "OpenStock API is running"}

    return app
