import logging

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.orm import Session

from marketplace.api.deps import get_db
from marketplace.core.config import settings
from marketplace.core.errors import register_exception_handlers
from marketplace.api.routes.auth import router as auth_router
from marketplace.api.routes.properties import router as properties_router
from marketplace.api.routes.owner_properties import router as owner_properties_router
from marketplace.api.routes.rentals import router as rentals_router
from marketplace.api.routes.favorites import router as favorites_router
from marketplace.api.routes.messages import router as messages_router
from marketplace.api.routes.notifications import router as notifications_router
from marketplace.api.routes.reminders import router as reminders_router
from marketplace.api.routes.payments import router as payments_router

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

# 1) Create the app FIRST
app = FastAPI(title="Rental Marketplace Backend")

# 2) Add CORS Middleware BEFORE routes
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# 3) Include routers AFTER app is created
app.include_router(auth_router)
app.include_router(properties_router)
app.include_router(owner_properties_router)
app.include_router(rentals_router)
app.include_router(favorites_router)
app.include_router(messages_router)
app.include_router(notifications_router)
app.include_router(reminders_router)
app.include_router(payments_router)

# 4) Health check endpoints
@app.get("/health")
def health():
    return {"ok": True, "service": "backend"}

@app.get("/db-health")
def db_health(db: Session = Depends(get_db)):
    db.execute(text("select 1"))
    return {"ok": True, "db": "connected"}
