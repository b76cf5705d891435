from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware
from core.config_loader import settings
from core.logging_config import setup_logging

from auth.routes.auth_router import auth_router
from user.router import user_router
from posting.router import posting_router
from application.router import application_router
from review.router import review_router
from browse.router import browse_router
from dashboard.router import dashboard_router
import models_bootstrap

setup_logging()

openapi_tags = [
    {
        "name": "Auth",
        "description": "Signup and role-checked login",
    },
    {
        "name": "Postings",
        "description": "Organizer job postings",
    },
    {
        "name": "Applications",
        "description": "Accept, assign and reject applicants",
    },
    {
        "name": "Reviews",
        "description": "Ratings for hired staff",
    },
    {
        "name": "Jobs",
        "description": "Staff job browsing and applying",
    },
    {
        "name": "Dashboard",
        "description": "Role-specific dashboard view",
    },
    {
        "name": "Health Checks",
        "description": "Application health checks",
    }
]

app = FastAPI(title=settings.APP_NAME, openapi_tags=openapi_tags)

if settings.BACKEND_CORS_ORIGINS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[
            str(origin).strip("/") for origin in settings.BACKEND_CORS_ORIGINS
        ],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

app.include_router(auth_router, prefix="/api")
app.include_router(user_router, prefix="/api")
app.include_router(posting_router, prefix="/api")
app.include_router(application_router, prefix="/api")
app.include_router(review_router, prefix="/api")
app.include_router(browse_router, prefix="/api")
app.include_router(dashboard_router, prefix="/api")


@app.get("/health", tags=['Health Checks'])
def read_root():
    return {"health": "true"}
