"""API router - aggregates every ``/api`` endpoint."""

from fastapi import APIRouter

from intake.routers import admin, auth, health, submissions, tracking

router = APIRouter()

# Liveness / readiness
router.include_router(health.router)

# Login flow
router.include_router(auth.router)

# Public form endpoints
router.include_router(submissions.router)
router.include_router(tracking.router)

# Dashboard data
router.include_router(admin.router)
