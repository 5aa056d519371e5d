"""API v1 routes."""

from fastapi import APIRouter

from app.api.v1 import accounts, admin_users, auth, cases, contacts, health, me, projects
from app.api.v1.work_items import epics_router, issues_router, sprints_router

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(me.router, prefix="/me", tags=["me"])
router.include_router(admin_users.router, prefix="/admin/users", tags=["admin"])
router.include_router(accounts.router, prefix="/accounts", tags=["accounts"])
router.include_router(contacts.router, prefix="/contacts", tags=["contacts"])
router.include_router(cases.router, prefix="/cases", tags=["cases"])
router.include_router(projects.router, prefix="/projects", tags=["projects"])
router.include_router(epics_router, prefix="/epics", tags=["epics"])
router.include_router(sprints_router, prefix="/sprints", tags=["sprints"])
router.include_router(issues_router, prefix="/issues", tags=["issues"])
