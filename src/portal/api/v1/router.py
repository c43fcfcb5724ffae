from fastapi import APIRouter

from src.portal.api.v1 import (
    auth,
    bugs,
    channels,
    env_vars,
    features,
    milestones,
    notifications,
    pages,
    projects,
    public,
    tasks,
    tenants,
    users,
)

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(auth.router)
api_router.include_router(users.router)
api_router.include_router(tenants.router)
api_router.include_router(projects.router)
api_router.include_router(env_vars.router)
api_router.include_router(bugs.router)
api_router.include_router(features.router)
api_router.include_router(tasks.router)
api_router.include_router(milestones.router)
api_router.include_router(channels.router)
api_router.include_router(notifications.router)
api_router.include_router(pages.router)
api_router.include_router(public.router)
