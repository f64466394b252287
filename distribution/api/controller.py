from fastapi import FastAPI
from distribution.api import (
    program,
    route,
    schedule,
    fare,
    trigger,
    dashboard,
)
from distribution.src.enums import AppID


# ------------------------------------------------------
# Admin application, identity is established by the gateway
# ------------------------------------------------------
app_admin = FastAPI(title="Admin APP")
app_admin.state.id = AppID.ADMIN


# ------------------------------------------------------
# Admin routers
# ------------------------------------------------------
app_admin.include_router(trigger.route_admin)
app_admin.include_router(program.route_admin)
app_admin.include_router(route.route_admin)
app_admin.include_router(schedule.route_admin)
app_admin.include_router(fare.route_admin)
app_admin.include_router(dashboard.route_admin)
