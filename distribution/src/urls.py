"""
API Endpoint URL Constants

This module defines the URL paths used throughout the application
for accessing the distribution resources.

These URLs are relative paths and are prefixed by the mount point of the
admin application (`/admin`) and the gateway base URL.
"""

# -------------------------------
# Distribution program
# -------------------------------
URL_PROGRAM = "/program"
URL_PROGRAM_ID = "/program/{id}"
URL_PROGRAM_ACTIVATE = "/program/{id}/activate"
URL_PROGRAM_DEACTIVATE = "/program/{id}/deactivate"

# -------------------------------
# Distribution route
# -------------------------------
URL_ROUTE = "/route"
URL_ROUTE_ID = "/route/{id}"
URL_ROUTE_ACTIVATE = "/route/{id}/activate"
URL_ROUTE_DEACTIVATE = "/route/{id}/deactivate"

# -------------------------------
# Distribution schedule
# -------------------------------
URL_SCHEDULE = "/schedule"
URL_SCHEDULE_ID = "/schedule/{id}"
URL_SCHEDULE_ACTIVATE = "/schedule/{id}/activate"
URL_SCHEDULE_DEACTIVATE = "/schedule/{id}/deactivate"

# -------------------------------
# Fare
# -------------------------------
URL_FARE = "/fare"
URL_FARE_ID = "/fare/{id}"
URL_FARE_ACTIVATE = "/fare/{id}/activate"
URL_FARE_DEACTIVATE = "/fare/{id}/deactivate"
URL_FARE_TRANSITION = "/fare/transition"

# -------------------------------
# Dashboard
# -------------------------------
URL_DASHBOARD_STATS = "/dashboard/stats"
URL_DASHBOARD_SUMMARY = "/dashboard/summary"
