import logging

from fastapi import FastAPI

from hotel_admin.api.v1.admin import router as admin_router
from hotel_admin.api.v1.bookings import router as bookings_router
from hotel_admin.api.v1.tape_chart import router as tape_chart_router
from hotel_admin.core.config import settings

class ContextFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        extras = []
        for key in ("booking_id", "room_type", "slot", "room", "status", "reason", "error"):
            value = getattr(record, key, None)
            if value not in (None, ""):
                extras.append(f"{key}={value}")
        base = super().format(record)
        if extras:
            return f"{base} | " + " ".join(extras)
        return base


handler = logging.StreamHandler()
handler.setFormatter(ContextFormatter("%(levelname)s:%(name)s:%(message)s"))

root = logging.getLogger()
root.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
root.handlers.clear()
root.addHandler(handler)

app = FastAPI(title=f"{settings.HOTEL_NAME} Admin", version="1.0.0")

app.include_router(tape_chart_router, prefix="/api/v1", tags=["tape-chart"])
app.include_router(admin_router, prefix="/api/v1/admin", tags=["admin"])
app.include_router(bookings_router, prefix="/api/v1/bookings", tags=["bookings"])


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
