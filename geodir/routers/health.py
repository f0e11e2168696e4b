"""Health check endpoint."""

from fastapi import APIRouter

from geodir.database import check_db_connection

router = APIRouter(tags=["health"])


@router.get("/health", include_in_schema=False)
def health_check() -> dict:
    """Liveness plus database reachability."""
    db_ok = check_db_connection()
    return {"ok": True, "database": "connected" if db_ok else "unreachable"}
