"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


@router.get("/health/database", status_code=status.HTTP_200_OK)
def check_database() -> dict:
    """Report whether company records come from Supabase or the local seed file."""
    from ...data.companies_repository import get_company_repository
    from ...db.supabase import get_supabase_client

    if not get_supabase_client():
        return {
            "configured": False,
            "message": "Supabase not configured. Set BHK_SUPABASE_URL and BHK_SUPABASE_KEY environment variables.",
        }

    try:
        companies = get_company_repository().list_active()
        return {
            "configured": True,
            "connected": True,
            "active_companies": len(companies),
        }
    except Exception as exc:
        return {
            "configured": True,
            "connected": False,
            "error": str(exc),
            "message": f"Database connection error: {exc}",
        }
