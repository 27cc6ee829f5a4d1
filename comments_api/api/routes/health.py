from __future__ import annotations

from fastapi import APIRouter

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check() -> dict:
    """Liveness probe.

    Does not touch the storage service, so it stays green while the database
    is unreachable; comment endpoints report those failures as 500.
    """

    return {"status": "ok", "service": "comments-api"}
