from fastapi import APIRouter

from tripplanner import __version__

router = APIRouter(tags=["health"])


@router.get("/health", summary="Liveness probe")
async def health():
    return {"status": "ok", "version": __version__}
