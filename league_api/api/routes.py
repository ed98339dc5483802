from fastapi import APIRouter

from league_api.api import admin, teams, players, matches, reports

# Root router, mounted under /api/v1
router = APIRouter()

router.include_router(admin.router)
router.include_router(teams.router)
router.include_router(players.router)
router.include_router(matches.router)
router.include_router(reports.router)


@router.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "ok", "service": "league-api"}
