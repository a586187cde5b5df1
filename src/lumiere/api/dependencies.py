"""FastAPI dependency injection functions."""

from fastapi import Request

from lumiere.studio import Studio


def get_studio(request: Request) -> Studio:
    """FastAPI dependency for Studio injection.

    Retrieves the Studio stored in app.state by the lifespan handler (or by
    tests that inject their own).

    Example:
        @router.get("/api/characters")
        async def list_characters(studio: Studio = Depends(get_studio)):
            return studio.characters.list_all()
    """
    return request.app.state.studio
