"""API router registration helpers.

Routers are imported lazily inside `register_routes` so importing submodules
does not pull in the database engine during test collection.
"""

from fastapi import FastAPI


def register_routes(app: FastAPI) -> None:
    """Attach all API routers (lazy imports)."""
    from groupchat.api.groups import router as groups_router
    from groupchat.api.realtime import router as realtime_router
    from groupchat.api.system import router as system_router
    from groupchat.api.users import router as users_router

    routers = [
        system_router,
        users_router,
        groups_router,
        realtime_router,
    ]
    for router in routers:
        app.include_router(router)
