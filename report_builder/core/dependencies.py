"""
FastAPI dependency injection module for the Report Builder backend.

The QueryDispatcher (and the BigQuery client inside it) is created once in the
application lifespan and stored on ``app.state``; handlers receive it through
``DispatcherDep`` instead of importing a module-level client. Tests swap it via
``app.dependency_overrides[get_dispatcher]``.

Usage:
    @router.get("/query")
    async def run_query(request: Request, dispatcher: DispatcherDep):
        return dispatcher.execute(...)
"""

from typing import Annotated

from fastapi import Depends, Request

from report_builder.services.dispatcher import QueryDispatcher


# =============================================================================
# Dispatcher Dependency
# =============================================================================

def get_dispatcher(request: Request) -> QueryDispatcher:
    """
    Return the process-wide QueryDispatcher built at startup.

    Raises:
        RuntimeError: If the lifespan has not run (no dispatcher on app.state).
    """
    dispatcher = getattr(request.app.state, 'dispatcher', None)
    if dispatcher is None:
        raise RuntimeError("QueryDispatcher not initialized; application lifespan has not run")
    return dispatcher


# =============================================================================
# Type Aliases for Dependency Injection
# =============================================================================

DispatcherDep = Annotated[QueryDispatcher, Depends(get_dispatcher)]
