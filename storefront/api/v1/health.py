"""
==============================================================================
Health Check Endpoints
==============================================================================

System health status endpoints for monitoring and orchestration.

==============================================================================
"""

from fastapi import APIRouter, Depends

from storefront.store import RemoteStore, StoreError, get_store


router = APIRouter(prefix="/health", tags=["Health"])


class HealthController:
    """Controller for health check operations."""

    def __init__(self, store: RemoteStore):
        self._store = store

    def check_store(self) -> dict:
        """Check the remote store answers a count query."""
        try:
            return {"status": "healthy", "products": self._store.count("products")}
        except StoreError:
            return {"status": "unhealthy", "products": None}

    def get_health(self) -> dict:
        """Get full health status."""
        store_info = self.check_store()

        overall = "healthy" if store_info["status"] == "healthy" else "degraded"

        return {
            "status": overall,
            "components": {
                "api": "healthy",
                "store": store_info["status"]
            },
            "details": {
                "products": store_info["products"]
            }
        }


@router.get("")
async def health_check(store: RemoteStore = Depends(get_store)):
    """
    Health check endpoint.

    Returns API and remote store status.
    """
    controller = HealthController(store)
    return controller.get_health()


@router.get("/ready")
async def readiness_check():
    """Readiness probe for container orchestration."""
    return {"ready": True}


@router.get("/live")
async def liveness_check():
    """Liveness probe for container orchestration."""
    return {"alive": True}
