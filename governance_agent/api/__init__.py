"""API module - HTTP routes."""

from governance_agent.api.proposals import router, health_router

__all__ = ["router", "health_router"]
