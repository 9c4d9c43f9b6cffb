"""HTTP layer - FastAPI routers and request dependencies."""
