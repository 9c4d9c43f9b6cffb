"""
Application layer - Use cases and business logic orchestration.

This layer contains:
- The compute-next-version orchestrator (fetch, bump, save, retry)
- The project versions listing use case

No direct dependencies on frameworks (FastAPI, etc.)
"""
