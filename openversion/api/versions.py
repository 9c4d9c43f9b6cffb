"""
Version API - compute-next-version and project listing endpoints.

Thin transport layer: builds a VersionService per request and maps failed
results to HTTP status codes. All business logic lives in VersionService.
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from pydantic import BaseModel, Field
from typing import Dict, List, NoReturn, Optional
import logging

from openversion.api.auth import verify_access_token
from openversion.application.version_service import (
    ComputeNextVersionInput,
    DEFAULT_PROJECT_ID,
    VersionService,
)
from openversion.config import settings
from openversion.db.connection import get_db_session
from openversion.domain.errors import (
    Error,
    UnsupportedBranchError,
    ValidationError,
    VersionConcurrencyError,
)
from openversion.repositories.version_repository import VersionRepository
from openversion.rules.bumper import VersionBumper

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(verify_access_token)])

# Rule list is read-only after construction; shared by all requests
_bumper = VersionBumper()


# ============================================
# Pydantic Models
# ============================================

class ComputeNextVersionRequest(BaseModel):
    """Request to compute and store the next version of a branch"""
    branch_name: str = Field(..., alias="branchName", description="Branch identifier, e.g. main, qa, feature/x")
    project_id: int = Field(DEFAULT_PROJECT_ID, alias="projectId", description="Owning project")
    context: Optional[Dict[str, Optional[str]]] = Field(
        default=None,
        description="Optional flags, e.g. {\"isMajor\": \"true\"}"
    )

    class Config:
        populate_by_name = True


class ComputeNextVersionResponse(BaseModel):
    next_version: str = Field(..., alias="nextVersion")

    class Config:
        populate_by_name = True


class VersionResponse(BaseModel):
    id: int
    identifier_name: str = Field(..., alias="identifierName")
    release_number: str = Field(..., alias="releaseNumber")
    meta: Optional[str] = None

    class Config:
        populate_by_name = True


class ProjectVersionsResponse(BaseModel):
    project_id: int = Field(..., alias="projectId")
    versions: List[VersionResponse]

    class Config:
        populate_by_name = True


# ============================================
# Dependencies / error mapping
# ============================================

def get_version_service(db: AsyncSession = Depends(get_db_session)) -> VersionService:
    """One repository per request session; max attempts from settings"""
    return VersionService(VersionRepository(db), _bumper, settings.compute_max_attempts)


def raise_for_error(error: Error, operation: str) -> NoReturn:
    """
    Map a failed result to an HTTPException.

    - ValidationError / UnsupportedBranchError -> 400 with the message
    - VersionConcurrencyError -> 409 with the message
    - anything else -> 500 with a generic message
    """
    severity = getattr(error, "severity", logging.ERROR)
    logger.log(severity, f"{operation} failed: {type(error).__name__}: {error.message}")

    if isinstance(error, (ValidationError, UnsupportedBranchError)):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=error.message)

    if isinstance(error, VersionConcurrencyError):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=error.message)

    raise HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"An internal error occurred during {operation}."
    )


# ============================================
# Endpoints
# ============================================

@router.post("/compute-next-version", response_model=ComputeNextVersionResponse)
async def compute_next_version(
    request: ComputeNextVersionRequest,
    service: VersionService = Depends(get_version_service)
):
    """
    Compute the next version of a branch and store it.

    Returns:
        200 with {"nextVersion": "<release>[+<meta>]"}
        400 for an empty or unsupported branch, 409 when concurrent
        writers kept conflicting, 500 for anything else
    """
    logger.info(f"Compute request - project: {request.project_id}, branch: {request.branch_name}")

    result = await service.compute_next_version(ComputeNextVersionInput(
        branch_name=request.branch_name,
        project_id=request.project_id,
        context=request.context
    ))
    if result.is_failure:
        raise_for_error(result.error, "compute-next-version")

    return ComputeNextVersionResponse(next_version=result.value.next_version)


@router.get("/projects/{project_id}/versions", response_model=ProjectVersionsResponse)
async def get_project_versions(
    project_id: int,
    service: VersionService = Depends(get_version_service)
):
    """List stored versions of a project, sorted by identifier name (case-insensitive)"""
    result = await service.get_project_versions(project_id)
    if result.is_failure:
        raise_for_error(result.error, "get-project-versions")

    return ProjectVersionsResponse(
        project_id=result.value.project_id,
        versions=[
            VersionResponse(
                id=v.id,
                identifier_name=v.identifier_name,
                release_number=v.release_number,
                meta=v.meta
            )
            for v in result.value.versions
        ]
    )
