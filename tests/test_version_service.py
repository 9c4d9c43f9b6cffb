"""
Tests for VersionService (compute-next-version orchestrator).

The repository is an AsyncMock; the bumper is the real default rule set.
"""
import asyncio
import pytest
from unittest.mock import AsyncMock

from openversion.application.version_service import ComputeNextVersionInput, VersionService
from openversion.domain.errors import (
    ApplicationError,
    UnexpectedError,
    UnsupportedBranchError,
    ValidationError,
    VersionConcurrencyError,
)
from openversion.domain.result import Result
from openversion.rules.bumper import VersionBumper
from tests.conftest import make_version


def snapshot(*versions):
    return Result.success({v.identifier_name: v for v in versions})


def conflict():
    return Result.failure(VersionConcurrencyError(make_version("main", "0.0.0.0")))


@pytest.fixture
def repository():
    repo = AsyncMock()
    repo.get_current_versions.return_value = snapshot()
    repo.save_version.return_value = Result.success()
    return repo


@pytest.fixture
def service(repository):
    return VersionService(repository, VersionBumper())


class TestComputeNextVersion:

    @pytest.mark.asyncio
    async def test_first_major_on_empty_store(self, service, repository):
        result = await service.compute_next_version(
            ComputeNextVersionInput("main", context={"isMajor": "true"})
        )

        assert result.is_success
        assert result.value.next_version == "1.0.0.0"
        repository.get_current_versions.assert_awaited_once_with(1)
        saved = repository.save_version.await_args.args[0]
        assert saved.identifier_name == "main"
        assert saved.release_number == "1.0.0.0"

    @pytest.mark.asyncio
    async def test_minor_after_major(self, service, repository):
        repository.get_current_versions.return_value = snapshot(make_version("main", "1.0.0.0", id=1))

        result = await service.compute_next_version(ComputeNextVersionInput("main"))

        assert result.value.next_version == "1.1.0.0+minor"

    @pytest.mark.asyncio
    async def test_project_id_is_passed_through(self, service, repository):
        await service.compute_next_version(ComputeNextVersionInput("qa", project_id=7))

        repository.get_current_versions.assert_awaited_once_with(7)
        assert repository.save_version.await_args.args[0].project_id == 7

    @pytest.mark.asyncio
    async def test_retries_with_fresh_snapshot(self, service, repository):
        """Two conflicts, then success: the version comes from the last fetch"""
        repository.get_current_versions.side_effect = [
            snapshot(make_version("main", "1.0.0.0")),
            snapshot(make_version("main", "1.1.0.0", "minor")),
            snapshot(make_version("main", "1.2.0.0", "minor")),
        ]
        repository.save_version.side_effect = [conflict(), conflict(), Result.success()]

        result = await service.compute_next_version(ComputeNextVersionInput("main"))

        assert result.is_success
        assert result.value.next_version == "1.3.0.0+minor"
        assert repository.get_current_versions.await_count == 3
        assert repository.save_version.await_count == 3
        saved = [call.args[0].release_number for call in repository.save_version.await_args_list]
        assert saved == ["1.1.0.0", "1.2.0.0", "1.3.0.0"]

    @pytest.mark.asyncio
    async def test_retry_reuses_request_context(self, service, repository):
        repository.get_current_versions.side_effect = [
            snapshot(make_version("main", "1.0.0.0")),
            snapshot(make_version("main", "2.0.0.0")),
        ]
        repository.save_version.side_effect = [conflict(), Result.success()]

        result = await service.compute_next_version(
            ComputeNextVersionInput("main", context={"isMajor": "true"})
        )

        assert result.value.next_version == "3.0.0.0"

    @pytest.mark.asyncio
    async def test_gives_up_after_max_attempts(self, service, repository):
        last = conflict()
        repository.save_version.side_effect = [conflict(), conflict(), last, Result.success()]

        result = await service.compute_next_version(ComputeNextVersionInput("feature/x"))

        assert result.is_failure
        assert isinstance(result.error, VersionConcurrencyError)
        assert result.error is last.error
        assert repository.save_version.await_count == 3
        assert repository.get_current_versions.await_count == 3

    @pytest.mark.asyncio
    async def test_max_attempts_is_configurable(self, repository):
        repository.save_version.return_value = conflict()
        service = VersionService(repository, VersionBumper(), max_attempts=5)

        result = await service.compute_next_version(ComputeNextVersionInput("qa"))

        assert isinstance(result.error, VersionConcurrencyError)
        assert repository.save_version.await_count == 5

    def test_max_attempts_must_be_positive(self, repository):
        with pytest.raises(ValueError):
            VersionService(repository, VersionBumper(), max_attempts=0)

    @pytest.mark.asyncio
    async def test_storage_error_on_save_not_retried(self, service, repository):
        error = ApplicationError("RepositoryError", "disk full")
        repository.save_version.return_value = Result.failure(error)

        result = await service.compute_next_version(ComputeNextVersionInput("qa"))

        assert result.error is error
        assert repository.save_version.await_count == 1

    @pytest.mark.asyncio
    async def test_fetch_failure_not_retried(self, service, repository):
        error = ApplicationError("RepositoryError", "connection refused")
        repository.get_current_versions.return_value = Result.failure(error)

        result = await service.compute_next_version(ComputeNextVersionInput("qa"))

        assert result.error is error
        repository.save_version.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unsupported_branch_not_retried(self, service, repository):
        result = await service.compute_next_version(ComputeNextVersionInput("develop"))

        assert isinstance(result.error, UnsupportedBranchError)
        assert result.error.branch_name == "develop"
        assert repository.get_current_versions.await_count == 1
        repository.save_version.assert_not_awaited()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("branch", ["", "   ", None])
    async def test_empty_branch_rejected(self, service, repository, branch):
        result = await service.compute_next_version(ComputeNextVersionInput(branch))

        assert isinstance(result.error, ValidationError)
        assert result.error.field == "branchName"
        repository.get_current_versions.assert_not_awaited()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("project_id", [0, -1])
    async def test_invalid_project_id_rejected(self, service, repository, project_id):
        result = await service.compute_next_version(ComputeNextVersionInput("main", project_id=project_id))

        assert isinstance(result.error, ValidationError)
        assert result.error.field == "projectId"
        repository.get_current_versions.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_exception_becomes_unexpected_error(self, service, repository):
        boom = RuntimeError("boom")
        repository.get_current_versions.side_effect = boom

        result = await service.compute_next_version(ComputeNextVersionInput("main"))

        assert isinstance(result.error, UnexpectedError)
        assert result.error.exception is boom
        assert "boom" in result.error.message

    @pytest.mark.asyncio
    async def test_cancellation_propagates(self, service, repository):
        repository.get_current_versions.side_effect = asyncio.CancelledError()

        with pytest.raises(asyncio.CancelledError):
            await service.compute_next_version(ComputeNextVersionInput("main"))

    @pytest.mark.asyncio
    async def test_cancellation_during_retry_stops_loop(self, service, repository):
        repository.save_version.side_effect = [conflict(), asyncio.CancelledError()]

        with pytest.raises(asyncio.CancelledError):
            await service.compute_next_version(ComputeNextVersionInput("main"))

        assert repository.save_version.await_count == 2


class TestGetProjectVersions:

    @pytest.mark.asyncio
    async def test_sorted_case_insensitive(self, service, repository):
        repository.get_current_versions.return_value = snapshot(
            make_version("qa", "0.0.1.0", "qa", project_id=3),
            make_version("Feature/B", "0.0.0.1", project_id=3),
            make_version("main", "1.0.0.0", project_id=3),
            make_version("feature/a", "0.0.0.2", project_id=3),
        )

        result = await service.get_project_versions(3)

        assert result.value.project_id == 3
        assert [v.identifier_name for v in result.value.versions] == [
            "feature/a", "Feature/B", "main", "qa"
        ]

    @pytest.mark.asyncio
    async def test_empty_project(self, service):
        result = await service.get_project_versions(9)

        assert result.is_success
        assert result.value.versions == []

    @pytest.mark.asyncio
    async def test_invalid_project_id(self, service, repository):
        result = await service.get_project_versions(0)

        assert isinstance(result.error, ValidationError)
        repository.get_current_versions.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_repository_failure_propagates(self, service, repository):
        error = ApplicationError("RepositoryError", "timeout")
        repository.get_current_versions.return_value = Result.failure(error)

        result = await service.get_project_versions(1)

        assert result.error is error
