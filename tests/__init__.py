"""
Tests for OpenVersion

Tests are organized by functionality:
- test_value_objects.py: ReleaseNumber parsing/bumping and version formatting
- test_version_rules.py / test_version_bumper.py: rule evaluation
- test_version_service.py: compute-next-version retry loop (mocked repository)
- test_version_repository.py: SQLite-backed repository and optimistic concurrency
- test_auth.py / test_config.py: token guard and settings
- api/: HTTP contract end to end
"""
