"""Core module containing interfaces."""

from openversion.core.interfaces import IVersionBumper, IVersionRepository, IVersionRule

__all__ = ["IVersionBumper", "IVersionRepository", "IVersionRule"]
