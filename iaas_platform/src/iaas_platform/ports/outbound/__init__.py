"""Outbound ports - interfaces for external dependencies.

Outbound ports define contracts for external systems that the
orchestration service depends on, such as server persistence.
"""

from iaas_platform.ports.outbound.server_repository import ServerRepository

__all__ = ["ServerRepository"]
