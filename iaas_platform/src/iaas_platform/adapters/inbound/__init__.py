"""Inbound adapters - REST API for server orchestration."""

from iaas_platform.adapters.inbound.rest_api import create_app, run_server

__all__ = ["create_app", "run_server"]
