"""Integration tests for the REST adapter."""

from __future__ import annotations

import uuid

import pytest
from fastapi.testclient import TestClient

from iaas_platform import __version__
from iaas_platform.adapters.inbound.rest_api import create_app
from iaas_platform.adapters.inbound.security import SECURITY_HEADERS
from iaas_platform.adapters.outbound import FileServerRepository
from iaas_platform.application import ServerService
from iaas_platform.domain.entities import Server
from iaas_platform.infrastructure.config import Config
from iaas_platform.infrastructure.metrics import MetricsRegistry
from iaas_platform.ports.inbound import AttachDiskCommand, CreateServerCommand

# Matches the key in the test_config fixture.
AUTH = {"x-api-key": "test-api-key"}


class BrokenService:
    """Service whose every call fails with an unexpected error."""

    def create_server(self, cmd: CreateServerCommand) -> Server:
        raise RuntimeError("secret connection string")

    def list_servers(self) -> list[Server]:
        raise RuntimeError("secret connection string")

    def attach_disk(self, cmd: AttachDiskCommand) -> Server:
        raise RuntimeError("secret connection string")


@pytest.fixture
def api_repository(test_config: Config) -> FileServerRepository:
    return FileServerRepository(test_config.storage.data_dir, fsync=False)


@pytest.fixture
def client(
    api_repository: FileServerRepository,
    test_config: Config,
    metrics_registry: MetricsRegistry,
) -> TestClient:
    service = ServerService(api_repository, metrics=metrics_registry)
    return TestClient(create_app(service, test_config))


@pytest.fixture
def broken_client(test_config: Config) -> TestClient:
    app = create_app(BrokenService(), test_config)
    return TestClient(app, raise_server_exceptions=False)


def _create(client: TestClient, **overrides) -> dict:
    body = {"name": "vm-1", "cpu": 2, "ram": 4, "storage": 40, **overrides}
    response = client.post("/servers", json=body, headers=AUTH)
    assert response.status_code == 200
    return response.json()


@pytest.mark.integration
class TestServerEndpoints:
    """Tests for /servers endpoints."""

    def test_health(self, client: TestClient) -> None:
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "version": __version__}

    def test_create_server(self, client: TestClient) -> None:
        body = _create(client)

        assert uuid.UUID(body["id"])
        assert body["name"] == "vm-1"
        assert body["status"] == "Provisioning"
        assert body["disks"] == []

    def test_list_servers(self, client: TestClient) -> None:
        first = _create(client, name="a")
        second = _create(client, name="b")

        response = client.get("/servers", headers=AUTH)

        assert response.status_code == 200
        assert sorted(s["id"] for s in response.json()) == sorted([first["id"], second["id"]])

    def test_attach_disk(self, client: TestClient) -> None:
        server = _create(client)

        response = client.post(
            f"/servers/{server['id']}/disks", json={"size_gb": 100}, headers=AUTH
        )

        assert response.status_code == 200
        disks = response.json()["disks"]
        assert len(disks) == 1
        assert disks[0]["size_gb"] == 100

        listed = client.get("/servers", headers=AUTH).json()
        assert listed[0]["disks"] == disks

    def test_attach_unknown_server(self, client: TestClient) -> None:
        response = client.post(
            f"/servers/{uuid.uuid4()}/disks", json={"size_gb": 100}, headers=AUTH
        )

        assert response.status_code == 404
        assert response.json() == {"error": "Resource not found"}

    @pytest.mark.parametrize(
        "body",
        [
            {"name": "vm", "cpu": 0, "ram": 4, "storage": 40},
            {"name": "vm", "cpu": 2, "ram": -1, "storage": 40},
            {"name": "vm", "cpu": 2, "ram": 4},
            {"cpu": 2, "ram": 4, "storage": 40},
            {"name": "vm", "cpu": "two", "ram": 4, "storage": 40},
        ],
    )
    def test_create_rejects_malformed_payload(self, client: TestClient, body: dict) -> None:
        response = client.post("/servers", json=body, headers=AUTH)

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid request"}

    def test_attach_rejects_bad_size_and_id(self, client: TestClient) -> None:
        server = _create(client)

        bad_size = client.post(
            f"/servers/{server['id']}/disks", json={"size_gb": 0}, headers=AUTH
        )
        bad_id = client.post("/servers/not-a-uuid/disks", json={"size_gb": 10}, headers=AUTH)

        assert bad_size.status_code == 400
        assert bad_id.status_code == 400

    def test_storage_failure_is_sanitized(
        self,
        client: TestClient,
        api_repository: FileServerRepository,
    ) -> None:
        """Storage errors become a generic 500 without internal details."""
        server = _create(client)
        (api_repository.storage_dir / f"{server['id']}.json").write_text("garbage")

        response = client.get("/servers", headers=AUTH)

        assert response.status_code == 500
        assert response.json() == {"error": "An internal error occurred"}
        assert "garbage" not in response.text
        assert server["id"] not in response.text

    def test_unencodable_name_is_sanitized(self, client: TestClient) -> None:
        """A name that cannot be stored becomes a generic JSON 500."""
        response = client.post(
            "/servers",
            content=b'{"name": "vm-\\ud800", "cpu": 1, "ram": 1, "storage": 1}',
            headers={**AUTH, "content-type": "application/json"},
        )

        assert response.status_code == 500
        assert response.json() == {"error": "An internal error occurred"}
        assert response.headers["X-Content-Type-Options"] == "nosniff"

    def test_openapi_document(self, client: TestClient) -> None:
        response = client.get("/api-doc/openapi.json")

        assert response.status_code == 200
        paths = response.json()["paths"]
        assert "/servers" in paths
        assert "/servers/{server_id}/disks" in paths


@pytest.mark.integration
class TestSecurity:
    """Tests for authentication and security headers."""

    @pytest.mark.parametrize("headers", [{}, {"x-api-key": "wrong"}])
    def test_requires_api_key(self, client: TestClient, headers: dict) -> None:
        responses = [
            client.get("/servers", headers=headers),
            client.post(
                "/servers",
                json={"name": "vm", "cpu": 1, "ram": 1, "storage": 1},
                headers=headers,
            ),
            client.post(f"/servers/{uuid.uuid4()}/disks", json={"size_gb": 1}, headers=headers),
        ]

        for response in responses:
            assert response.status_code == 401
            assert response.json() == {"error": "Invalid or missing API Key"}

    def test_rejected_request_never_reaches_storage(
        self,
        client: TestClient,
        api_repository: FileServerRepository,
    ) -> None:
        client.post(
            "/servers",
            json={"name": "vm", "cpu": 1, "ram": 1, "storage": 1},
            headers={"x-api-key": "wrong"},
        )

        assert len(api_repository) == 0

    def test_security_headers_on_every_response(
        self, client: TestClient, broken_client: TestClient
    ) -> None:
        responses = [
            client.get("/health"),
            client.get("/servers", headers=AUTH),
            client.get("/servers"),
            client.get("/does-not-exist"),
            broken_client.get("/servers", headers=AUTH),
        ]

        for response in responses:
            for name, value in SECURITY_HEADERS.items():
                assert response.headers[name] == value

    def test_unexpected_error_is_sanitized(self, broken_client: TestClient) -> None:
        """Errors outside the domain become a generic JSON 500."""
        responses = [
            broken_client.get("/servers", headers=AUTH),
            broken_client.post(
                "/servers",
                json={"name": "vm", "cpu": 1, "ram": 1, "storage": 1},
                headers=AUTH,
            ),
            broken_client.post(
                f"/servers/{uuid.uuid4()}/disks", json={"size_gb": 1}, headers=AUTH
            ),
        ]

        for response in responses:
            assert response.status_code == 500
            assert response.json() == {"error": "An internal error occurred"}
            assert "secret" not in response.text

    def test_request_id_echoed(self, client: TestClient) -> None:
        response = client.get("/health", headers={"x-request-id": "req-42"})

        assert response.headers["X-Request-ID"] == "req-42"
