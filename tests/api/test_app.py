"""
Tests for the HTTP surface of the FastAPI application
"""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from registrar.api.app import create_app
from registrar.config import settings


@pytest.fixture
def app(database, tmp_path, monkeypatch):
    docs = tmp_path / "docs"
    docs.mkdir()
    (docs / "index.html").write_text("<h1>Registrar docs</h1>")
    monkeypatch.setattr(settings, "docs_dir", str(docs))
    return create_app(database)


@pytest_asyncio.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.mark.integration
@pytest.mark.asyncio
async def test_graphql_post_round_trip(client):
    response = await client.post(
        "/graphql",
        json={
            "query": "mutation Add($input: AddDepartmentInput!) "
            "{ addDepartment(input: $input) { id name } }",
            "variables": {"input": {"name": "CS", "code": "CS01", "hod": "A"}},
        },
    )

    assert response.status_code == 200
    body = response.json()
    assert "errors" not in body
    department_id = body["data"]["addDepartment"]["id"]

    response = await client.post(
        "/graphql",
        json={
            "query": "query Get($id: ID!) { department(id: $id) { code } }",
            "variables": {"id": department_id},
        },
    )
    assert response.json() == {"data": {"department": {"code": "CS01"}}}


@pytest.mark.integration
@pytest.mark.asyncio
async def test_graphql_errors_are_reported_in_body(client):
    response = await client.post("/graphql", json={"query": '{ student(id: "bad") { id } }'})

    body = response.json()
    assert body["data"] == {"student": None}
    assert body["errors"][0]["message"] == "Invalid id: 'bad'"


@pytest.mark.integration
@pytest.mark.asyncio
async def test_graphql_query_over_get(client):
    add = 'mutation { addDepartment(input: {name: "CS", code: "CS01", hod: "A"}) { id } }'
    await client.post("/graphql", json={"query": add})

    response = await client.get(
        "/graphql",
        params={"query": "{ departments { code } __schema { queryType { name } } }"},
        headers={"Accept": "application/json"},
    )

    assert response.status_code == 200
    assert response.json() == {
        "data": {
            "departments": [{"code": "CS01"}],
            "__schema": {"queryType": {"name": "Query"}},
        }
    }


@pytest.mark.asyncio
async def test_graphiql_console_served(client):
    response = await client.get("/graphql", headers={"Accept": "text/html"})

    assert response.status_code == 200
    assert "graphiql" in response.text.lower()


@pytest.mark.asyncio
async def test_landing_page(client):
    response = await client.get("/")

    assert response.status_code == 200
    assert "Student Management System" in response.text
    assert 'href="/graphql"' in response.text


@pytest.mark.asyncio
async def test_health_check(client):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


@pytest.mark.asyncio
async def test_static_docs_served(client):
    response = await client.get("/docs/")

    assert response.status_code == 200
    assert "Registrar docs" in response.text


@pytest.mark.asyncio
async def test_request_id_header_echoed(client):
    response = await client.get("/health", headers={"X-Request-ID": "req-123"})

    assert response.headers["X-Request-ID"] == "req-123"
