from httpx import AsyncClient

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
TEST_PASSWORD = "senha-segura-123"


async def register_and_login(
    client: AsyncClient,
    email: str = "corretor@imobiliaria.com.br",
    org_name: str = "Imobiliária Central"
) -> dict:
    """Register an operator with a new agency and return auth headers."""
    response = await client.post("/api/auth/register", json={
        "email": email,
        "password": TEST_PASSWORD,
        "org_name": org_name,
        "full_name": "João Silva"
    })
    assert response.status_code == 201, response.text

    response = await client.post("/api/auth/login", data={
        "username": email,
        "password": TEST_PASSWORD
    })
    assert response.status_code == 200, response.text
    token = response.json()["access_token"]
    return {"Authorization": f"Bearer {token}"}
