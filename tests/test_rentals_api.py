import uuid
from datetime import datetime

from imobi.services.dashboard_service import DashboardService
from tests.utils import register_and_login


async def create_rental(client, headers, **overrides):
    payload = {
        "code": "LOC-2024-001",
        "start_date": "2024-01-01",
        "end_date": "2026-12-31",
        "rent_value": 2500.0,
        "condominium_fee": 450.0,
        "guarantee_type": "caucao",
        "adjustment_index": "IGP-M",
        "adjustment_month": 1,
    }
    payload.update(overrides)
    response = await client.post("/api/rentals/", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


async def add_installment(client, headers, rental_id, **overrides):
    payload = {
        "reference_month": "2024-05",
        "due_date": "2024-05-10",
        "rent_value": 2500.0,
        "condominium_fee": 450.0,
        "iptu": 120.0,
        "discount": 70.0,
    }
    payload.update(overrides)
    response = await client.post(
        f"/api/rentals/{rental_id}/installments", json=payload, headers=headers
    )
    assert response.status_code == 201, response.text
    return response.json()


async def test_create_rejects_inverted_period(client, auth_headers):
    response = await client.post(
        "/api/rentals/",
        json={"start_date": "2024-06-01", "end_date": "2024-01-01", "rent_value": 1000},
        headers=auth_headers
    )
    assert response.status_code == 422


async def test_rental_crud(client, auth_headers):
    rental = await create_rental(client, auth_headers)
    assert rental["status"] == "ativo"

    response = await client.patch(
        f"/api/rentals/{rental['id']}", json={"status": "encerrado"}, headers=auth_headers
    )
    assert response.json()["status"] == "encerrado"

    response = await client.get("/api/rentals/", params={"status": "ativo"}, headers=auth_headers)
    assert response.json()["total"] == 0

    response = await client.patch(
        f"/api/rentals/{rental['id']}", json={"end_date": "2023-01-01"}, headers=auth_headers
    )
    assert response.status_code == 422

    response = await client.delete(f"/api/rentals/{rental['id']}", headers=auth_headers)
    assert response.status_code == 204
    response = await client.get(f"/api/rentals/{rental['id']}", headers=auth_headers)
    assert response.status_code == 404


async def test_installment_total_and_payment(client, auth_headers):
    rental = await create_rental(client, auth_headers)
    installment = await add_installment(client, auth_headers, rental["id"])

    assert installment["total_value"] == 3000.0
    assert installment["status"] == "pendente"

    response = await client.post(
        f"/api/rentals/installments/{installment['id']}/pay",
        json={"paid_value": 3000.0},
        headers=auth_headers
    )

    assert response.status_code == 200
    paid = response.json()
    assert paid["status"] == "pago"
    assert paid["paid_value"] == 3000.0
    assert paid["payment_date"] is not None

    response = await client.get(f"/api/rentals/{rental['id']}/installments", headers=auth_headers)
    assert [i["status"] for i in response.json()] == ["pago"]


async def test_cannot_pay_another_agency_installment(client, auth_headers):
    rental = await create_rental(client, auth_headers)
    installment = await add_installment(client, auth_headers, rental["id"])
    other_headers = await register_and_login(
        client, email="outra@corretora.com.br", org_name="Outra Corretora"
    )

    response = await client.post(
        f"/api/rentals/installments/{installment['id']}/pay",
        json={"paid_value": 3000.0},
        headers=other_headers
    )
    assert response.status_code == 404


async def test_update_rejects_null_rent_value(client, auth_headers):
    rental = await create_rental(client, auth_headers)

    response = await client.patch(
        f"/api/rentals/{rental['id']}", json={"rent_value": None}, headers=auth_headers
    )
    assert response.status_code == 422

    response = await client.get(f"/api/rentals/{rental['id']}", headers=auth_headers)
    assert response.json()["rent_value"] == 2500.0


async def test_payment_date_with_offset_is_stored_in_utc(client, auth_headers, session_factory):
    rental = await create_rental(client, auth_headers)
    installment = await add_installment(client, auth_headers, rental["id"])

    # 23:30 in Sao Paulo on 31 May is already 1 June in UTC
    response = await client.post(
        f"/api/rentals/installments/{installment['id']}/pay",
        json={"paid_value": 3000.0, "payment_date": "2024-05-31T23:30:00-03:00"},
        headers=auth_headers
    )

    assert response.status_code == 200
    assert datetime.fromisoformat(response.json()["payment_date"]) == datetime(2024, 6, 1, 2, 30)

    me = await client.get("/api/auth/me", headers=auth_headers)
    org_id = uuid.UUID(me.json()["org_id"])
    async with session_factory() as session:
        stats = await DashboardService(session).monthly(
            org_id, 2, reference=datetime(2024, 6, 15)
        )

    assert [(point.month, point.revenue) for point in stats.revenue] == [
        ("2024-05", 0.0), ("2024-06", 3000.0)
    ]


async def test_delete_rental_removes_installments(client, auth_headers):
    rental = await create_rental(client, auth_headers)
    await add_installment(client, auth_headers, rental["id"])
    await add_installment(client, auth_headers, rental["id"], reference_month="2024-06", due_date="2024-06-10")

    response = await client.delete(f"/api/rentals/{rental['id']}", headers=auth_headers)
    assert response.status_code == 204

    response = await client.get(f"/api/rentals/{rental['id']}/installments", headers=auth_headers)
    assert response.status_code == 404
