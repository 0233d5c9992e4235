from datetime import datetime

from tests.test_leads_api import create_lead
from tests.test_properties_api import create_property
from tests.test_rentals_api import create_rental, add_installment


async def test_stats_empty_agency(client, auth_headers):
    response = await client.get("/api/dashboard/stats", headers=auth_headers)

    assert response.status_code == 200
    stats = response.json()
    assert stats["active_properties"] == 0
    assert stats["total_leads"] == 0
    assert stats["active_rentals"] == 0
    assert stats["monthly_revenue"] == 0
    assert stats["leads_by_status"] == {
        "novo": 0, "em_atendimento": 0, "qualificado": 0,
        "proposta": 0, "fechado": 0, "perdido": 0,
    }
    assert stats["stale"] is False


async def test_stats_counts(client, auth_headers):
    await create_property(client, auth_headers)
    await create_property(client, auth_headers, title="Sala comercial", status="vendido")
    first = await create_lead(client, auth_headers)
    await create_lead(client, auth_headers)
    await client.patch(
        f"/api/leads/{first['id']}/status", json={"status": "fechado"}, headers=auth_headers
    )
    rental = await create_rental(client, auth_headers)
    installment = await add_installment(client, auth_headers, rental["id"])
    await client.post(
        f"/api/rentals/installments/{installment['id']}/pay",
        json={"paid_value": 2950.0},
        headers=auth_headers
    )

    stats = (await client.get("/api/dashboard/stats", headers=auth_headers)).json()

    assert stats["active_properties"] == 1
    assert stats["total_leads"] == 1
    assert stats["leads_by_status"]["novo"] == 1
    assert stats["leads_by_status"]["fechado"] == 1
    assert stats["active_rentals"] == 1
    assert stats["monthly_revenue"] == 2950.0


async def test_stats_refresh_after_write(client, auth_headers):
    stats = (await client.get("/api/dashboard/stats", headers=auth_headers)).json()
    assert stats["total_leads"] == 0

    await create_lead(client, auth_headers)

    stats = (await client.get("/api/dashboard/stats", headers=auth_headers)).json()
    assert stats["total_leads"] == 1


async def test_monthly_series(client, auth_headers):
    await create_lead(client, auth_headers)
    await create_lead(client, auth_headers)

    response = await client.get(
        "/api/dashboard/monthly", params={"months_back": 3}, headers=auth_headers
    )

    assert response.status_code == 200
    body = response.json()
    assert len(body["leads"]) == 3
    assert len(body["revenue"]) == 3
    assert body["leads"][-1]["month"] == datetime.utcnow().strftime("%Y-%m")
    assert body["leads"][-1]["total"] == 2
    assert body["leads"][-1]["novos"] == 2


async def test_monthly_defaults_to_six_months(client, auth_headers):
    body = (await client.get("/api/dashboard/monthly", headers=auth_headers)).json()
    assert len(body["leads"]) == 6


async def test_monthly_rejects_out_of_range_window(client, auth_headers):
    for months_back in (0, 25):
        response = await client.get(
            "/api/dashboard/monthly", params={"months_back": months_back}, headers=auth_headers
        )
        assert response.status_code == 422


async def test_activity_feed(client, auth_headers):
    await create_lead(client, auth_headers, name="Paula")

    response = await client.get("/api/dashboard/activity", headers=auth_headers)

    assert response.status_code == 200
    feed = response.json()
    actions = [item["action"] for item in feed["items"]]
    assert "lead_created" in actions
    assert feed["total"] == len(feed["items"])
