async def create_property(client, headers, **overrides):
    payload = {
        "title": "Apartamento 2 dormitórios em Pinheiros",
        "code": "AP-0042",
        "purpose": "locacao",
        "rent_price": 3200,
        "bedrooms": 2,
        "address": "Rua dos Pinheiros",
        "city": "São Paulo",
        "state": "SP",
    }
    payload.update(overrides)
    response = await client.post("/api/properties/", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


async def test_property_types_catalogue(client, auth_headers):
    for name in ("Casa", "Apartamento"):
        response = await client.post("/api/property-types/", json={"name": name}, headers=auth_headers)
        assert response.status_code == 201

    response = await client.post("/api/property-types/", json={"name": "Casa"}, headers=auth_headers)
    assert response.status_code == 400

    response = await client.get("/api/property-types/", headers=auth_headers)
    assert [t["name"] for t in response.json()] == ["Apartamento", "Casa"]


async def test_create_and_get_detail(client, auth_headers):
    response = await client.post("/api/property-types/", json={"name": "Apartamento"}, headers=auth_headers)
    type_id = response.json()["id"]
    prop = await create_property(client, auth_headers, property_type_id=type_id)

    assert prop["status"] == "disponivel"
    assert prop["featured"] is False

    response = await client.get(f"/api/properties/{prop['id']}", headers=auth_headers)
    assert response.status_code == 200
    detail = response.json()
    assert detail["property_type"]["name"] == "Apartamento"
    assert detail["photos"] == []


async def test_list_filters(client, auth_headers):
    await create_property(client, auth_headers)
    await create_property(
        client, auth_headers, title="Casa térrea", code="CA-0001", purpose="venda", sale_price=850000
    )

    response = await client.get("/api/properties/", params={"purpose": "venda"}, headers=auth_headers)
    assert [p["title"] for p in response.json()["items"]] == ["Casa térrea"]

    response = await client.get("/api/properties/", params={"search": "AP-00"}, headers=auth_headers)
    assert response.json()["total"] == 1


async def test_update_and_delete(client, auth_headers):
    prop = await create_property(client, auth_headers)

    response = await client.patch(
        f"/api/properties/{prop['id']}", json={"status": "locado"}, headers=auth_headers
    )
    assert response.status_code == 200
    assert response.json()["status"] == "locado"

    await client.post(
        f"/api/properties/{prop['id']}/photos",
        json={"url": "https://cdn.imobi.com.br/1.jpg"},
        headers=auth_headers
    )
    response = await client.delete(f"/api/properties/{prop['id']}", headers=auth_headers)
    assert response.status_code == 204

    response = await client.get(f"/api/properties/{prop['id']}", headers=auth_headers)
    assert response.status_code == 404


async def test_single_cover_photo(client, auth_headers):
    prop = await create_property(client, auth_headers)
    url = f"/api/properties/{prop['id']}/photos"

    first = (await client.post(
        url, json={"url": "https://cdn.imobi.com.br/1.jpg", "is_cover": True, "order_index": 1},
        headers=auth_headers
    )).json()
    second = (await client.post(
        url, json={"url": "https://cdn.imobi.com.br/2.jpg", "is_cover": True, "order_index": 0},
        headers=auth_headers
    )).json()

    photos = (await client.get(url, headers=auth_headers)).json()
    assert [p["id"] for p in photos] == [second["id"], first["id"]]
    assert [p["is_cover"] for p in photos] == [True, False]

    response = await client.post(f"{url}/{first['id']}/cover", headers=auth_headers)
    assert response.status_code == 200
    photos = (await client.get(url, headers=auth_headers)).json()
    assert {p["id"]: p["is_cover"] for p in photos} == {first["id"]: True, second["id"]: False}

    response = await client.delete(f"{url}/{second['id']}", headers=auth_headers)
    assert response.status_code == 204
    assert len((await client.get(url, headers=auth_headers)).json()) == 1


async def test_update_rejects_null_required_fields(client, auth_headers):
    prop = await create_property(client, auth_headers)

    for field in ("title", "status", "featured"):
        response = await client.patch(
            f"/api/properties/{prop['id']}", json={field: None}, headers=auth_headers
        )
        assert response.status_code == 422, field

    response = await client.patch(
        f"/api/properties/{prop['id']}", json={"code": None}, headers=auth_headers
    )
    assert response.status_code == 200
    assert response.json()["code"] is None
