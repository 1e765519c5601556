import pytest

NEW_EVENT = {"titulo": "Asado", "monto": 300, "moneda": "ARS", "repeticion": "unico"}


async def create(client, headers, **overrides):
    return await client.post("/api/v1/eventos", json=NEW_EVENT | overrides, headers=headers)


@pytest.mark.asyncio
async def test_create_evento(client, auth_headers):
    response = await create(client, auth_headers("u1"))

    assert response.status_code == 201
    data = response.json()
    assert set(data) == {"id", "token"}
    assert len(data["token"]) == 16


@pytest.mark.asyncio
async def test_create_evento_requires_auth(client):
    response = await client.post("/api/v1/eventos", json=NEW_EVENT)

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "unauthenticated"


@pytest.mark.asyncio
async def test_garbage_token_is_rejected(client):
    response = await client.get("/api/v1/eventos", headers={"Authorization": "Bearer no-es-un-jwt"})

    assert response.status_code == 401


@pytest.mark.asyncio
@pytest.mark.parametrize("overrides,message", [
    ({"titulo": ""}, "El título es requerido"),
    ({"monto": 0}, "Monto inválido"),
    ({"moneda": "BRL"}, "Moneda inválida"),
    ({"repeticion": "anual"}, "Repetición inválida"),
])
async def test_create_evento_invalid_argument(client, auth_headers, overrides, message):
    response = await create(client, auth_headers("u1"), **overrides)

    assert response.status_code == 400
    assert response.json() == {"error": {"code": "invalid-argument", "message": message}}


@pytest.mark.asyncio
async def test_get_and_list_eventos(client, auth_headers):
    created = (await create(client, auth_headers("u1"))).json()

    response = await client.get(f"/api/v1/eventos/{created['id']}", headers=auth_headers("u1"))
    assert response.status_code == 200
    data = response.json()
    assert data["estado"] == "abierto"
    assert data["token_invitacion"] == created["token"]
    assert data["participantes"] == [{"uid": "u1", "alias": "Creador", "participacion": 1.0}]

    listed = await client.get("/api/v1/eventos", headers=auth_headers("u1"))
    assert [e["id"] for e in listed.json()] == [created["id"]]

    hidden = await client.get(f"/api/v1/eventos/{created['id']}", headers=auth_headers("u2"))
    assert hidden.status_code == 404
    assert hidden.json()["error"]["code"] == "not-found"


@pytest.mark.asyncio
async def test_cerrar_evento(client, auth_headers):
    created = (await create(client, auth_headers("u1"))).json()
    await client.post("/api/v1/invitaciones/join", json={"token": created["token"]}, headers=auth_headers("u2"))
    url = f"/api/v1/eventos/{created['id']}/cerrar"

    forbidden = await client.post(url, json={}, headers=auth_headers("u2"))
    assert forbidden.status_code == 403

    outsider = await client.post(url, json={"quien_pago": "u9"}, headers=auth_headers("u1"))
    assert outsider.status_code == 412
    assert outsider.json()["error"]["code"] == "failed-precondition"

    closed = await client.post(url, json={"quien_pago": "u2"}, headers=auth_headers("u1"))
    assert closed.status_code == 200
    assert closed.json()["estado"] == "cerrado"
    assert closed.json()["quien_pago"] == "u2"

    again = await client.post(url, json={}, headers=auth_headers("u1"))
    assert again.status_code == 412


@pytest.mark.asyncio
async def test_pagos_and_aliases(client, auth_headers):
    created = (await create(client, auth_headers("u1"))).json()
    await client.post("/api/v1/invitaciones/join", json={"token": created["token"]}, headers=auth_headers("u2"))
    base = f"/api/v1/eventos/{created['id']}"

    paid = await client.put(f"{base}/pagos/u2", json={"pagado": True}, headers=auth_headers("u1"))
    assert paid.status_code == 200
    assert paid.json()["pagos"] == {"u2": True}

    renamed = await client.put(f"{base}/aliases/u2", json={"alias": "Beto"}, headers=auth_headers("u1"))
    assert renamed.status_code == 200
    assert renamed.json()["participantes"][1]["alias"] == "Beto"

    denied = await client.put(f"{base}/aliases/u1", json={"alias": "Jefa"}, headers=auth_headers("u2"))
    assert denied.status_code == 403

    invalid = await client.put(f"{base}/pagos/u2", json={}, headers=auth_headers("u1"))
    assert invalid.status_code == 400
    assert invalid.json()["error"]["code"] == "invalid-argument"
