import pytest


@pytest.mark.asyncio
async def test_balances_from_both_sides(client, auth_headers):
    created = (await client.post(
        "/api/v1/eventos",
        json={"titulo": "Nafta", "monto": 100, "moneda": "ARS", "repeticion": "unico"},
        headers=auth_headers("u1")
    )).json()
    await client.post("/api/v1/invitaciones/join", json={"token": created["token"]}, headers=auth_headers("u2"))
    await client.post(f"/api/v1/eventos/{created['id']}/cerrar", json={}, headers=auth_headers("u1"))

    mine = (await client.get("/api/v1/balances", headers=auth_headers("u1"))).json()
    theirs = (await client.get("/api/v1/balances", headers=auth_headers("u2"))).json()

    assert len(mine) == 1
    assert mine[0]["key"] == "u1|u2|ARS"
    assert mine[0]["contraparte"] == "u2"
    assert mine[0]["a_favor"] == pytest.approx(50.0)
    assert theirs[0]["a_favor"] == pytest.approx(-50.0)
    assert theirs[0]["saldo"] == mine[0]["saldo"]


@pytest.mark.asyncio
async def test_no_balances(client, auth_headers):
    response = await client.get("/api/v1/balances", headers=auth_headers("u1"))

    assert response.status_code == 200
    assert response.json() == []
