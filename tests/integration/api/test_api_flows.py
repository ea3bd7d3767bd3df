from __future__ import annotations

from decimal import Decimal

API = "/api/v1"


def _data(response, status_code=200):
    assert response.status_code == status_code, response.json()
    body = response.json()
    assert body["success"] is True
    return body["data"]


def test_deal_pipeline_until_won(client, admin_headers):
    lead = _data(
        client.post(f"{API}/crm/leads", json={"name": "Carlos Lima", "address": "Rua B, 2"}, headers=admin_headers),
        201,
    )
    deal = _data(
        client.post(
            f"{API}/crm/deals",
            json={"lead_id": lead["id"], "title": "Reforma cozinha", "estimated_value": "50000"},
            headers=admin_headers,
        ),
        201,
    )

    moved = _data(
        client.patch(f"{API}/crm/deals/{deal['id']}/stage", json={"stage": "proposta"}, headers=admin_headers)
    )
    assert moved["stage"] == "proposta"

    proposal = _data(
        client.post(f"{API}/crm/deals/{deal['id']}/proposals", json={"multiplier": "1.2"}, headers=admin_headers),
        201,
    )
    assert proposal["version"] == 1
    assert Decimal(proposal["value"]) == Decimal("60000")
    assert proposal["pdf_url"].endswith(f"/proposta_{deal['id']}_v1.pdf")

    won = _data(client.post(f"{API}/crm/deals/{deal['id']}/win", json={}, headers=admin_headers))
    assert won["stage"] == "ganho"
    site = _data(client.get(f"{API}/sites/{won['site_id']}", headers=admin_headers))
    assert site["name"] == "Reforma cozinha"
    assert site["status"] == "em_andamento"
    assert _data(client.get(f"{API}/crm/leads/{lead['id']}", headers=admin_headers))["status"] == "cliente"

    response = client.patch(f"{API}/crm/deals/{deal['id']}/stage", json={"stage": "negociacao"}, headers=admin_headers)
    assert response.status_code == 409
    assert response.json()["success"] is False

    timeline = _data(client.get(f"{API}/crm/deals/{deal['id']}/interactions", headers=admin_headers))
    assert {entry["kind"] for entry in timeline} == {"sistema"}

    stats = _data(client.get(f"{API}/crm/deals/stats", headers=admin_headers))
    assert (stats["total"], stats["won"], stats["lost"]) == (1, 1, 0)
    assert stats["conversion_rate"] == 100.0


def test_lose_requires_reason(client, admin_headers):
    lead = _data(client.post(f"{API}/crm/leads", json={"name": "Vera"}, headers=admin_headers), 201)
    deal = _data(
        client.post(f"{API}/crm/deals", json={"lead_id": lead["id"], "title": "Muro"}, headers=admin_headers), 201
    )

    response = client.post(f"{API}/crm/deals/{deal['id']}/lose", json={"reason": ""}, headers=admin_headers)
    assert response.status_code == 422

    lost = _data(client.post(f"{API}/crm/deals/{deal['id']}/lose", json={"reason": "Preco"}, headers=admin_headers))
    assert lost["stage"] == "perdido"
    assert lost["loss_reason"] == "Preco"


def test_kanban_board_flow(upload_dir, client, admin_headers):
    site = _data(client.post(f"{API}/sites", json={"name": "Casa Azul"}, headers=admin_headers), 201)
    crew = _data(client.post(f"{API}/crews", json={"name": "Alvenaria"}, headers=admin_headers), 201)

    def create(title):
        payload = {"site_id": site["id"], "title": title, "assignment_kind": "equipe", "crew_id": crew["id"]}
        return _data(client.post(f"{API}/tasks", json=payload, headers=admin_headers), 201)

    first, second = create("Fundacao"), create("Paredes")
    assert (first["order"], second["order"]) == (0, 1)

    board = _data(
        client.patch(
            f"{API}/tasks/{second['id']}/move", json={"status": "em_progresso", "index": 0}, headers=admin_headers
        )
    )
    positions = {task["id"]: (task["status"], task["order"]) for task in board}
    assert positions == {first["id"]: ("a_fazer", 0), second["id"]: ("em_progresso", 0)}

    label = _data(client.post(f"{API}/labels", json={"name": "Urgente", "color": "#EF4444"}, headers=admin_headers), 201)
    tagged = _data(client.post(f"{API}/tasks/{first['id']}/labels/{label['id']}", headers=admin_headers))
    assert [item["name"] for item in tagged["labels"]] == ["Urgente"]

    attachment = _data(
        client.post(
            f"{API}/tasks/{first['id']}/attachments",
            files={"file": ("planta.pdf", b"%PDF-1.4", "application/pdf")},
            headers=admin_headers,
        ),
        201,
    )
    assert attachment["category"] == "documento"
    assert attachment["url"].startswith(f"/uploads/tasks/{first['id']}/")
    assert (upload_dir / attachment["url"].removeprefix("/uploads/")).read_bytes() == b"%PDF-1.4"

    _data(client.delete(f"{API}/labels/{label['id']}", headers=admin_headers))
    task = _data(client.get(f"{API}/tasks/{first['id']}", headers=admin_headers))
    assert task["labels"] == []


def test_tool_custody_flow(client, admin_headers):
    site = _data(client.post(f"{API}/sites", json={"name": "Galpao"}, headers=admin_headers), 201)
    person = _data(
        client.post(f"{API}/contractors", json={"name": "Joao", "cpf": "123.456.789-01"}, headers=admin_headers), 201
    )
    tool = _data(client.post(f"{API}/tools", json={"name": "Serra circular"}, headers=admin_headers), 201)

    custody = {"site_id": site["id"], "responsible_id": person["id"]}
    checked_out = _data(client.post(f"{API}/tools/{tool['id']}/checkout", json=custody, headers=admin_headers))
    assert checked_out["status"] == "em_uso"
    assert checked_out["location"]["site_id"] == site["id"]

    response = client.post(f"{API}/tools/{tool['id']}/checkout", json=custody, headers=admin_headers)
    assert response.status_code == 409

    returned = _data(client.post(f"{API}/tools/{tool['id']}/return", headers=admin_headers))
    assert returned["status"] == "disponivel"
    assert returned["location"] is None

    history = _data(client.get(f"{API}/tools/{tool['id']}/history", headers=admin_headers))
    assert [entry["kind"] for entry in history] == ["devolucao", "saida"]

    stats = _data(client.get(f"{API}/tools/stats", headers=admin_headers))
    assert (stats["total"], stats["available"]) == (1, 1)


def test_attendance_and_payroll(client, admin_headers):
    site = _data(client.post(f"{API}/sites", json={"name": "Obra Centro"}, headers=admin_headers), 201)
    person = _data(
        client.post(
            f"{API}/contractors",
            json={"name": "Joao", "cpf": "12345678901", "daily_rate": "180"},
            headers=admin_headers,
        ),
        201,
    )

    sheet = _data(client.get(f"{API}/attendance", params={"date": "2024-03-04"}, headers=admin_headers))
    assert [(entry["contractor_id"], entry["present"]) for entry in sheet] == [(person["id"], False)]

    record = {"date": "2024-03-04", "contractor_id": person["id"], "present": True, "site_id": site["id"]}
    _data(client.post(f"{API}/attendance", json=record, headers=admin_headers))

    response = client.post(f"{API}/attendance", json={**record, "site_id": None}, headers=admin_headers)
    assert response.status_code == 422

    payroll = _data(
        client.get(f"{API}/attendance/payroll", params={"start": "2024-03-01", "end": "2024-03-31"}, headers=admin_headers)
    )
    assert len(payroll) == 1
    assert payroll[0]["days_worked"] == 1
    assert Decimal(payroll[0]["total"]) == Decimal("180")


def test_assigned_crew_cannot_be_deleted(client, admin_headers):
    site = _data(client.post(f"{API}/sites", json={"name": "Sobrado"}, headers=admin_headers), 201)
    crew = _data(client.post(f"{API}/crews", json={"name": "Pintura"}, headers=admin_headers), 201)
    payload = {"site_id": site["id"], "title": "Pintar fachada", "assignment_kind": "equipe", "crew_id": crew["id"]}
    task = _data(client.post(f"{API}/tasks", json=payload, headers=admin_headers), 201)

    response = client.delete(f"{API}/crews/{crew['id']}", headers=admin_headers)
    assert response.status_code == 400
    assert response.json()["success"] is False
    assert _data(client.get(f"{API}/tasks/{task['id']}", headers=admin_headers))["crew_id"] == crew["id"]

    _data(client.delete(f"{API}/tasks/{task['id']}", headers=admin_headers))
    _data(client.delete(f"{API}/crews/{crew['id']}", headers=admin_headers))


def test_task_activity_feed(client, admin_headers):
    site = _data(client.post(f"{API}/sites", json={"name": "Edificio Sol"}, headers=admin_headers), 201)
    crew = _data(client.post(f"{API}/crews", json={"name": "Eletrica"}, headers=admin_headers), 201)
    payload = {"site_id": site["id"], "title": "Passar fiacao", "assignment_kind": "equipe", "crew_id": crew["id"]}
    task = _data(client.post(f"{API}/tasks", json=payload, headers=admin_headers), 201)
    _data(client.patch(f"{API}/tasks/{task['id']}/move", json={"status": "concluido", "index": 0}, headers=admin_headers))

    feed = _data(client.get(f"{API}/logs", params={"task_id": task["id"]}, headers=admin_headers))
    assert [entry["action"] for entry in feed] == ["moveu", "criou"]
    assert feed[0]["details"]["to"] == "concluido"
    assert feed[0]["user_id"] is not None

    moves = _data(client.get(f"{API}/logs", params={"action": "moveu"}, headers=admin_headers))
    assert [entry["task_id"] for entry in moves] == [task["id"]]

    stats = _data(client.get(f"{API}/logs/stats", headers=admin_headers))
    assert stats["total"] == 2
    assert stats["by_action"] == {"criou": 1, "atualizou": 0, "deletou": 0, "moveu": 1}

    assert client.get(f"{API}/logs", params={"action": "reordenou"}, headers=admin_headers).status_code == 422
