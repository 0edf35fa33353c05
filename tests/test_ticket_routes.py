from datetime import timedelta

from conftest import PASSWORD, auth_headers
from database.models import Ticket
from utils.dates import utcnow


FAUCET = {
    "title": "Leaky Kitchen Faucet",
    "description": "The kitchen faucet drips all night long.",
    "category": "plumbing",
    "priority": "high",
}


def create_ticket(client, user, **overrides):
    response = client.post("/tickets", json={**FAUCET, **overrides}, headers=auth_headers(user))
    assert response.status_code == 201, response.json()
    return response.json()["data"]


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["data"]["status"] == "ok"


def test_signin_and_profile(client, tenant):
    response = client.post("/auth/signin", json={"email": tenant.email, "password": PASSWORD})
    body = response.json()

    assert response.status_code == 200
    assert body["success"] is True
    token = body["data"]["access_token"]

    me = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.json()["data"]["email"] == tenant.email
    assert me.json()["data"]["assigned_unit"] == "A001"


def test_signin_with_wrong_password(client, tenant):
    response = client.post("/auth/signin", json={"email": tenant.email, "password": "nope"})
    assert response.status_code == 401
    assert response.json()["success"] is False


def test_requests_without_token_get_envelope(client):
    response = client.get("/tickets")
    assert response.status_code == 401
    assert response.json()["success"] is False
    assert response.json()["error"] == "unauthorized"


def test_deactivated_user_is_rejected(client, db, tenant):
    tenant.is_active = False
    db.commit()

    response = client.get("/tickets", headers=auth_headers(tenant))
    assert response.status_code == 401


def test_tenant_creates_ticket(client, tenant, recorder):
    data = create_ticket(client, tenant)

    assert data["status"] == "unassigned"
    assert data["for_tenant"]["id"] == tenant.id
    assert data["unit"] == "A001"
    assert data["ticket_id"] == f"TCK-{data['id']:04d}"
    assert data["notifications"][0]["event"] == "ticket_created"
    assert data["notifications"][0]["channels_succeeded"] == 1
    assert len(recorder.sent) == 1


def test_create_validation_error_uses_envelope(client, tenant):
    response = client.post(
        "/tickets", json={**FAUCET, "title": "Leak"}, headers=auth_headers(tenant)
    )
    body = response.json()

    assert response.status_code == 400
    assert body["success"] is False
    assert body["data"][0]["field"] == "title"


def test_due_date_must_be_in_the_future(client, tenant):
    response = client.post(
        "/tickets", json={**FAUCET, "due_date": "2001-01-01T00:00:00"}, headers=auth_headers(tenant)
    )
    assert response.status_code == 400


def test_owner_assigns_worker(client, tenant, owner, worker, recorder):
    ticket = create_ticket(client, tenant)

    response = client.put(
        f"/tickets/{ticket['id']}",
        json={"assigned_to_id": worker.id},
        headers=auth_headers(owner),
    )
    data = response.json()["data"]

    assert response.status_code == 200
    assert data["status"] == "in_progress"
    assert data["assigned_to"]["id"] == worker.id
    assert data["notifications"][0]["event"] == "ticket_assigned"
    assert data["notifications"][0]["channels_attempted"] >= 1


def test_other_tenant_cannot_update(client, db, tenant, other_tenant):
    ticket = create_ticket(client, tenant)

    response = client.put(
        f"/tickets/{ticket['id']}",
        json={"title": "Hijacked ticket title"},
        headers=auth_headers(other_tenant),
    )

    assert response.status_code == 403
    assert response.json()["error"] == "forbidden"
    assert db.get(Ticket, ticket["id"]).title == "Leaky Kitchen Faucet"


def test_get_ticket_visibility(client, tenant, other_tenant, owner):
    ticket = create_ticket(client, tenant)

    assert client.get(f"/tickets/{ticket['id']}", headers=auth_headers(tenant)).status_code == 200
    assert client.get(f"/tickets/{ticket['id']}", headers=auth_headers(owner)).status_code == 200
    assert (
        client.get(f"/tickets/{ticket['id']}", headers=auth_headers(other_tenant)).status_code
        == 403
    )
    assert client.get("/tickets/9999", headers=auth_headers(owner)).status_code == 404


def test_list_tickets_with_filters(client, tenant, owner):
    create_ticket(client, tenant)
    create_ticket(client, tenant, title="Heater not working", category="heating", priority="low")

    all_mine = client.get("/tickets", headers=auth_headers(tenant)).json()["data"]
    heating = client.get(
        "/tickets", params={"category": "heating"}, headers=auth_headers(owner)
    ).json()["data"]

    assert len(all_mine) == 2
    assert [t["title"] for t in heating] == ["Heater not working"]


def test_worker_resolves_through_status_route(client, owner, worker, prop):
    ticket = create_ticket(
        client, owner, property_id=prop.id, unit="A005", assigned_to_id=worker.id
    )

    response = client.patch(
        f"/tickets/{ticket['id']}/status",
        json={"status": "completed", "notes": "Replaced the washer"},
        headers=auth_headers(worker),
    )
    data = response.json()["data"]

    assert response.status_code == 200
    assert data["status"] == "completed"
    assert data["completed_at"] is not None
    assert data["history"][-1]["notes"] == "Replaced the washer"


def test_tenant_cannot_use_status_route(client, tenant):
    ticket = create_ticket(client, tenant)

    response = client.patch(
        f"/tickets/{ticket['id']}/status",
        json={"status": "resolved"},
        headers=auth_headers(tenant),
    )
    assert response.status_code == 403


def test_comments(client, tenant, owner):
    ticket = create_ticket(client, tenant)

    added = client.post(
        f"/tickets/{ticket['id']}/comments",
        json={"message": "Plumber booked for Monday"},
        headers=auth_headers(owner),
    )
    empty = client.post(
        f"/tickets/{ticket['id']}/comments",
        json={"message": "   "},
        headers=auth_headers(tenant),
    )
    fetched = client.get(f"/tickets/{ticket['id']}", headers=auth_headers(tenant)).json()["data"]

    assert added.status_code == 201
    assert added.json()["data"]["author"]["id"] == owner.id
    assert empty.status_code == 400
    assert [c["message"] for c in fetched["comments"]] == ["Plumber booked for Monday"]


def test_delete_ticket(client, tenant, other_tenant):
    ticket = create_ticket(client, tenant)

    forbidden = client.delete(f"/tickets/{ticket['id']}", headers=auth_headers(other_tenant))
    deleted = client.delete(f"/tickets/{ticket['id']}", headers=auth_headers(tenant))
    missing = client.get(f"/tickets/{ticket['id']}", headers=auth_headers(tenant))

    assert forbidden.status_code == 403
    assert deleted.status_code == 200
    assert missing.status_code == 404


def test_notification_status_requires_admin(client, owner, tenant):
    ok = client.get("/notifications/status", headers=auth_headers(owner))
    denied = client.get("/notifications/status", headers=auth_headers(tenant))

    assert ok.json()["data"] == {"channels": ["recording"], "total_channels": 1}
    assert denied.status_code == 403


def test_company_assignment_on_update_notifies(client, owner, prop, company, recorder):
    ticket = create_ticket(client, owner, property_id=prop.id, unit="A006")
    assert ticket["status"] == "unassigned"

    response = client.put(
        f"/tickets/{ticket['id']}",
        json={"company_id": company.id},
        headers=auth_headers(owner),
    )
    data = response.json()["data"]

    assert response.status_code == 200
    assert data["status"] == "in_progress"
    assert data["assigned_to"] is None
    assert data["company"]["id"] == company.id
    assert [n["event"] for n in data["notifications"]] == ["ticket_assigned"]
    assert [sent[0] for sent in recorder.sent] == ["ticket_created", "ticket_assigned"]


def test_overdue_and_age_are_reported(client, db, tenant, owner):
    ticket = create_ticket(client, tenant)

    fresh = client.get(f"/tickets/{ticket['id']}", headers=auth_headers(tenant)).json()["data"]
    assert fresh["is_overdue"] is False
    assert fresh["days_since_creation"] == 0

    row = db.get(Ticket, ticket["id"])
    row.due_date = utcnow() - timedelta(days=1)
    row.created_at = utcnow() - timedelta(days=3, hours=1)
    db.commit()

    stale = client.get(f"/tickets/{ticket['id']}", headers=auth_headers(tenant)).json()["data"]
    assert stale["is_overdue"] is True
    assert stale["days_since_creation"] == 3

    resolved = client.patch(
        f"/tickets/{ticket['id']}/status",
        json={"status": "resolved"},
        headers=auth_headers(owner),
    ).json()["data"]
    assert resolved["is_overdue"] is False
