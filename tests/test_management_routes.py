from conftest import PASSWORD, auth_headers
from database.models import Ticket, Unit, User
from enums.user_role import UserRole
from services.seed_service import seed_default_owner


def test_owner_creates_tenant_in_unit(client, db, owner, prop):
    response = client.post(
        "/users",
        json={
            "name": "Nina Newcomer",
            "email": "nina@example.com",
            "password": "welcome1",
            "role": "tenant",
            "property_id": prop.id,
            "unit": "A007",
        },
        headers=auth_headers(owner),
    )
    data = response.json()["data"]

    assert response.status_code == 201
    assert data["assigned_property_id"] == prop.id
    assert data["assigned_unit"] == "A007"
    unit = db.query(Unit).filter_by(property_id=prop.id, unit_number="A007").one()
    assert unit.is_occupied is True
    assert unit.tenant_id == data["id"]


def test_duplicate_email_conflicts(client, owner, tenant):
    response = client.post(
        "/users",
        json={"name": "Copy Cat", "email": tenant.email, "password": "welcome1"},
        headers=auth_headers(owner),
    )
    assert response.status_code == 409


def test_admin_cannot_create_admins(client, admin):
    response = client.post(
        "/users",
        json={"name": "Eve Admin", "email": "eve@example.com", "password": "welcome1", "role": "admin"},
        headers=auth_headers(admin),
    )
    assert response.status_code == 403


def test_tenant_cannot_manage_users(client, tenant):
    assert client.get("/users", headers=auth_headers(tenant)).status_code == 403


def test_list_users_by_role_and_search(client, owner, worker, tenant):
    workers = client.get("/users", params={"role": "worker"}, headers=auth_headers(owner))
    found = client.get("/users", params={"search": "tina"}, headers=auth_headers(owner))

    assert [u["id"] for u in workers.json()["data"]] == [worker.id]
    assert [u["id"] for u in found.json()["data"]] == [tenant.id]


def test_owner_role_cannot_change(client, owner, make_user):
    other_owner = make_user(UserRole.OWNER)

    response = client.put(
        f"/users/{other_owner.id}", json={"role": "tenant"}, headers=auth_headers(owner)
    )
    assert response.status_code == 400


def test_deactivate_and_assign_admin(client, db, owner, admin, worker):
    deactivated = client.patch(f"/users/{worker.id}/deactivate", headers=auth_headers(admin))
    promoted = client.put(f"/users/{worker.id}/assign-admin", headers=auth_headers(owner))

    assert deactivated.json()["data"]["is_active"] is False
    assert promoted.json()["data"]["role"] == "admin"
    assert client.patch(f"/users/{admin.id}/deactivate", headers=auth_headers(admin)).status_code == 400


def test_delete_user_referenced_by_ticket_conflicts(client, db, owner, tenant, make_user):
    ticket = client.post(
        "/tickets",
        json={
            "title": "Broken window pane",
            "description": "Bedroom window pane cracked in the storm.",
        },
        headers=auth_headers(tenant),
    ).json()["data"]
    lonely = make_user(UserRole.WORKER)
    commenter = make_user(UserRole.ADMIN)
    updater = make_user(UserRole.SENIOR_ADMIN)
    client.post(
        f"/tickets/{ticket['id']}/comments",
        json={"message": "Glazier called"},
        headers=auth_headers(commenter),
    )
    client.patch(
        f"/tickets/{ticket['id']}/status",
        json={"status": "waiting"},
        headers=auth_headers(updater),
    )

    referenced = client.delete(f"/users/{tenant.id}", headers=auth_headers(owner))
    commented = client.delete(f"/users/{commenter.id}", headers=auth_headers(owner))
    updated = client.delete(f"/users/{updater.id}", headers=auth_headers(owner))
    removed = client.delete(f"/users/{lonely.id}", headers=auth_headers(owner))
    itself = client.delete(f"/users/{owner.id}", headers=auth_headers(owner))
    fetched = client.get(f"/tickets/{ticket['id']}", headers=auth_headers(owner))

    assert referenced.status_code == 409
    assert commented.status_code == 409
    assert updated.status_code == 409
    assert removed.status_code == 200
    assert db.query(User).filter_by(id=lonely.id).first() is None
    assert itself.status_code == 400
    assert fetched.status_code == 200
    assert fetched.json()["data"]["comments"][0]["author"]["id"] == commenter.id


def test_reset_and_change_password(client, owner, admin, tenant):
    reset = client.put(
        f"/users/{tenant.id}/reset-password",
        json={"new_password": "brandnew1"},
        headers=auth_headers(admin),
    )
    owner_reset = client.put(
        f"/users/{owner.id}/reset-password",
        json={"new_password": "brandnew1"},
        headers=auth_headers(admin),
    )
    signin = client.post("/auth/signin", json={"email": tenant.email, "password": "brandnew1"})
    wrong_current = client.patch(
        "/auth/password",
        json={"current_password": PASSWORD, "new_password": "another1"},
        headers=auth_headers(tenant),
    )

    assert reset.status_code == 200
    assert owner_reset.status_code == 403
    assert signin.status_code == 200
    assert wrong_current.status_code == 400


def test_assign_managed_properties(client, owner, admin, prop, tenant):
    response = client.post(
        f"/users/{admin.id}/assign-properties",
        json={"property_ids": [prop.id]},
        headers=auth_headers(owner),
    )
    listed = client.get("/properties", headers=auth_headers(admin))
    not_admin = client.post(
        f"/users/{tenant.id}/assign-properties",
        json={"property_ids": [prop.id]},
        headers=auth_headers(owner),
    )

    assert response.json()["data"]["managed_property_ids"] == [prop.id]
    assert [p["id"] for p in listed.json()["data"]] == [prop.id]
    assert not_admin.status_code == 400


def test_create_property_generates_units(client, owner):
    response = client.post(
        "/properties",
        json={
            "name": "Harbour View",
            "address": {"street": "1 Dock Road", "city": "Cape Town"},
            "property_type": "student_residence",
            "total_units": 23,
            "amenities": ["wifi", "laundry"],
        },
        headers=auth_headers(owner),
    )
    data = response.json()["data"]

    assert response.status_code == 201
    assert data["property_id"] == f"PROP-{data['id']:04d}"
    assert data["full_address"] == "1 Dock Road, Cape Town, South Africa"
    assert len(data["units"]) == 23
    assert data["units"][0]["unit_number"] == "A001"
    assert data["units"][0]["floor"] == 1
    assert data["units"][10]["floor"] == 2
    assert data["units"][22]["unit_number"] == "A023"
    assert data["units"][22]["floor"] == 3
    assert not any(u["is_occupied"] for u in data["units"])


def test_only_owner_creates_properties(client, admin):
    response = client.post(
        "/properties",
        json={"name": "Nope", "address": {"street": "x", "city": "y"}, "total_units": 1},
        headers=auth_headers(admin),
    )
    assert response.status_code == 403


def test_property_access(client, owner, admin, prop, make_user):
    stranger = make_user(UserRole.OWNER)

    assert client.get(f"/properties/{prop.id}", headers=auth_headers(owner)).status_code == 200
    assert client.get(f"/properties/{prop.id}", headers=auth_headers(admin)).status_code == 403
    assert client.get(f"/properties/{prop.id}", headers=auth_headers(stranger)).status_code == 403
    assert client.get("/properties/999", headers=auth_headers(owner)).status_code == 404


def test_assign_and_vacate_unit(client, db, owner, prop, make_user):
    newcomer = make_user(UserRole.TENANT)

    assigned = client.post(
        f"/properties/{prop.id}/assign-tenant",
        json={"unit_number": "A003", "tenant_id": newcomer.id},
        headers=auth_headers(owner),
    )
    moved = client.post(
        f"/properties/{prop.id}/assign-tenant",
        json={"unit_number": "A004", "tenant_id": newcomer.id},
        headers=auth_headers(owner),
    )
    units = {u["unit_number"]: u for u in moved.json()["data"]["units"]}

    assert assigned.status_code == 200
    assert units["A003"]["is_occupied"] is False and units["A003"]["tenant_id"] is None
    assert units["A004"]["is_occupied"] is True and units["A004"]["tenant_id"] == newcomer.id
    db.refresh(newcomer)
    assert newcomer.assigned_unit == "A004"

    vacated = client.post(
        f"/properties/{prop.id}/vacate-unit",
        json={"unit_number": "A004"},
        headers=auth_headers(owner),
    )
    units = {u["unit_number"]: u for u in vacated.json()["data"]["units"]}

    assert units["A004"]["is_occupied"] is False and units["A004"]["tenant_id"] is None
    db.refresh(newcomer)
    assert newcomer.assigned_property_id is None
    assert newcomer.assigned_unit is None


def test_occupied_unit_conflicts(client, owner, prop, tenant, make_user):
    newcomer = make_user(UserRole.TENANT)

    response = client.post(
        f"/properties/{prop.id}/assign-tenant",
        json={"unit_number": "A001", "tenant_id": newcomer.id},
        headers=auth_headers(owner),
    )
    empty = client.post(
        f"/properties/{prop.id}/vacate-unit",
        json={"unit_number": "A009"},
        headers=auth_headers(owner),
    )

    assert response.status_code == 409
    assert empty.status_code == 400


def test_company_lifecycle(client, db, owner, admin, prop, worker):
    created = client.post(
        "/companies",
        json={
            "name": "Spark Electric",
            "category": "electrical",
            "phone": "+27215550001",
            "email": "info@spark.example.com",
            "service_property_ids": [prop.id],
        },
        headers=auth_headers(admin),
    )
    company = created.json()["data"]

    assert created.status_code == 201
    assert company["owner_id"] == owner.id
    assert company["service_property_ids"] == [prop.id]

    ticket = client.post(
        "/tickets",
        json={
            "title": "Flickering lights",
            "description": "Hallway lights flicker every evening.",
            "category": "electrical",
            "property_id": prop.id,
            "unit": "A002",
            "company_id": company["id"],
        },
        headers=auth_headers(owner),
    ).json()["data"]
    assert ticket["status"] == "in_progress"
    assert ticket["company"]["name"] == "Spark Electric"

    listed = client.get("/companies", params={"category": "electrical"}, headers=auth_headers(worker))
    assert [c["id"] for c in listed.json()["data"]] == [company["id"]]

    deleted = client.delete(f"/companies/{company['id']}", headers=auth_headers(owner))
    assert deleted.status_code == 200
    db.expire_all()
    assert db.get(Ticket, ticket["id"]).company_id is None


def test_company_service_properties_must_belong_to_owner(client, owner, company, make_user):
    rival = make_user(UserRole.OWNER)

    response = client.post(
        f"/companies/{company.id}/assign-properties",
        json={"property_ids": [12345]},
        headers=auth_headers(rival),
    )
    assert response.status_code == 404


def test_seed_default_owner(db):
    seeded = seed_default_owner(db)

    assert seeded is not None
    assert seeded.role == "owner"
    assert seed_default_owner(db) is None
