from frontdesk.identity import IdentityProviderError
from frontdesk.models import Receptionist, Staff

from .factories import make_org, make_staff


def test_create_staff_with_login(rpc, db, browser, identity):
    make_org(db)
    browser.login("user_ada")

    response = rpc(
        "staff.create",
        {"fullName": "Rita Reception", "email": "rita@acme.test", "role": "Receptionist", "canLogin": True},
    )
    assert response.status_code == 200
    result = response.json()["result"]["data"]
    assert len(result["temporaryPassword"]) == 12
    assert result["staff"]["username"] == "rita"
    assert result["staff"]["clerkUserId"] in identity.users
    assert identity.memberships[result["staff"]["clerkUserId"]][0]["organization"]["id"] == "org_1"
    assert db.query(Receptionist).one().full_name == "Rita Reception"


def test_create_staff_without_login(rpc, db, browser, identity):
    make_org(db)
    browser.login("user_ada")
    result = rpc("staff.create", {"fullName": "Paper Person"}).json()["result"]["data"]
    assert result["temporaryPassword"] is None
    assert result["staff"]["role"] == "Employee"
    assert "create_user" not in identity.calls


def test_login_requires_email(rpc, db, browser):
    make_org(db)
    browser.login("user_ada")
    assert rpc("staff.create", {"fullName": "No Mail", "canLogin": True}).status_code == 400
    assert db.query(Staff).count() == 0


def test_rejects_unknown_role(rpc, db, browser):
    make_org(db)
    browser.login("user_ada")
    assert rpc("staff.create", {"fullName": "Boss", "role": "Overlord"}).status_code == 400


def test_identity_rejection_is_reported(rpc, db, browser, identity, monkeypatch):
    make_org(db)
    browser.login("user_ada")

    async def reject(**kwargs):
        raise IdentityProviderError(
            "rejected", status_code=422, errors=[{"long_message": "That email address is taken."}]
        )

    monkeypatch.setattr(identity, "create_user", reject)
    response = rpc("staff.create", {"fullName": "Dup", "email": "dup@acme.test", "canLogin": True})
    assert response.status_code == 400
    assert "That email address is taken." in response.json()["error"]["message"]
    assert db.query(Staff).count() == 0


def test_update_delete_and_reset(rpc, db, browser):
    org = make_org(db)
    other = make_org(db, clerk_org_id="org_2", name="Other")
    person = make_staff(db, org, "Pat Person", clerk_user_id="user_pat")
    stranger = make_staff(db, other, "Sam Stranger")
    browser.login("user_ada")

    updated = rpc("staff.update", {"id": person.id, "department": "Finance", "isActive": False})
    assert updated.json()["result"]["data"]["staff"]["department"] == "Finance"
    assert rpc("staff.getActiveStaff", {"organizationId": "org_1"}).json()["result"]["data"] == []

    assert len(rpc("staff.resetPassword", {"id": person.id}).json()["result"]["data"]["temporaryPassword"]) == 12
    assert rpc("staff.delete", {"id": stranger.id}).status_code == 403
    assert rpc("staff.update", {"id": stranger.id, "department": "Finance"}).status_code == 403
    assert rpc("staff.delete", {"id": 9999}).status_code == 404
    assert rpc("staff.delete", {"id": person.id}).status_code == 200
    assert [s["fullName"] for s in rpc("staff.getAll").json()["result"]["data"]] == []


def test_receptionist_profile(rpc, db, browser, identity):
    org = make_org(db)
    make_staff(db, org, "Rita Reception", role="Receptionist", clerk_user_id="user_rita", email="rita@acme.test")
    make_staff(db, org, "Hank Host")
    identity.users["user_rita"] = {"first_name": "Rita", "last_name": "Reception", "email_addresses": []}
    browser.login("user_rita")

    assert rpc("receptionist.getCurrent").json()["result"]["data"] is None
    profile = rpc("receptionist.getOrCreate").json()["result"]["data"]
    assert profile["fullName"] == "Rita Reception"
    assert profile["location"] == "Main Reception"
    assert rpc("receptionist.getOrCreate").json()["result"]["data"]["id"] == profile["id"]
    assert rpc("receptionist.getStaffList").json()["result"]["data"] == ["Hank Host", "Rita Reception"]
