from datetime import datetime

from frontdesk.models import CompanySuggestion, Organization

from .factories import make_org


def test_sync_organization_is_public_and_last_write_wins(rpc, db):
    first = rpc("organization.syncOrganization", {"clerkOrgId": "org_9", "name": "Acme", "slug": "acme"})
    assert first.status_code == 200
    second = rpc("organization.syncOrganization", {"clerkOrgId": "org_9", "name": "Acme Ltd", "slug": "acme-ltd"})

    assert first.json()["result"]["data"]["id"] == second.json()["result"]["data"]["id"]
    organization = db.query(Organization).one()
    assert (organization.name, organization.slug) == ("Acme Ltd", "acme-ltd")


def test_sync_to_db_uses_first_membership(rpc, db, browser, identity):
    identity.memberships["user_ada"] = [
        {"organization": {"id": "org_5", "name": "Initech", "slug": "initech"}, "role": "org:admin"},
        {"organization": {"id": "org_6", "name": "Other", "slug": "other"}, "role": "org:member"},
    ]
    browser.login("user_ada", org_id=None)

    result = rpc("organization.syncToDB").json()["result"]["data"]
    assert result["success"] is True
    assert result["clerkOrgId"] == "org_5"
    assert result["organization"]["name"] == "Initech"
    assert db.query(Organization).count() == 1


def test_sync_to_db_without_membership(rpc, browser):
    browser.login("user_lonely", org_id=None)
    response = rpc("organization.syncToDB")
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "NOT_FOUND"


def test_sync_to_db_identity_outage(rpc, browser, identity):
    identity.fail = True
    browser.login("user_ada")
    assert rpc("organization.syncToDB").status_code == 500


def test_current_organization_and_settings(rpc, db, browser):
    browser.login("user_ada", org_id="org_missing")
    assert rpc("organization.getCurrent").json()["result"]["data"] is None
    assert rpc("organization.updateSettings", {"phone": "555-0199"}).status_code == 404

    make_org(db)
    browser.login("user_ada")
    updated = rpc("organization.updateSettings", {"primaryColor": "#112233", "website": "https://acme.test"})
    assert updated.json()["result"]["data"]["primaryColor"] == "#112233"

    current = rpc("organization.getCurrent").json()["result"]["data"]
    assert current["name"] == "Acme Corp"
    assert current["website"] == "https://acme.test"


def test_company_suggestions_admin(rpc, db, browser):
    org = make_org(db)
    other = make_org(db, clerk_org_id="org_2", name="Umbrella")
    browser.login("user_ada")

    recorded = rpc("company.recordUsage", {"name": "  hooli   xyz "}).json()["result"]["data"]
    assert recorded["name"] == "Hooli Xyz"
    assert recorded["useCount"] == 1
    assert rpc("company.recordUsage", {"name": "N/A"}).json()["result"]["data"] is None

    foreign = CompanySuggestion(
        organization_id=other.id, name="Umbrella Corp", normalized_name="umbrella corp", last_used=datetime(2026, 10, 1)
    )
    db.add(foreign)
    db.commit()

    companies = rpc("company.getAll").json()["result"]["data"]
    assert [c["name"] for c in companies] == ["Hooli Xyz"]

    assert rpc("company.delete", {"id": foreign.id}).status_code == 404
    assert rpc("company.delete", {"id": recorded["id"]}).json()["result"]["data"]["success"] is True
    assert db.query(CompanySuggestion).filter(CompanySuggestion.organization_id == org.id).count() == 0
