from datetime import timedelta

from frontdesk.models import CheckInLog, CompanySuggestion, Notification
from frontdesk.shared.validators import utcnow

from .factories import make_org, make_staff, make_visitor

CHECK_IN = {
    "fullName": "Victor Visitor",
    "company": "globex corp",
    "email": "victor@globex.test",
    "phone": "555-0100",
    "whomToSee": "Hank Host",
    "reasonForVisit": "Quarterly review",
}


def test_kiosk_check_in_notifies_host(rpc, db):
    org = make_org(db)
    host = make_staff(db, org, "Hank Host", clerk_user_id="user_hank", email="hank@acme.test")

    response = rpc("visitor.create", CHECK_IN)
    assert response.status_code == 200
    visitor = response.json()["result"]["data"]
    assert visitor["whomToSee"] == "Hank Host"
    assert visitor["hostStaffId"] == host.id
    assert visitor["hostResponseStatus"] == "pending"
    assert visitor["checkOutTime"] is None

    notification = db.query(Notification).one()
    assert notification.user_id == "user_hank"
    assert notification.organization_id == "org_1"
    assert notification.type == "visitor_arrival"
    assert notification.related_id == str(visitor["id"])
    assert notification.meta["visitorCompany"] == "globex corp"

    assert db.query(CheckInLog).one().status == "CHECKED_IN"
    suggestion = db.query(CompanySuggestion).one()
    assert suggestion.name == "Globex Corp"
    assert suggestion.use_count == 1


def test_check_in_for_unknown_host_is_not_found(rpc, db):
    make_org(db)
    response = rpc("visitor.create", CHECK_IN)
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "NOT_FOUND"


def test_check_in_validates_email(rpc, db):
    org = make_org(db)
    make_staff(db, org, "Hank Host")
    response = rpc("visitor.create", {**CHECK_IN, "email": "not-an-email"})
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "BAD_REQUEST"


def test_repeat_company_bumps_suggestion(rpc, db):
    org = make_org(db)
    make_staff(db, org, "Hank Host")
    rpc("visitor.create", CHECK_IN)
    rpc("visitor.create", {**CHECK_IN, "company": "Globex   Corp"})
    rpc("visitor.create", {**CHECK_IN, "company": "N/A"})

    suggestion = db.query(CompanySuggestion).one()
    assert suggestion.use_count == 2

    response = rpc("company.getSuggestions", {"query": "glo", "organizationId": "org_1"})
    assert [s["name"] for s in response.json()["result"]["data"]] == ["Globex Corp"]
    assert rpc("company.getSuggestions", {"query": "g"}).json()["result"]["data"] == []


def test_search_and_public_checkout(rpc, db):
    org = make_org(db)
    host = make_staff(db, org, "Hank Host")
    visitor = make_visitor(db, org, host, utcnow(), full_name="Sally Search")
    make_visitor(db, org, host, utcnow(), full_name="Gone Already", check_out_time=utcnow())

    results = rpc("visitor.search", {"query": "sally"}).json()["result"]["data"]
    assert [v["id"] for v in results] == [visitor.id]
    assert rpc("visitor.search", {"query": "gone"}).json()["result"]["data"] == []

    first = rpc("visitor.checkoutPublic", {"id": visitor.id})
    assert first.status_code == 200
    assert first.json()["result"]["data"]["checkOutTime"] is not None

    second = rpc("visitor.checkoutPublic", {"id": visitor.id})
    assert second.status_code == 400
    assert second.json()["error"]["message"] == "Visitor has already checked out"


def test_visitor_log_is_scoped_to_the_organization(rpc, db, browser):
    org = make_org(db)
    other = make_org(db, clerk_org_id="org_2", name="Other Org")
    host = make_staff(db, org, "Hank Host", role="Admin", clerk_user_id="user_hank")
    other_host = make_staff(db, other, "Olga Other")
    today = make_visitor(db, org, host, utcnow())
    make_visitor(db, org, host, utcnow() - timedelta(days=40))
    foreign = make_visitor(db, other, other_host, utcnow())
    browser.login("user_hank")

    listed = rpc("visitor.list", {"filter": "today"}).json()["result"]["data"]
    assert [v["id"] for v in listed] == [today.id]
    assert len(rpc("visitor.list", {"filter": "all"}).json()["result"]["data"]) == 2

    assert rpc("visitor.getById", {"id": foreign.id}).status_code == 404
    detail = rpc("visitor.getById", {"id": today.id}).json()["result"]["data"]
    assert detail["id"] == today.id
    assert "checkInLogs" in detail


def test_export_includes_visit_duration(rpc, db, browser):
    org = make_org(db)
    host = make_staff(db, org, "Hank Host", role="Admin", clerk_user_id="user_hank")
    checked_in = utcnow() - timedelta(hours=2)
    make_visitor(db, org, host, checked_in, check_out_time=checked_in + timedelta(minutes=45))
    browser.login("user_hank")

    rows = rpc("visitor.export", {}).json()["result"]["data"]
    assert rows[0]["durationMinutes"] == 45


def test_visitor_log_without_organization_context(rpc, db, browser):
    browser.login("user_hank", org_id=None)
    response = rpc("visitor.list", {"filter": "today"})
    assert response.status_code == 400
