from datetime import datetime

from sqlalchemy import update

from frontdesk.domain.employee.service import EmployeeService
from frontdesk.models import Notification, Visitor
from frontdesk.security_utils import generate_action_token

from .factories import make_org, make_staff, make_visitor

CHECK_IN = {
    "fullName": "Victor Visitor",
    "company": "Globex",
    "email": "victor@globex.test",
    "phone": "555-0100",
    "whomToSee": "Hank Host",
}


def setup_front_desk(db):
    org = make_org(db)
    host = make_staff(db, org, "Hank Host", clerk_user_id="user_hank", email="hank@acme.test")
    make_staff(db, org, "Rita Reception", role="Receptionist", clerk_user_id="user_rita")
    make_staff(db, org, "Ada Admin", role="Admin", clerk_user_id="user_ada")
    make_staff(db, org, "Paper Admin", role="Admin")
    return org, host


def test_host_accepts_from_email_link(rpc, db):
    _, host = setup_front_desk(db)
    visitor_id = rpc("visitor.create", CHECK_IN).json()["result"]["data"]["id"]
    token = generate_action_token(visitor_id, host.id, "accept")

    response = rpc("employee.respondToVisitor", {"token": token, "action": "accept", "note": "Be right down"})
    assert response.status_code == 200
    result = response.json()["result"]["data"]
    assert result["success"] is True
    assert result["alreadyResponded"] is False
    assert result["status"] == "accepted"

    visitor = db.get(Visitor, visitor_id)
    assert visitor.host_response_status == "accepted"
    assert visitor.host_response_note == "Be right down"
    assert visitor.host_response_time is not None

    arrival = db.query(Notification).filter(Notification.type == "visitor_arrival").one()
    assert arrival.title == "Visitor Accepted"
    assert arrival.meta["responseStatus"] == "accepted"

    front_desk = db.query(Notification).filter(Notification.type == "visitor_response").all()
    assert sorted(n.user_id for n in front_desk) == ["user_ada", "user_rita"]


def test_second_response_does_not_change_the_decision(rpc, db):
    _, host = setup_front_desk(db)
    visitor_id = rpc("visitor.create", CHECK_IN).json()["result"]["data"]["id"]

    accept = generate_action_token(visitor_id, host.id, "accept")
    decline = generate_action_token(visitor_id, host.id, "decline")
    rpc("employee.respondToVisitor", {"token": accept, "action": "accept"})
    response = rpc("employee.respondToVisitor", {"token": decline, "action": "decline"})

    result = response.json()["result"]["data"]
    assert result["alreadyResponded"] is True
    assert result["previousResponse"] == "accepted"
    assert result["message"] == "You already accepted this meeting."
    assert db.get(Visitor, visitor_id).host_response_status == "accepted"
    assert db.query(Notification).filter(Notification.type == "visitor_response").count() == 2


def test_token_for_other_action_is_rejected(rpc, db):
    _, host = setup_front_desk(db)
    visitor_id = rpc("visitor.create", CHECK_IN).json()["result"]["data"]["id"]
    token = generate_action_token(visitor_id, host.id, "accept")

    response = rpc("employee.respondToVisitor", {"token": token, "action": "decline"})
    assert response.status_code == 400
    assert response.json()["error"]["message"] == "Invalid or expired response link"
    assert db.get(Visitor, visitor_id).host_response_status == "pending"


def test_token_for_another_host_is_forbidden(rpc, db):
    org, _ = setup_front_desk(db)
    other = make_staff(db, org, "Olly Other", clerk_user_id="user_olly")
    visitor_id = rpc("visitor.create", CHECK_IN).json()["result"]["data"]["id"]
    token = generate_action_token(visitor_id, other.id, "accept")

    assert rpc("employee.respondToVisitor", {"token": token, "action": "accept"}).status_code == 403


def test_dashboard_response_and_pending_list(rpc, db, browser):
    setup_front_desk(db)
    visitor_id = rpc("visitor.create", CHECK_IN).json()["result"]["data"]["id"]

    browser.login("user_rita")
    denied = rpc("employee.respondFromDashboard", {"visitorId": visitor_id, "action": "decline"})
    assert denied.status_code == 403

    browser.login("user_hank")
    pending = rpc("employee.getPendingVisitors").json()["result"]["data"]
    assert [v["id"] for v in pending] == [visitor_id]

    response = rpc("employee.respondFromDashboard", {"visitorId": visitor_id, "action": "decline"})
    assert response.json()["result"]["data"]["status"] == "declined"
    assert rpc("employee.getPendingVisitors").json()["result"]["data"] == []
    assert len(rpc("employee.getAllVisitors").json()["result"]["data"]) == 1


def test_preferences_and_profile(rpc, db, browser):
    setup_front_desk(db)
    assert rpc("employee.getProfile").json()["result"]["data"] is None

    browser.login("user_hank")
    response = rpc("employee.updatePreferences", {"notifySMS": True, "notifyOnVisitorArrival": False})
    profile = response.json()["result"]["data"]
    assert profile["notifySMS"] is True
    assert profile["notifyOnVisitorArrival"] is False
    assert profile["notifyEmail"] is True
    assert rpc("employee.getProfile").json()["result"]["data"]["fullName"] == "Hank Host"


def test_response_racing_another_response_keeps_the_first(db):
    org, host = setup_front_desk(db)
    visitor = make_visitor(db, org, host, datetime(2026, 10, 19, 9, 0))
    assert visitor.host_response_status == "pending"

    # The other click lands after this session read the visitor as pending
    visitors = Visitor.__table__
    db.connection().execute(
        update(visitors).where(visitors.c.id == visitor.id).values(host_response_status="accepted")
    )

    result = EmployeeService(db).respond_from_dashboard("user_hank", visitor.id, "decline", "Busy")

    assert result.already_responded is True
    assert result.previous_response == "accepted"
    db.refresh(visitor)
    assert visitor.host_response_status == "accepted"
    assert visitor.host_response_note is None
    assert db.query(Notification).filter(Notification.type == "visitor_response").count() == 0
