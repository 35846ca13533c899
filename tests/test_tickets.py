import re

import pytest

from frontdesk.models import Notification, Ticket

from .factories import make_org, make_staff

NEW_TICKET = {
    "title": "Laptop will not boot",
    "description": "Black screen after the latest update",
    "priority": "High",
    "category": "Hardware",
}


@pytest.fixture
def helpdesk(db):
    org = make_org(db)
    return {
        "org": org,
        "employee": make_staff(db, org, "Eve Employee", clerk_user_id="user_eve", department="Sales"),
        "it": make_staff(db, org, "Ivan It", role="IT Staff", clerk_user_id="user_ivan", email="ivan@acme.test"),
    }


def test_employee_files_ticket_and_it_is_notified(rpc, db, browser, helpdesk):
    browser.login("user_eve")
    response = rpc("ticket.create", NEW_TICKET)
    assert response.status_code == 200
    ticket = response.json()["result"]["data"]
    assert re.fullmatch(r"TKT-\d{8}-001", ticket["ticketNumber"])
    assert ticket["status"] == "Open"
    assert ticket["createdBy"]["fullName"] == "Eve Employee"

    notification = db.query(Notification).one()
    assert notification.user_id == "user_ivan"
    assert notification.type == "ticket_created"

    second = rpc("ticket.create", NEW_TICKET).json()["result"]["data"]
    assert second["ticketNumber"].endswith("-002")
    assert len(rpc("ticket.getMyTickets").json()["result"]["data"]) == 2


def test_ticket_queue_is_for_it_only(rpc, browser, helpdesk):
    browser.login("user_eve")
    rpc("ticket.create", NEW_TICKET)
    assert rpc("ticket.getAll", {}).status_code == 403

    browser.login("user_ivan")
    tickets = rpc("ticket.getAll", {"priority": "High"}).json()["result"]["data"]
    assert len(tickets) == 1
    assert rpc("ticket.getAll", {"assignedToMe": True}).json()["result"]["data"] == []


def test_status_change_stamps_and_notifies_creator(rpc, db, browser, helpdesk):
    browser.login("user_eve")
    ticket_id = rpc("ticket.create", NEW_TICKET).json()["result"]["data"]["id"]

    browser.login("user_ivan")
    updated = rpc(
        "ticket.update", {"id": ticket_id, "status": "Resolved", "assignedToId": helpdesk["it"].id}
    ).json()["result"]["data"]
    assert updated["status"] == "Resolved"
    assert updated["resolvedAt"] is not None
    assert updated["assignedTo"]["fullName"] == "Ivan It"

    types = {n.type for n in db.query(Notification).filter(Notification.user_id == "user_eve")}
    assert types == {"ticket_status_changed"}


def test_employee_cannot_update_ticket(rpc, browser, helpdesk):
    browser.login("user_eve")
    ticket_id = rpc("ticket.create", NEW_TICKET).json()["result"]["data"]["id"]
    assert rpc("ticket.update", {"id": ticket_id, "status": "Closed"}).status_code == 403


def test_internal_notes_are_hidden_from_requester(rpc, db, browser, helpdesk):
    browser.login("user_eve")
    ticket_id = rpc("ticket.create", NEW_TICKET).json()["result"]["data"]["id"]
    assert rpc("ticket.addMessage", {"ticketId": ticket_id, "message": "hi", "isInternal": True}).status_code == 403

    browser.login("user_ivan")
    rpc("ticket.addMessage", {"ticketId": ticket_id, "message": "Reimaging tonight", "isInternal": True})
    rpc("ticket.addMessage", {"ticketId": ticket_id, "message": "Can you bring it by?"})

    assert len(rpc("ticket.getById", {"id": ticket_id}).json()["result"]["data"]["messages"]) == 2

    browser.login("user_eve")
    messages = rpc("ticket.getById", {"id": ticket_id}).json()["result"]["data"]["messages"]
    assert [m["message"] for m in messages] == ["Can you bring it by?"]
    assert messages[0]["sender"]["fullName"] == "Ivan It"

    message_notes = db.query(Notification).filter(Notification.type == "ticket_message").all()
    assert [n.user_id for n in message_notes] == ["user_eve"]


def test_other_employees_cannot_see_the_ticket(rpc, db, browser, helpdesk):
    make_staff(db, helpdesk["org"], "Nosy Neighbor", clerk_user_id="user_nosy")
    browser.login("user_eve")
    ticket_id = rpc("ticket.create", NEW_TICKET).json()["result"]["data"]["id"]

    browser.login("user_nosy")
    assert rpc("ticket.getById", {"id": ticket_id}).status_code == 403


def test_metrics(rpc, db, browser, helpdesk):
    browser.login("user_eve")
    first = rpc("ticket.create", NEW_TICKET).json()["result"]["data"]["id"]
    rpc("ticket.create", {**NEW_TICKET, "priority": "Critical"})

    browser.login("user_ivan")
    rpc("ticket.update", {"id": first, "status": "In Progress"})
    metrics = rpc("ticket.getMetrics").json()["result"]["data"]

    assert metrics["totalOpen"] == 1
    assert metrics["totalInProgress"] == 1
    assert metrics["criticalOpen"] == 1
    assert metrics["highOpen"] == 0
    assert metrics["ticketsByDepartment"] == {"Sales": 2}
    assert db.query(Ticket).count() == 2
