import json

from fastapi import HTTPException

from frontdesk.domain.ticket.service import TicketService
from frontdesk.models import Organization

from .factories import make_org, make_staff


def test_unknown_procedure(rpc):
    response = rpc("visitor.teleport", method="GET")
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "NOT_FOUND"
    assert response.json()["error"]["path"] == "visitor.teleport"


def test_mutation_over_get_is_rejected(rpc):
    response = rpc("visitor.create", {"fullName": "x"}, method="GET")
    assert response.status_code == 405
    assert response.json()["error"]["code"] == "METHOD_NOT_SUPPORTED"


def test_private_procedure_requires_session(rpc):
    response = rpc("ticket.getMyTickets")
    assert response.status_code == 401
    error = response.json()["error"]
    assert error["code"] == "UNAUTHORIZED"
    assert error["httpStatus"] == 401


def test_public_procedure_works_without_session(rpc, db):
    org = make_org(db)
    make_staff(db, org, "Zed Zulu")
    make_staff(db, org, "Amy Alpha")

    response = rpc("staff.getActiveStaff")
    assert response.status_code == 200
    assert response.json() == {"result": {"data": ["Amy Alpha", "Zed Zulu"]}}


def test_invalid_input_is_bad_request(rpc, db, browser):
    org = make_org(db)
    make_staff(db, org, "Eve Employee", clerk_user_id="user_eve")
    browser.login("user_eve")

    response = rpc("ticket.create", {"title": "Printer", "description": "short"})
    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "BAD_REQUEST"
    assert "description" in error["message"]


def test_malformed_json_is_bad_request(client):
    response = client.get("/api/trpc/staff.getActiveStaff", params={"input": "{not json"})
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "BAD_REQUEST"


def test_transformer_wrapped_input_is_unwrapped(client, db):
    org = make_org(db)
    make_staff(db, org, "Amy Alpha")
    make_org(db, clerk_org_id="org_2", name="Other Org")

    response = client.get(
        "/api/trpc/staff.getActiveStaff", params={"input": json.dumps({"json": {"organizationId": "org_2"}})}
    )
    assert response.status_code == 200
    assert response.json()["result"]["data"] == []


def test_service_errors_keep_their_status(rpc, db, browser):
    org = make_org(db)
    make_staff(db, org, "Eve Employee", clerk_user_id="user_eve")
    browser.login("user_eve")

    response = rpc("ticket.getMetrics")
    assert response.status_code == 403
    assert response.json()["error"] == {
        "message": "You do not have permission to view ticket metrics.",
        "code": "FORBIDDEN",
        "httpStatus": 403,
        "path": "ticket.getMetrics",
    }


def test_unexpected_errors_become_internal_server_error(rpc, db, browser, monkeypatch):
    org = make_org(db)
    make_staff(db, org, "Eve Employee", clerk_user_id="user_eve")
    browser.login("user_eve")

    def boom(self, user_id, clerk_org_id):
        raise RuntimeError("connection reset")

    monkeypatch.setattr(TicketService, "get_my_tickets", boom)
    response = rpc("ticket.getMyTickets")
    assert response.status_code == 500
    assert response.json()["error"]["code"] == "INTERNAL_SERVER_ERROR"
    assert "connection reset" not in response.json()["error"]["message"]


def test_refused_procedure_discards_its_pending_writes(rpc, db, browser, monkeypatch):
    org = make_org(db)
    make_staff(db, org, "Eve Employee", clerk_user_id="user_eve")
    browser.login("user_eve")

    def half_done(self, user_id, clerk_org_id):
        self.db.add(Organization(clerk_org_id="org_half", name="Half", slug="half"))
        self.db.flush()
        raise HTTPException(status_code=409, detail="Ticket changed meanwhile")

    monkeypatch.setattr(TicketService, "get_my_tickets", half_done)
    response = rpc("ticket.getMyTickets")

    assert response.status_code == 409
    assert response.json()["error"]["code"] == "CONFLICT"
    assert db.query(Organization).filter(Organization.clerk_org_id == "org_half").count() == 0
    assert db.query(Organization).count() == 1
