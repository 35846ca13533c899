import pytest

from frontdesk.models import Notification, Ticket

from .factories import make_org, make_staff

PROJECT = {"title": "Office network refresh", "description": "Replace the switches on floors two and three"}


@pytest.fixture
def it_team(db, browser):
    org = make_org(db)
    team = {
        "org": org,
        "lead": make_staff(db, org, "Ivan It", role="IT Staff", clerk_user_id="user_ivan"),
        "tech": make_staff(db, org, "Tina Tech", role="IT Staff", clerk_user_id="user_tina"),
        "employee": make_staff(db, org, "Eve Employee", clerk_user_id="user_eve"),
    }
    browser.login("user_ivan")
    return team


def board(rpc, project_id):
    return rpc("project.getProjectBoard", {"projectId": project_id}).json()["result"]["data"]


def test_new_project_gets_default_columns(rpc, db, it_team):
    response = rpc("project.create", {**PROJECT, "assignedToId": it_team["tech"].id})
    assert response.status_code == 200
    project = response.json()["result"]["data"]
    assert project["status"] == "To Do"
    assert project["assignedTo"]["fullName"] == "Tina Tech"

    columns = board(rpc, project["id"])["columns"]
    assert [c["name"] for c in columns] == ["To Do", "In Progress", "Done"]

    notification = db.query(Notification).one()
    assert notification.user_id == "user_tina"
    assert notification.type == "project_assigned"


def test_projects_are_for_it_and_admin(rpc, browser, it_team):
    browser.login("user_eve")
    assert rpc("project.create", PROJECT).status_code == 403
    assert rpc("project.getAll", {}).status_code == 403


def test_ticket_converts_once_and_is_released_on_delete(rpc, db, browser, it_team):
    browser.login("user_eve")
    ticket_id = rpc(
        "ticket.create", {"title": "Wifi drops", "description": "Wifi drops every afternoon on floor two"}
    ).json()["result"]["data"]["id"]

    browser.login("user_ivan")
    project = rpc("project.convertTicketToProject", {"ticketId": ticket_id}).json()["result"]["data"]
    assert project["title"] == "Wifi drops"
    assert project["ticketId"] == ticket_id
    assert db.get(Ticket, ticket_id).converted_to_project is True

    again = rpc("project.convertTicketToProject", {"ticketId": ticket_id})
    assert again.status_code == 400

    assert rpc("project.delete", {"id": project["id"]}).status_code == 200
    db.expire_all()
    assert db.get(Ticket, ticket_id).converted_to_project is False


def test_status_done_sets_completion(rpc, it_team):
    project_id = rpc("project.create", PROJECT).json()["result"]["data"]["id"]
    done = rpc("project.updateStatus", {"id": project_id, "status": "Done"}).json()["result"]["data"]
    assert done["completedAt"] is not None
    reopened = rpc("project.updateStatus", {"id": project_id, "status": "In Progress"}).json()["result"]["data"]
    assert reopened["completedAt"] is None


def test_assignee_may_edit_but_not_manage(rpc, db, browser, it_team):
    project_id = rpc("project.create", {**PROJECT, "assignedToId": it_team["employee"].id}).json()["result"]["data"][
        "id"
    ]
    browser.login("user_eve")
    edited = rpc("project.update", {"id": project_id, "title": "Network refresh phase 1"})
    assert edited.json()["result"]["data"]["title"] == "Network refresh phase 1"
    assert rpc("project.updateStatus", {"id": project_id, "status": "Done"}).status_code == 403


def test_board_tasks_and_columns(rpc, it_team):
    project_id = rpc("project.create", PROJECT).json()["result"]["data"]["id"]
    todo, doing, done = board(rpc, project_id)["columns"]

    first = rpc("project.createTask", {"projectId": project_id, "columnId": todo["id"], "title": "Order switches"})
    second = rpc("project.createTask", {"projectId": project_id, "columnId": todo["id"], "title": "Book downtime"})
    assert first.json()["result"]["data"]["order"] == 0
    assert second.json()["result"]["data"]["order"] == 1

    task_id = first.json()["result"]["data"]["id"]
    moved = rpc("project.moveTask", {"taskId": task_id, "columnId": done["id"]}).json()["result"]["data"]
    assert moved["columnId"] == done["id"]
    assert moved["order"] == 0

    assert rpc("project.deleteColumn", {"id": todo["id"]}).status_code == 400
    assert rpc("project.deleteColumn", {"id": doing["id"]}).status_code == 200

    extra = rpc("project.createColumn", {"projectId": project_id, "name": "Blocked"}).json()["result"]["data"]
    assert extra["color"] == "#3b82f6"
    assert [c["name"] for c in board(rpc, project_id)["columns"]] == ["To Do", "Done", "Blocked"]


def test_task_column_must_belong_to_project(rpc, it_team):
    first = rpc("project.create", PROJECT).json()["result"]["data"]["id"]
    second = rpc("project.create", PROJECT).json()["result"]["data"]["id"]
    foreign_column = board(rpc, second)["columns"][0]["id"]

    response = rpc("project.createTask", {"projectId": first, "columnId": foreign_column, "title": "Misfiled"})
    assert response.status_code == 400
