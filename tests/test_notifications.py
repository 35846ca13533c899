from frontdesk.services.notification_service import create_notification, notify_staff_members

from .factories import make_org, make_staff


def seed(db, user_id="user_eve", org_id="org_1", count=3):
    return [
        create_notification(db, org_id, user_id, "ticket_created", title=f"Ticket {i}", message="New ticket")
        for i in range(count)
    ]


def test_inbox_lifecycle(rpc, db, browser):
    first, *_ = seed(db)
    seed(db, user_id="user_other", count=1)
    browser.login("user_eve")

    assert rpc("notification.getUnreadCount").json()["result"]["data"] == {"count": 3}

    read = rpc("notification.markAsRead", {"id": first.id}).json()["result"]["data"]
    assert read["isRead"] is True
    assert read["readAt"] is not None

    unread = rpc("notification.getAll", {"unreadOnly": True}).json()["result"]["data"]
    assert len(unread) == 2

    assert rpc("notification.deleteAllRead").json()["result"]["data"] == {"count": 1}
    assert rpc("notification.markAllAsRead").json()["result"]["data"] == {"count": 2}
    assert rpc("notification.getUnreadCount").json()["result"]["data"] == {"count": 0}


def test_cannot_touch_someone_elses_notification(rpc, db, browser):
    (theirs,) = seed(db, user_id="user_other", count=1)
    browser.login("user_eve")
    assert rpc("notification.markAsRead", {"id": theirs.id}).status_code == 404
    assert rpc("notification.delete", {"id": theirs.id}).status_code == 404


def test_no_organization_context_gives_empty_inbox(rpc, db, browser):
    seed(db)
    browser.login("user_eve", org_id=None)
    assert rpc("notification.getAll", {}).json()["result"]["data"] == []
    assert rpc("notification.getUnreadCount").json()["result"]["data"] == {"count": 0}
    assert rpc("notification.create", {"userId": "x", "type": "t", "title": "t", "message": "m"}).status_code == 400


def test_create_exposes_metadata(rpc, browser):
    browser.login("user_eve")
    created = rpc(
        "notification.create",
        {"userId": "user_eve", "type": "system", "title": "Hello", "message": "Hi", "metadata": {"k": "v"}},
    ).json()["result"]["data"]
    assert created["metadata"] == {"k": "v"}
    assert rpc("notification.getAll", {}).json()["result"]["data"][0]["metadata"] == {"k": "v"}


def test_fan_out_skips_actor_and_staff_without_login(db):
    org = make_org(db)
    staff = [
        make_staff(db, org, "Actor", clerk_user_id="user_actor"),
        make_staff(db, org, "Offline"),
        make_staff(db, org, "Reader", clerk_user_id="user_reader"),
    ]
    sent = notify_staff_members(
        db, staff + staff, "org_1", "ticket_created", exclude_user_id="user_actor", title="t", message="m"
    )
    assert sent == 1
