"""Tests for the notification inbox and the deferred notification jobs."""

from unittest.mock import patch

from taskboard.models.notification import Notification
from taskboard.models.user import User
from taskboard.notification import notification_service
from taskboard.notification.notification_service import (
    run_job,
    send_comment_notification,
    send_task_assigned_notification,
)


def seed(db, user_id, count, **fields):
    rows = []
    for i in range(count):
        n = Notification(
            user_id=user_id,
            type=fields.get("type", "task_updated"),
            title=f"Note {i}",
            message=f"message {i}",
            is_read=fields.get("is_read", False),
        )
        db.add(n)
        rows.append(n)
    db.commit()
    return rows


class TestInbox:

    def test_list_is_newest_first_and_capped(self, client, make_user, db):
        alice, bob = make_user("Alice"), make_user("Bob")
        seed(db, alice.id, 55)
        seed(db, bob.id, 2)

        response = client.get("/notifications/", headers=alice.headers)
        assert response.status_code == 200
        notes = response.json()
        assert len(notes) == 50
        assert notes[0]["title"] == "Note 54"
        assert all(n["user_id"] == alice.id for n in notes)

    def test_mark_as_read_only_by_recipient(self, client, make_user, db):
        alice, bob = make_user("Alice"), make_user("Bob")
        note = seed(db, alice.id, 1)[0]
        note_id = note.id

        response = client.post(f"/notifications/{note_id}/read", headers=bob.headers)
        assert response.status_code == 403

        response = client.post(f"/notifications/{note_id}/read", headers=alice.headers)
        assert response.status_code == 200
        assert response.json()["is_read"] is True

        assert client.post("/notifications/999/read", headers=alice.headers).status_code == 404

    def test_mark_all_and_unread_count(self, client, make_user, db):
        alice, bob = make_user("Alice"), make_user("Bob")
        seed(db, alice.id, 3)
        seed(db, bob.id, 2)

        assert client.get("/notifications/unread_count", headers=alice.headers).json() == {"unread": 3}

        response = client.post("/notifications/read_all", headers=alice.headers)
        assert response.status_code == 200
        assert response.json()["updated"] == 3

        assert client.get("/notifications/unread_count", headers=alice.headers).json() == {"unread": 0}
        assert client.get("/notifications/unread_count", headers=bob.headers).json() == {"unread": 2}

    def test_no_public_create(self, client, make_user):
        alice = make_user("Alice")
        response = client.post(
            "/notifications/",
            json={"user_id": alice.id, "type": "task_assigned", "title": "x", "message": "y"},
            headers=alice.headers,
        )
        assert response.status_code == 405


class TestJobs:

    def test_missing_task_inserts_nothing(self, make_user, db):
        alice, bob = make_user("Alice"), make_user("Bob")

        assert send_task_assigned_notification(db, user_id=bob.id, task_id=404, assigned_by=alice.id) is None
        db.commit()
        assert db.query(Notification).count() == 0

    def test_missing_actor_inserts_nothing(self, make_user, make_project, make_task, db):
        alice, bob = make_user("Alice"), make_user("Bob")
        task = make_task(alice, make_project(alice)["id"])

        assert send_comment_notification(db, user_id=bob.id, task_id=task["id"], comment_author=404) is None
        db.commit()
        assert db.query(Notification).count() == 0

    def test_actor_without_name_falls_back_to_email(self, make_user, make_project, make_task, db):
        alice, bob = make_user("Alice"), make_user("Bob")
        task = make_task(alice, make_project(alice)["id"], title="Plan")

        db.get(User, alice.id).name = None
        db.commit()

        note = send_task_assigned_notification(db, user_id=bob.id, task_id=task["id"], assigned_by=alice.id)
        assert note.message == 'alice@example.com assigned you to "Plan"'

    def test_run_job_absorbs_failures(self, make_user, db):
        def broken_job(session, **payload):
            session.add(Notification(user_id=1, type="task_updated", title="half", message="written"))
            session.flush()
            raise RuntimeError("boom")

        run_job(broken_job, {"user_id": 1})

        assert db.query(Notification).count() == 0

    def test_failing_job_does_not_fail_the_request(
        self, client, make_user, make_project, make_task, notifications_for
    ):
        alice, bob = make_user("Alice"), make_user("Bob")
        project = make_project(alice, members=[bob])

        with patch.object(notification_service, "create_notification", side_effect=RuntimeError("down")):
            task = make_task(alice, project["id"], assignee_id=bob.id)

        assert task["assignee_id"] == bob.id
        assert notifications_for(bob) == []

    def test_duplicate_delivery_is_possible(self, make_user, make_project, make_task, notifications_for):
        alice, bob = make_user("Alice"), make_user("Bob")
        task = make_task(alice, make_project(alice, members=[bob])["id"])
        payload = {"user_id": bob.id, "task_id": task["id"], "assigned_by": alice.id}

        run_job(send_task_assigned_notification, payload)
        run_job(send_task_assigned_notification, payload)

        assert len(notifications_for(bob)) == 2
