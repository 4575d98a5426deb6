"""Tests for the scheduled reminder trigger and the unsubscribe link."""

import asyncio
from unittest.mock import MagicMock

import pytest

from src.api.dependencies import get_reminder_service
from src.config import get_settings
from src.main import app
from src.models.user import User
from src.services.auth import create_access_token, create_unsubscribe_token
from src.services.reminder_service import ReminderRunResult, ReminderService


@pytest.fixture
def reminder_service():
    service = MagicMock(spec=ReminderService)
    service.run.return_value = ReminderRunResult(users_checked=3, emails_sent=2)
    app.dependency_overrides[get_reminder_service] = lambda: service
    yield service
    app.dependency_overrides.pop(get_reminder_service, None)


def _cron_headers(secret: str | None = None) -> dict:
    return {"Authorization": f"Bearer {secret or get_settings().cron_secret}"}


class TestCronTrigger:
    """Tests for GET /api/v1/cron/reminders."""

    def test_runs_batch_with_valid_secret(self, client, reminder_service):
        response = client.get("/api/v1/cron/reminders", headers=_cron_headers())

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "emails_sent": 2,
            "message": "Sent 2 reminder emails",
        }
        reminder_service.run.assert_called_once()

    def test_batch_runs_off_the_event_loop(self, client, reminder_service):
        loops = []

        def run():
            try:
                loops.append(asyncio.get_running_loop())
            except RuntimeError:
                loops.append(None)
            return ReminderRunResult()

        reminder_service.run.side_effect = run

        response = client.get("/api/v1/cron/reminders", headers=_cron_headers())

        assert response.status_code == 200
        assert loops == [None]

    @pytest.mark.parametrize(
        "headers",
        [
            {},
            {"Authorization": "Bearer wrong-secret"},
            {"Authorization": get_settings().cron_secret},
            {"Authorization": f"bearer {get_settings().cron_secret}"},
        ],
    )
    def test_rejects_bad_secret_without_running(self, client, reminder_service, headers):
        response = client.get("/api/v1/cron/reminders", headers=headers)

        assert response.status_code == 401
        reminder_service.run.assert_not_called()

    def test_batch_crash_is_500(self, client, reminder_service):
        reminder_service.run.side_effect = RuntimeError("database down")

        response = client.get("/api/v1/cron/reminders", headers=_cron_headers())

        assert response.status_code == 500
        assert response.json() == {"detail": "Internal server error"}

    def test_real_run_with_no_users_sends_nothing(self, client):
        response = client.get("/api/v1/cron/reminders", headers=_cron_headers())

        assert response.status_code == 200
        assert response.json()["emails_sent"] == 0


class TestUnsubscribeLink:
    """Tests for the capability URL in reminder emails."""

    def test_disables_reminders_without_login(self, client, make_user, db):
        user = make_user()
        token = create_unsubscribe_token(user.id)

        response = client.get(f"/api/v1/unsubscribe?token={token}")

        assert response.status_code == 200
        db.refresh(user)
        assert user.email_reminders_enabled is False

    def test_second_click_is_harmless(self, client, make_user, db):
        user = make_user()
        token = create_unsubscribe_token(user.id)

        first = client.get(f"/api/v1/unsubscribe?token={token}")
        second = client.get(f"/api/v1/unsubscribe?token={token}")

        assert first.status_code == second.status_code == 200
        db.refresh(user)
        assert user.email_reminders_enabled is False

    def test_garbage_token_rejected(self, client, make_user, db):
        user = make_user()

        response = client.get("/api/v1/unsubscribe?token=garbage")

        assert response.status_code == 404
        db.refresh(user)
        assert user.email_reminders_enabled is True

    def test_access_token_is_not_an_unsubscribe_token(self, client, make_user, db):
        user = make_user()
        token = create_access_token(user.email)

        response = client.get(f"/api/v1/unsubscribe?token={token}")

        assert response.status_code == 404
        assert db.query(User).filter(User.id == user.id).one().email_reminders_enabled is True

    def test_token_for_deleted_user_rejected(self, client):
        token = create_unsubscribe_token(424242)
        assert client.get(f"/api/v1/unsubscribe?token={token}").status_code == 404
