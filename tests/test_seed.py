import logging
from dataclasses import replace

import pytest

from api.user.crud import UserStore
from auth.passwords import verify_password
from auth.service import get_all_permissions_for_user
from core.errors import RecordNotFoundError
from core.pagination import Filters
from core.permissions import Permissions
from database import seed


def test_admin_is_seeded_with_every_permission(session, settings):
    admin = UserStore(session).get_by_email(settings.admin_email)

    assert admin.activated is True
    assert admin.role == "admin"
    assert verify_password(settings.admin_password, admin.password_hash)
    assert get_all_permissions_for_user(session, admin.id) == {p.value for p in Permissions}


def test_seeding_twice_changes_nothing(session, settings):
    seed.seed_permissions(session)
    seed.seed_admin(session, settings)

    _, metadata = UserStore(session).get_all(Filters())
    assert metadata.total_records == 1


def test_unusable_admin_password_is_logged_not_hashed(session, settings, caplog, monkeypatch):
    monkeypatch.setattr(seed.logger, "propagate", True)
    caplog.set_level(logging.ERROR, logger=seed.logger.name)
    bad = replace(settings, admin_email="root@example.com", admin_password="x" * 80)

    seed.seed_admin(session, bad)

    with pytest.raises(RecordNotFoundError):
        UserStore(session).get_by_email("root@example.com")
    assert "Admin user not created" in caplog.text
    assert "password must not be more than 72 bytes long" in caplog.text
