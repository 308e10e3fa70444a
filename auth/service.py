from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from core.errors import RecordNotFoundError
from database.models import Permission, User, UserPermission
from database.store import storage_errors


def get_all_permissions_for_user(session: Session, user_id: int) -> set[str]:
    """Get all permission codes granted to a user. Empty when nothing is granted."""
    with storage_errors(session):
        results = session.exec(
            select(Permission.code)
            .join(UserPermission, UserPermission.permission_id == Permission.id)
            .where(UserPermission.user_id == user_id)
        ).all()
        session.rollback()
    return set(results)


def add_permission_for_user(session: Session, user_id: int, *codes: str) -> None:
    """Grant permission codes to a user. Codes the user already holds are skipped."""
    if not codes:
        return

    # A concurrent grant of the same code can win the insert race; recompute once
    for attempt in range(2):
        with storage_errors(session):
            wanted = session.exec(
                select(Permission.id).where(Permission.code.in_(codes))
            ).all()
            held = session.exec(
                select(UserPermission.permission_id).where(UserPermission.user_id == user_id)
            ).all()

            missing = set(wanted) - set(held)
            if not missing:
                session.rollback()
                return

            for permission_id in missing:
                session.add(UserPermission(user_id=user_id, permission_id=permission_id))
            try:
                session.commit()
                return
            except IntegrityError:
                session.rollback()
                if attempt:
                    raise


def change_role_for_user(session: Session, user_id: int, role: str) -> None:
    """Set a user's role label. Setting the role a user already has changes nothing."""
    with storage_errors(session):
        result = session.execute(
            update(User)
            .where(User.id == user_id, User.role != role)
            .values(role=role, version=User.version + 1)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount:
            session.commit()
            return

        exists = session.exec(select(User.id).where(User.id == user_id)).first()
        session.rollback()

    if exists is None:
        raise RecordNotFoundError()
