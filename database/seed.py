"""
Database seeding for the permission catalogue and an optional bootstrap admin.
Run after the tables exist (see main.lifespan).
"""
from sqlalchemy.engine import Engine
from sqlmodel import Session, select

from auth.passwords import PasswordHash
from auth.service import add_permission_for_user
from config.settings import Settings
from core.permissions import PERMISSION_DEFINITIONS, Permissions, Roles
from core.validator import Validator, validate_email, validate_password_plaintext
from database.models import Permission, User
from utils.logger import get_logger

logger = get_logger(__name__)


def seed_permissions(session: Session) -> None:
    """Insert every known permission code that is not in the table yet."""
    existing = set(session.exec(select(Permission.code)).all())

    added = 0
    for perm_data in PERMISSION_DEFINITIONS:
        if perm_data["code"] not in existing:
            session.add(Permission(**perm_data))
            added += 1

    session.commit()
    if added:
        logger.info(f"[Seed] Added {added} permission(s)")


def seed_admin(session: Session, settings: Settings) -> None:
    """Create an activated admin holding every permission, when ADMIN_EMAIL/ADMIN_PASSWORD are set."""
    if not settings.admin_email or not settings.admin_password:
        return

    email = settings.admin_email.strip().lower()

    v = Validator()
    validate_email(v, email)
    validate_password_plaintext(v, settings.admin_password)
    if not v.valid():
        problems = ", ".join(f"{key} {message}" for key, message in v.errors.items())
        logger.error(f"[Seed] Admin user not created, ADMIN_EMAIL/ADMIN_PASSWORD rejected: {problems}")
        return

    admin = session.exec(select(User).where(User.email == email)).first()
    if admin is None:
        admin = User(
            name="Administrator",
            email=email,
            password_hash=PasswordHash(cost=settings.bcrypt_cost).set(settings.admin_password),
            activated=True,
            role=Roles.ADMIN.value,
        )
        session.add(admin)
        session.commit()
        session.refresh(admin)
        logger.info(f"[Seed] Created admin user {admin.id}")

    add_permission_for_user(session, admin.id, *[p.value for p in Permissions])


def seed_database(engine: Engine, settings: Settings) -> None:
    with Session(engine) as session:
        seed_permissions(session)
        seed_admin(session, settings)
