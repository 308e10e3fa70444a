from datetime import timedelta
from typing import Iterable, Optional

from sqlalchemy import delete
from sqlmodel import select

from auth.tokens import generate_token
from core.errors import RecordNotFoundError
from core.validator import Validator, byte_length, validate_email, validate_password_plaintext
from database.models import Permission, Token, TokenScope, User, UserPermission
from database.store import VersionedStore

SORT_COLUMNS = ("id", "name", "email", "created_at")


def normalize_email(email: str) -> str:
    return email.strip().lower()


class UserStore(VersionedStore[User]):
    model = User
    updatable_fields = ("name", "email", "password_hash", "activated")
    unique_messages = {"email": "a user with this email address already exists"}

    def register(
        self, user: User, permission_codes: Iterable[str], activation_ttl: timedelta
    ) -> tuple[User, str]:
        """
        Insert a new user together with its permissions and first activation token.

        All three writes commit together, so a failure leaves no half-registered
        account behind. Returns the stored user and the token plaintext.
        """
        user.id = None
        user.version = 1
        with self._errors():
            self.session.add(user)
            self.session.flush()

            permission_ids = self.session.exec(
                select(Permission.id).where(Permission.code.in_(list(permission_codes)))
            ).all()
            for permission_id in permission_ids:
                self.session.add(UserPermission(user_id=user.id, permission_id=permission_id))

            plaintext, token = generate_token(user.id, activation_ttl, TokenScope.ACTIVATION)
            self.session.add(token)

            self.session.commit()
            self.session.refresh(user)
            self.session.expunge(token)
        return self._detach(user), plaintext

    def get_by_email(self, email: str) -> User:
        with self._errors():
            user = self.session.exec(select(User).where(User.email == normalize_email(email))).first()
            if user is not None:
                self._detach(user)
            self._end_read()

        if user is None:
            raise RecordNotFoundError()
        return user

    def _delete_dependents(self, id: int) -> None:
        # Not every backend enforces ON DELETE CASCADE (SQLite needs a pragma)
        self.session.execute(
            delete(Token).where(Token.user_id == id).execution_options(synchronize_session=False)
        )
        self.session.execute(
            delete(UserPermission)
            .where(UserPermission.user_id == id)
            .execution_options(synchronize_session=False)
        )


def validate_user(v: Validator, user: User, password: Optional[str] = None) -> None:
    """
    Validate a user record.

    ``password`` is the plaintext when one was just supplied. It must be
    checked before hashing: bcrypt accepts at most 72 bytes.
    """
    v.check(user.name != "", "name", "must be provided")
    v.check(byte_length(user.name) <= 500, "name", "must not be more than 500 bytes long")

    validate_email(v, user.email)

    if password is not None:
        validate_password_plaintext(v, password)


def user_conditions(name: str = "", email: str = "") -> list:
    conditions = []
    if name:
        conditions.append(User.name.icontains(name, autoescape=True))
    if email:
        conditions.append(User.email.contains(normalize_email(email), autoescape=True))
    return conditions

