"""
User lookup, registration, login and profile editing.
"""
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core import config
from app.core.errors import AuthenticationError, ConflictError, NotFoundError
from app.features.permissions.models import Role
from app.features.users.auth import hash_password, verify_password
from app.features.users.models import User, Person
from app.features.users.schemas import ProfileUpdate, RegisterRequest

_PERSON_FIELDS = ("first_name", "last_name", "birth_date", "telephone", "biography")


def _with_profile(stmt):
    return stmt.options(
        selectinload(User.role).selectinload(Role.permissions),
        selectinload(User.person),
    ).execution_options(populate_existing=True)


async def find(db: AsyncSession, user_id: int) -> User | None:
    """Load a user with role, permissions and person, or None."""
    result = await db.execute(_with_profile(select(User).where(User.id == user_id)))
    return result.scalar_one_or_none()


async def find_by_email(db: AsyncSession, email: str) -> User | None:
    result = await db.execute(_with_profile(select(User).where(User.email == email)))
    return result.scalar_one_or_none()


async def authenticate(db: AsyncSession, email: str, password: str) -> User:
    """Return the active user matching the credentials, or raise AuthenticationError."""
    user = await find_by_email(db, email)
    if user is None or not verify_password(password, user.password_hash):
        raise AuthenticationError("Invalid email or password")
    if not user.is_active:
        raise AuthenticationError("User account is deactivated")
    return user


async def register(db: AsyncSession, data: RegisterRequest) -> User:
    """
    Create a user with the default role (if that role exists) and an empty person record.
    """
    if await find_by_email(db, data.email) is not None:
        raise ConflictError(f"User with email [{data.email}] already exists.")

    default_role_id = await db.scalar(
        select(Role.id).where(Role.name == config.DEFAULT_ROLE_NAME, Role.not_deleted())
    )
    user = User(
        email=data.email,
        name=data.name,
        password_hash=hash_password(data.password),
        role_id=default_role_id,
        person=Person(),
    )
    db.add(user)
    await db.commit()
    return await find(db, user.id)


async def edit_profile(db: AsyncSession, user_id: int, data: ProfileUpdate) -> User:
    """
    Update a user and its person record in one commit.

    Raises:
        NotFoundError: if the user does not exist
        ConflictError: if the new email belongs to another user
    """
    user = await find(db, user_id)
    if user is None:
        raise NotFoundError("User", user_id)

    update_data = data.model_dump(exclude_unset=True)
    if "email" in update_data and update_data["email"] != user.email:
        if await find_by_email(db, update_data["email"]) is not None:
            raise ConflictError(f"User with email [{update_data['email']}] already exists.")

    for key in ("name", "email"):
        if update_data.get(key) is not None:
            setattr(user, key, update_data[key])

    person = user.person
    if person is None:
        person = Person()
        user.person = person
    for key in _PERSON_FIELDS:
        if key in update_data:
            setattr(person, key, update_data[key])

    await db.commit()
    return await find(db, user_id)
