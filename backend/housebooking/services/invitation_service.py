"""
Invitation codes and invitation-gated registration.

A code is valid while it is unused and its expiry lies strictly in the
future. Registration creates the user and consumes the code in the same
transaction: the code row is locked, and consumption is a conditional
UPDATE ... WHERE is_used = false, so a code can be consumed at most once
and is never left unconsumed behind a created account.
"""

import uuid
from datetime import timedelta
from typing import Optional

from sqlalchemy import or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from housebooking.core.config import get_settings
from housebooking.core.exceptions import InvalidInvitationCode, RegistrationFailed
from housebooking.core.logging import get_logger
from housebooking.core.metrics import invitation_codes_issued, record_registration
from housebooking.core.security import hash_password
from housebooking.models.invitation_code import InvitationCode
from housebooking.models.user import User
from housebooking.schemas.common import utc_now
from housebooking.schemas.user import UserRegister

logger = get_logger(__name__)
settings = get_settings()

CODE_LENGTH = 8


def generate_invitation_code() -> str:
    """8 uppercase hex characters from a fresh UUID4; collisions are left to the unique index."""
    return uuid.uuid4().hex[:CODE_LENGTH].upper()


async def issue_invitation_code(db: AsyncSession, actor: Optional[User]) -> InvitationCode:
    now = utc_now()
    invitation = InvitationCode(
        code=generate_invitation_code(),
        created_date=now,
        expiry_date=now + timedelta(days=settings.INVITATION_CODE_TTL_DAYS),
        is_used=False,
        created_by_user_id=actor.id if actor else None,
    )
    db.add(invitation)
    await db.flush()
    await db.refresh(invitation)

    invitation_codes_issued.inc()
    logger.info(
        "invitation_code_issued",
        invitation_id=invitation.id,
        created_by=invitation.created_by_user_id,
    )
    return invitation


async def list_invitation_codes(db: AsyncSession, actor: User) -> list[InvitationCode]:
    result = await db.execute(
        select(InvitationCode)
        .where(InvitationCode.created_by_user_id == actor.id)
        .order_by(InvitationCode.created_date.desc(), InvitationCode.id.desc())
    )
    return list(result.scalars().all())


async def find_valid_code(db: AsyncSession, code: str) -> Optional[InvitationCode]:
    """Unused, unexpired code matching `code`, locked for the rest of the transaction."""
    result = await db.execute(
        select(InvitationCode)
        .where(
            InvitationCode.code == code,
            InvitationCode.is_used.is_(False),
            InvitationCode.expiry_date > utc_now(),
        )
        .with_for_update()
    )
    return result.scalar_one_or_none()


async def _validate_new_user(db: AsyncSession, username: str, data: UserRegister) -> None:
    errors: list[dict[str, str]] = []

    if not username.strip():
        errors.append({"code": "InvalidUserName", "description": "Username is required."})

    if len(data.password) < settings.PASSWORD_MIN_LENGTH:
        errors.append({
            "code": "PasswordTooShort",
            "description": f"Passwords must be at least {settings.PASSWORD_MIN_LENGTH} characters.",
        })

    result = await db.execute(
        select(User).where(or_(User.username == username, User.email == data.email))
    )
    for existing in result.scalars().all():
        if existing.username == username:
            errors.append({
                "code": "DuplicateUserName",
                "description": f"Username '{username}' is already taken.",
            })
        if existing.email == data.email:
            errors.append({
                "code": "DuplicateEmail",
                "description": f"Email '{data.email}' is already taken.",
            })

    if errors:
        raise RegistrationFailed(errors)


async def _consume_code(db: AsyncSession, invitation_id: int, user_id: str) -> bool:
    result = await db.execute(
        update(InvitationCode)
        .where(InvitationCode.id == invitation_id, InvitationCode.is_used.is_(False))
        .values(is_used=True, used_date=utc_now(), used_by_user_id=user_id)
    )
    return result.rowcount == 1


async def register_user(db: AsyncSession, data: UserRegister) -> User:
    """
    Create an account if `data.invitation_code` is valid.
    Raises InvalidInvitationCode or RegistrationFailed.
    """
    invitation = await find_valid_code(db, data.invitation_code.strip().upper())
    if invitation is None:
        record_registration("invalid_code")
        logger.warning("registration_failed", reason="invalid_invitation_code")
        raise InvalidInvitationCode()

    username = data.username if data.username is not None else str(data.email)
    try:
        await _validate_new_user(db, username, data)
    except RegistrationFailed as exc:
        record_registration("rejected")
        logger.warning(
            "registration_failed",
            reason="identity_validation",
            codes=[e["code"] for e in exc.errors],
        )
        raise

    user = User(
        username=username,
        email=str(data.email),
        first_name=data.first_name,
        last_name=data.last_name,
        phone_number=data.phone_number,
        hashed_password=hash_password(data.password),
    )
    db.add(user)
    await db.flush()

    if not await _consume_code(db, invitation.id, user.id):
        # Lost a race for the same code; the request rollback drops the user row
        record_registration("invalid_code")
        logger.warning("registration_failed", reason="invitation_code_consumed_concurrently")
        raise InvalidInvitationCode()

    await db.refresh(user)
    record_registration("success")
    logger.info("user_registered", user_id=user.id, username=user.username, invitation_id=invitation.id)
    return user
