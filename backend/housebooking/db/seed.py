"""
Startup seeding: the admin account and the two houses.
Both steps are idempotent.
"""

from sqlalchemy import func, select, text
from sqlalchemy.ext.asyncio import AsyncSession

from housebooking.core.config import get_settings
from housebooking.core.logging import get_logger
from housebooking.core.security import hash_password
from housebooking.models.property import Property
from housebooking.models.user import User

logger = get_logger(__name__)

DEFAULT_PROPERTIES = [
    (1, "Røde Hus"),
    (2, "Søhuset"),
]


async def seed_admin_user(db: AsyncSession) -> User:
    settings = get_settings()
    result = await db.execute(select(User).where(User.username == settings.ADMIN_EMAIL))
    existing = result.scalar_one_or_none()
    if existing:
        logger.info("seed_admin_skipped", reason="already_exists")
        return existing

    # The admin logs in with the email as username
    admin = User(
        username=settings.ADMIN_EMAIL,
        email=settings.ADMIN_EMAIL,
        first_name="Administrator",
        last_name="User",
        hashed_password=hash_password(settings.ADMIN_PASSWORD),
        is_admin=True,
    )
    db.add(admin)
    await db.flush()
    logger.info("seed_admin_created", username=admin.username)
    return admin


async def seed_properties(db: AsyncSession) -> int:
    count = (await db.execute(select(func.count()).select_from(Property))).scalar()
    if count:
        logger.info("seed_properties_skipped", existing=count)
        return 0

    db.add_all([Property(id=pid, name=name) for pid, name in DEFAULT_PROPERTIES])
    await db.flush()
    if db.get_bind().dialect.name == "postgresql":
        # Explicit ids do not advance the serial sequence
        await db.execute(text(
            "SELECT setval(pg_get_serial_sequence('properties', 'id'), "
            "(SELECT MAX(id) FROM properties))"
        ))
    logger.info("seed_properties_created", count=len(DEFAULT_PROPERTIES))
    return len(DEFAULT_PROPERTIES)


async def seed_database(db: AsyncSession) -> None:
    await seed_admin_user(db)
    await seed_properties(db)
    await db.commit()
