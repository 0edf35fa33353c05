import logging
from typing import Optional

from sqlalchemy.orm import Session

import config
from database.models import User
from enums.user_role import UserRole
from utils.dependencies import hash_password

logger = logging.getLogger(__name__)


def seed_default_owner(db: Session) -> Optional[User]:
    """Create the first owner account from configuration unless an owner already exists."""
    if db.query(User).filter(User.role == UserRole.OWNER.value).first():
        return None

    email = config.DEFAULT_ADMIN_EMAIL.lower()
    if db.query(User).filter(User.email == email).first():
        logger.warning("Cannot seed owner, %s is already taken by another account", email)
        return None

    owner = User(
        name=config.DEFAULT_ADMIN_NAME,
        email=email,
        hashed_password=hash_password(config.DEFAULT_ADMIN_PASSWORD),
        role=UserRole.OWNER.value,
        is_active=True,
    )
    db.add(owner)
    db.commit()
    db.refresh(owner)
    logger.info("Seeded default owner account %s", owner.email)
    return owner
