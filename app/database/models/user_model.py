from database.init import Base

from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, Table
from sqlalchemy.orm import relationship

from enums.user_role import UserRole
from utils.dates import utcnow


# Properties an admin or senior admin manages on behalf of the owner
admin_properties = Table(
    "admin_properties",
    Base.metadata,
    Column("user_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("property_id", Integer, ForeignKey("properties.id", ondelete="CASCADE"), primary_key=True),
)


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(50), nullable=False)
    email = Column(String(100), unique=True, index=True, nullable=False)
    phone = Column(String(20), nullable=True)
    hashed_password = Column(String(100), nullable=False)
    role = Column(String(20), nullable=False, default=UserRole.TENANT.value, index=True)
    is_active = Column(Boolean, default=True, index=True)

    # Tenants live in a single unit of a single property
    assigned_property_id = Column(
        Integer,
        ForeignKey("properties.id", use_alter=True, name="fk_users_assigned_property"),
        nullable=True,
    )
    assigned_unit = Column(String(20), nullable=True)

    email_notifications = Column(Boolean, default=True)
    sms_notifications = Column(Boolean, default=False)

    last_login = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    assigned_property = relationship(
        "Property", foreign_keys=[assigned_property_id], post_update=True
    )
    managed_properties = relationship(
        "Property", secondary=admin_properties, back_populates="managers"
    )

    @property
    def is_privileged(self) -> bool:
        return self.role in {
            UserRole.OWNER.value,
            UserRole.ADMIN.value,
            UserRole.SENIOR_ADMIN.value,
        }
