from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, JSON
from sqlalchemy.orm import relationship
from database.init import Base
from database.models.user_model import admin_properties
from enums.property_type import PropertyType
from enums.unit_type import UnitType
from utils.dates import utcnow


class Unit(Base):
    __tablename__ = "units"

    id = Column(Integer, primary_key=True, index=True)
    property_id = Column(Integer, ForeignKey("properties.id", ondelete="CASCADE"), nullable=False)
    unit_number = Column(String(20), nullable=False, index=True)
    unit_type = Column(String(20), default=UnitType.STUDIO.value)
    floor = Column(Integer, nullable=True)
    # is_occupied and tenant_id are always written together
    is_occupied = Column(Boolean, default=False)
    tenant_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    property = relationship("Property", back_populates="units")
    tenant = relationship("User", foreign_keys=[tenant_id])


class Property(Base):
    __tablename__ = "properties"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False, index=True)
    street = Column(String(255), nullable=False)
    city = Column(String(100), nullable=False, index=True)
    state = Column(String(100), nullable=True)
    zip_code = Column(String(20), nullable=True)
    country = Column(String(100), default="South Africa")
    property_type = Column(String(30), default=PropertyType.APARTMENT.value)
    total_units = Column(Integer, nullable=False)
    amenities = Column(JSON, default=list)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    units = relationship(
        "Unit",
        back_populates="property",
        cascade="all, delete-orphan",
        order_by="Unit.id",
    )
    owner = relationship("User", foreign_keys=[owner_id])
    managers = relationship(
        "User", secondary=admin_properties, back_populates="managed_properties"
    )

    @property
    def full_address(self) -> str:
        address = f"{self.street}, {self.city}"
        if self.state:
            address += f", {self.state}"
        if self.zip_code:
            address += f" {self.zip_code}"
        return f"{address}, {self.country}"

    def find_unit(self, unit_number: str):
        for unit in self.units:
            if unit.unit_number == unit_number:
                return unit
        return None
