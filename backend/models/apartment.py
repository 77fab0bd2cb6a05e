import uuid
from sqlalchemy import Column, String, Text, Integer, Numeric, DateTime, Boolean, JSON, ForeignKey, UniqueConstraint, Index
from sqlalchemy.orm import relationship
from core.database import Base
from core.timezone import now_utc


class Apartment(Base):
    __tablename__ = "apartments"
    __table_args__ = (
        UniqueConstraint("project", "unit_number", name="uq_apartments_project_unit_number"),
        Index("ix_apartments_location", "location"),
        Index("ix_apartments_available_created", "is_available", "created_at"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    created_at = Column(DateTime, default=now_utc, nullable=False)
    updated_at = Column(DateTime, default=now_utc, onupdate=now_utc, nullable=False)

    unit_name = Column(String(100), nullable=False)
    unit_number = Column(String(50), nullable=False)
    project = Column(String(100), nullable=False)
    price = Column(Numeric(14, 2, asdecimal=False), nullable=False)
    bedrooms = Column(Integer, nullable=False)
    bathrooms = Column(Integer, nullable=False)
    area_sqft = Column(Integer, nullable=False)
    location = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    images = Column(JSON, default=list, nullable=False)
    is_available = Column(Boolean, default=True, nullable=False)

    amenity_links = relationship(
        "ApartmentAmenity",
        back_populates="apartment",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="ApartmentAmenity.id",
    )

    @property
    def amenities(self) -> list[str]:
        return [link.name for link in self.amenity_links]

    def set_amenities(self, names: list[str]) -> None:
        """편의시설 목록 교체. 중복은 첫 등장 순서만 유지."""
        unique = list(dict.fromkeys(names))
        existing = {link.name: link for link in self.amenity_links}
        self.amenity_links = [existing.get(name) or ApartmentAmenity(name=name) for name in unique]

    def __repr__(self):
        return f"<Apartment {self.id} - {self.project} {self.unit_number}>"


class ApartmentAmenity(Base):
    __tablename__ = "apartment_amenities"
    __table_args__ = (
        UniqueConstraint("apartment_id", "name", name="uq_apartment_amenities_name"),
        Index("ix_apartment_amenities_name", "name"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    apartment_id = Column(String(36), ForeignKey("apartments.id", ondelete="CASCADE"), nullable=False)
    name = Column(String(100), nullable=False)

    apartment = relationship("Apartment", back_populates="amenity_links")

    def __repr__(self):
        return f"<ApartmentAmenity {self.apartment_id} - {self.name}>"
