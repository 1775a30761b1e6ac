"""
SQLAlchemy ORM models  (maps to PostgreSQL + PostGIS).

Tables
------
* ``users``       -- buyers, realtors and admins
* ``houses``      -- listings; coordinates are optional until geocoded
* ``tours``       -- a realtor's outing, optionally for one buyer
* ``tour_stops``  -- ordered houses within a tour (soft-deletable)

Indexes
-------
* **GIST** on ``houses.location`` for spatial look-ups.
* **B-Tree** on ``tours.realtor_id``, ``tours.buyer_id``, ``tours.status``
  and ``(tour_stops.tour_id, order_index)`` for the optimize-route reads.
"""

from sqlalchemy import (
    Column,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    func,
)
from geoalchemy2 import Geometry

from .database import Base
from tourplanner.domain.enums import TourStatus, UserRole


class UserModel(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(120), nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    role = Column(Enum(UserRole), default=UserRole.BUYER, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class HouseModel(Base):
    __tablename__ = "houses"

    id = Column(Integer, primary_key=True, autoincrement=True)
    address = Column(String(255), nullable=False)
    city = Column(String(120), nullable=False)
    state = Column(String(64), nullable=False)

    # Null until the listing has been geocoded
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    location = Column(Geometry("POINT", srid=4326), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        Index("idx_houses_location", "location", postgresql_using="gist"),
    )

    @property
    def display_address(self) -> str:
        return f"{self.address}, {self.city}, {self.state}"


class TourModel(Base):
    __tablename__ = "tours"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    realtor_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    buyer_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    status = Column(Enum(TourStatus), default=TourStatus.PLANNED, nullable=False)
    scheduled_date = Column(DateTime(timezone=True), nullable=True)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )
    deleted_at = Column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        Index("idx_tours_realtor", "realtor_id"),
        Index("idx_tours_buyer", "buyer_id"),
        Index("idx_tours_status", "status"),
    )


class TourStopModel(Base):
    __tablename__ = "tour_stops"

    id = Column(Integer, primary_key=True, autoincrement=True)
    tour_id = Column(Integer, ForeignKey("tours.id"), nullable=False)
    house_id = Column(Integer, ForeignKey("houses.id"), nullable=False)
    order_index = Column(Integer, nullable=False)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )
    deleted_at = Column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        Index("idx_tour_stops_order", "tour_id", "order_index"),
        Index("idx_tour_stops_house", "house_id"),
    )
