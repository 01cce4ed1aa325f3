"""
Database models for the crime record management system.
"""
from datetime import datetime
from sqlalchemy import (
    Column, Integer, String, Boolean, Date, DateTime, Text,
    ForeignKey, JSON, Index, TypeDecorator
)
from sqlalchemy.orm import declarative_base, relationship
import enum

Base = declarative_base()


# ============================================================================
# Custom Type Decorator for Enum Values
# ============================================================================

class EnumValue(TypeDecorator):
    """Type decorator to ensure enum values (not names) are stored."""
    impl = String
    cache_ok = True

    def __init__(self, enum_class, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.enum_class = enum_class

    def process_bind_param(self, value, dialect):
        """Convert enum to its value when writing to database."""
        if value is None:
            return None
        if isinstance(value, enum.Enum):
            return value.value
        return value

    def process_result_value(self, value, dialect):
        """Convert database value back to enum when reading."""
        if value is None:
            return None
        if isinstance(value, str):
            try:
                return self.enum_class(value)
            except ValueError:
                return value
        return value


# ============================================================================
# Enums - Must be defined before models that use them
# ============================================================================

class UserRole(str, enum.Enum):
    """User roles for authorization."""
    ADMIN = "admin"
    OFFICER = "officer"
    USER = "user"


class CriminalStatus(str, enum.Enum):
    """Criminal record status."""
    ACTIVE = "active"
    INCARCERATED = "incarcerated"
    RELEASED = "released"
    WANTED = "wanted"


class FirStatus(str, enum.Enum):
    """FIR case lifecycle status."""
    NEW = "new"
    INVESTIGATING = "investigating"
    RESOLVED = "resolved"
    CLOSED = "closed"


class ActivityType(str, enum.Enum):
    """Dashboard activity categories."""
    NEW = "new"
    UPDATED = "updated"
    PROGRESS = "progress"


# ============================================================================
# Models
# ============================================================================

class User(Base):
    """User model for authentication and authorization."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    username = Column(String(100), unique=True, index=True, nullable=False)
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    profile_image_url = Column(String(512), nullable=True)
    role = Column(EnumValue(UserRole), default=UserRole.USER, nullable=False)
    hashed_password = Column(String(255), nullable=False, default="")
    is_active = Column(Boolean, default=True, nullable=False)
    last_login = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    profile = relationship("Profile", back_populates="user", uselist=False, cascade="all, delete-orphan")

    __table_args__ = (
        Index('idx_user_role', 'role'),
    )

    @property
    def display_name(self) -> str:
        parts = [p for p in (self.first_name, self.last_name) if p]
        return " ".join(parts) if parts else self.username


class Profile(Base):
    """Contact details, one-to-one with a user."""
    __tablename__ = "profiles"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    address = Column(Text, nullable=True)
    phone_number = Column(String(50), nullable=True)
    email = Column(String(255), nullable=True)  # Contact email override
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    user = relationship("User", back_populates="profile")


class PoliceStation(Base):
    """Police station. officer_count is derived from the officers table."""
    __tablename__ = "police_stations"

    id = Column(String(50), primary_key=True)  # e.g. PS-2024-0042
    name = Column(String(255), nullable=False)
    address = Column(Text, nullable=False)
    contact = Column(String(100), nullable=False)
    officer_count = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    __table_args__ = (
        Index('idx_station_name', 'name'),
    )


class Officer(Base):
    """Police officer assigned to exactly one station."""
    __tablename__ = "officers"

    id = Column(String(50), primary_key=True)  # e.g. OFF-2024-0007
    name = Column(String(255), nullable=False)
    badge_number = Column(String(50), unique=True, index=True, nullable=False)
    rank = Column(String(100), nullable=False)
    station_id = Column(String(50), ForeignKey("police_stations.id"), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    __table_args__ = (
        Index('idx_officer_station', 'station_id'),
    )


class Criminal(Base):
    """Criminal record."""
    __tablename__ = "criminals"

    id = Column(String(50), primary_key=True)  # e.g. CRIM-2024-0145
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    age = Column(Integer, nullable=False)
    gender = Column(String(20), nullable=False)
    status = Column(EnumValue(CriminalStatus), nullable=False)
    last_crime_date = Column(Date, nullable=False)
    crime_types = Column(JSON, nullable=False, default=list)  # e.g. ["Theft", "Burglary"]
    photo_url = Column(String(512), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    __table_args__ = (
        Index('idx_criminal_status', 'status'),
    )


class FirDetail(Base):
    """First Information Report. station_name caches the referenced station's name."""
    __tablename__ = "fir_details"

    id = Column(String(50), primary_key=True)  # e.g. FIR-2024-0456
    complainant_name = Column(String(255), nullable=False)
    complainant_id = Column(String(100), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    date_filed = Column(Date, nullable=False)
    incident_type = Column(String(100), nullable=False)
    station_id = Column(String(50), ForeignKey("police_stations.id"), nullable=False)
    station_name = Column(String(255), nullable=False, default="")
    status = Column(EnumValue(FirStatus), default=FirStatus.NEW, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    __table_args__ = (
        Index('idx_fir_station', 'station_id'),
        Index('idx_fir_status', 'status'),
        Index('idx_fir_date_filed', 'date_filed'),
    )


class Activity(Base):
    """Append-only audit entry shown on the dashboard. Actor and location are free-text labels."""
    __tablename__ = "activities"

    id = Column(Integer, primary_key=True, index=True)
    description = Column(Text, nullable=False)
    type = Column(EnumValue(ActivityType), nullable=False)
    location = Column(String(255), nullable=False)
    officer = Column(String(255), nullable=False)  # Actor label
    timestamp = Column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        Index('idx_activity_timestamp', 'timestamp'),
    )
