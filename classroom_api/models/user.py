# classroom_api/models/user.py - Users synced from the identity provider
from __future__ import annotations
import enum
from datetime import datetime
from sqlalchemy import String, DateTime, Boolean, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from classroom_api.models.base import Base


class UserRole(str, enum.Enum):
    """System-wide user roles"""
    ADMIN = "admin"
    TEACHER = "teacher"
    STUDENT = "student"


class User(Base):
    __tablename__ = "users"

    # Text ids are issued by the identity provider, not by this database
    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    email_verified: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    image: Mapped[str | None] = mapped_column(String(1024))
    role: Mapped[str] = mapped_column(String(16), nullable=False, default=UserRole.STUDENT.value)
    image_cld_pub_id: Mapped[str | None] = mapped_column(String(255))

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    taught_classes: Mapped[list["Class"]] = relationship("Class", back_populates="teacher")
    enrollments: Mapped[list["Enrollment"]] = relationship(
        "Enrollment",
        back_populates="student",
        cascade="all, delete-orphan"
    )

    __table_args__ = (
        CheckConstraint("role IN ('admin','teacher','student')", name="ck_users_role"),
    )

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', role={self.role})>"
