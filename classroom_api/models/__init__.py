# classroom_api/models/__init__.py - Import all models so SQLAlchemy can discover them

from classroom_api.models.base import Base, is_storable_id
from classroom_api.models.user import User, UserRole
from classroom_api.models.department import Department
from classroom_api.models.subject import Subject
from classroom_api.models.class_model import Class, CLASS_STATUSES
from classroom_api.models.enrollment import Enrollment

__all__ = [
    "Base",
    "is_storable_id",
    "User",
    "UserRole",
    "Department",
    "Subject",
    "Class",
    "CLASS_STATUSES",
    "Enrollment",
]
