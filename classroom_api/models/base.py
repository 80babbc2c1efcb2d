# classroom_api/models/base.py - Declarative base shared by all models
from sqlalchemy.orm import DeclarativeBase

# Widest integer key any supported backend can bind
ID_MIN = -(2 ** 63)
ID_MAX = 2 ** 63 - 1


class Base(DeclarativeBase):
    pass


def is_storable_id(value: int) -> bool:
    """Ids outside the signed 64-bit range cannot match any row"""
    return ID_MIN <= value <= ID_MAX
