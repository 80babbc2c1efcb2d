# classroom_api/api/deps/params.py - Path and query parameter parsing
import re
from typing import Optional

from fastapi import HTTPException, status

from classroom_api.services.relationships import PATH_ROLES

INT_ID_PATTERN = re.compile(r"-?\d+")


def parse_int_id(raw_id: str, entity: str) -> int:
    """Integer ids only; anything else is a client error"""
    if not INT_ID_PATTERN.fullmatch(raw_id):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid {entity} id"
        )
    return int(raw_id)


def parse_path_role(role: Optional[str]) -> str:
    """The role filter on nested user listings must be teacher or student"""
    if role not in PATH_ROLES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid role"
        )
    return role
