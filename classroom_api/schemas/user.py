# classroom_api/schemas/user.py
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel

from classroom_api.schemas.common import CamelModel, Pagination


class UserOut(CamelModel):
    """User output schema"""
    id: str
    name: str
    email: str
    email_verified: bool
    image: Optional[str] = None
    role: str
    image_cld_pub_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class UserListResponse(BaseModel):
    data: List[UserOut]
    pagination: Pagination


class UserDetailResponse(BaseModel):
    data: UserOut
