"""
Pydantic schemas for settings
"""

from pydantic import Field
from typing import List

from resto_console.schemas.base import CamelModel


class RoleCreate(CamelModel):
    role: str = Field(..., min_length=1, max_length=50)


class RolesResponse(CamelModel):
    roles: List[str]
