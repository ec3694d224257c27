from __future__ import annotations
from typing import List, Optional

from pydantic import BaseModel, Field


# -----------------------------------------------------------------------------
# Composite: employee + manager
# -----------------------------------------------------------------------------
class EmployeeWithManagerRead(BaseModel):
    """Employee merged with the name of its manager (GET /employees/{id}/detailed)"""
    id: int = Field(
        ...,
        description="Employee identifier"
    )
    name: str = Field(
        ...,
        description="Employee's name"
    )
    role: str = Field(
        ...,
        description="Employee's role"
    )
    manager: Optional[str] = Field(
        None,
        description="Name of the employee's manager, null when unassigned"
    )


# -----------------------------------------------------------------------------
# Legacy: supervisor
# -----------------------------------------------------------------------------
class SupervisorRead(BaseModel):
    """Old manager shape served at GET /supervisors/{id}"""
    id: int = Field(
        ...,
        description="Manager identifier"
    )
    name: str = Field(
        ...,
        description="Manager's name"
    )
    employees: List[str] = Field(
        default_factory=list,
        description='Managed employees formatted as "<name>::<role>"',
        examples=[["Frodo Baggins::ring bearer"]]
    )
