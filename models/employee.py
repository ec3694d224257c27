from __future__ import annotations
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from services.database import Base
from models.manager import Manager

# -----------------------------------------------------------------------------
# SQLAlchemy Model
# -----------------------------------------------------------------------------
class Employee(Base):
    __tablename__ = "employees"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(255), nullable=False)

    # Single source of truth for the employee/manager relation
    manager_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("managers.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )
    manager: Mapped[Optional[Manager]] = relationship(
        back_populates="employees",
        lazy="joined",
    )


# -----------------------------------------------------------------------------
# Pydantic Schemas
# -----------------------------------------------------------------------------
class EmployeeBase(BaseModel):
    """Base employee fields shared across schemas"""
    name: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Employee's name",
        examples=["Frodo Baggins"]
    )
    role: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Employee's role",
        examples=["ring bearer"]
    )

    @field_validator("name", "role")
    @classmethod
    def reject_blank(cls, v: str) -> str:
        if v.strip() == "":
            raise ValueError("Field cannot be empty string")
        return v


class EmployeeCreate(EmployeeBase):
    """Payload for POST /employees"""
    manager_id: Optional[int] = Field(
        None,
        ge=1,
        description="ID of the employee's manager, if any"
    )


class EmployeeRead(BaseModel):
    """
    Employee fields returned to clients.
    The manager is exposed as a `manager` link, not as nested data.
    """
    id: int = Field(
        ...,
        description="Internal unique identifier for this employee"
    )
    name: str = Field(
        ...,
        description="Employee's name"
    )
    role: str = Field(
        ...,
        description="Employee's role"
    )

    model_config = ConfigDict(from_attributes=True)
