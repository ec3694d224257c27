from __future__ import annotations
from typing import List, TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field, field_validator
from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from services.database import Base

if TYPE_CHECKING:
    from models.employee import Employee

# -----------------------------------------------------------------------------
# SQLAlchemy Model
# -----------------------------------------------------------------------------
class Manager(Base):
    __tablename__ = "managers"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)

    # Other side of employees.manager_id. Never loaded implicitly; callers that
    # need it (the supervisor view) ask the store for it.
    employees: Mapped[List["Employee"]] = relationship(
        back_populates="manager",
        lazy="raise",
        order_by="Employee.id",
    )


# -----------------------------------------------------------------------------
# Pydantic Schemas
# -----------------------------------------------------------------------------
class ManagerBase(BaseModel):
    """Base manager fields shared across schemas"""
    name: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Manager's name",
        examples=["Gandalf"]
    )

    @field_validator("name")
    @classmethod
    def reject_blank(cls, v: str) -> str:
        if v.strip() == "":
            raise ValueError("Field cannot be empty string")
        return v


class ManagerCreate(ManagerBase):
    """Payload for POST /managers"""
    pass


class ManagerRead(BaseModel):
    """
    Manager fields returned to clients.
    Employees are reachable through the `employees` link, never inlined.
    """
    id: int = Field(
        ...,
        description="Internal unique identifier for this manager"
    )
    name: str = Field(
        ...,
        description="Manager's name"
    )

    model_config = ConfigDict(from_attributes=True)
