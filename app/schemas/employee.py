from pydantic import BaseModel, ConfigDict, Field
from typing import Optional


class EmployeeBase(BaseModel):
    """Fields shared by employee requests and responses (camelCase on the wire)"""
    model_config = ConfigDict(populate_by_name=True)

    first_name: str = Field(..., alias="firstName", description="Employee first name")
    last_name: str = Field(..., alias="lastName", description="Employee last name")
    email: str = Field(..., description="Employee email, unique across all employees")


class EmployeeCreate(EmployeeBase):
    """Schema for creating an employee. An `id` in the body is ignored."""
    pass


class EmployeeUpdate(EmployeeBase):
    """Schema for a full update; every field overwrites the stored value."""
    pass


class EmployeeResponse(EmployeeBase):
    """Schema for employee response"""
    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    id: Optional[int] = None
