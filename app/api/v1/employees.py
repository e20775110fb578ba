from typing import Any, List
from fastapi import APIRouter, Depends, Response, status

from app.api.deps import get_employee_service
from app.schemas.employee import EmployeeCreate, EmployeeResponse, EmployeeUpdate
from app.services.employee_service import EmployeeService

router = APIRouter()

# DuplicateEmailError -> 409 and EmployeeNotFoundError -> 404 are mapped by the
# exception handlers registered in app.main


@router.post("", response_model=EmployeeResponse, status_code=status.HTTP_201_CREATED)
async def create_employee(
    employee_in: EmployeeCreate,
    service: EmployeeService = Depends(get_employee_service),
) -> Any:
    """
    Create an employee. Responds 409 if the email is already taken.
    """
    return await service.create(employee_in)


@router.get("", response_model=List[EmployeeResponse])
async def read_employees(
    service: EmployeeService = Depends(get_employee_service),
) -> Any:
    """
    Retrieve all employees.
    """
    return await service.list()


@router.get(
    "/{employee_id}",
    response_model=EmployeeResponse,
    responses={status.HTTP_404_NOT_FOUND: {"description": "Employee not found (empty body)"}},
)
async def read_employee(
    employee_id: int,
    service: EmployeeService = Depends(get_employee_service),
) -> Any:
    """
    Get employee by ID. A missing employee is a 404 with an empty body.
    """
    employee = await service.get_by_id(employee_id)
    if employee is None:
        return Response(status_code=status.HTTP_404_NOT_FOUND)
    return employee


@router.put("/{employee_id}", response_model=EmployeeResponse)
async def update_employee(
    employee_id: int,
    employee_in: EmployeeUpdate,
    service: EmployeeService = Depends(get_employee_service),
) -> Any:
    """
    Replace first name, last name and email of an employee.
    """
    return await service.update(employee_id, employee_in)


@router.delete("/{employee_id}", response_model=EmployeeResponse)
async def delete_employee(
    employee_id: int,
    service: EmployeeService = Depends(get_employee_service),
) -> Any:
    """
    Delete an employee and return the record as it was before deletion.
    """
    return await service.delete(employee_id)
