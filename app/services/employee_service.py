"""
Employee Service

Holds the business rules for employee records:
- email uniqueness on create and update
- full-overwrite updates onto an existing record
- not-found failures for update and delete

Uniqueness is checked before writing and is also enforced by the UNIQUE
constraint on ``employees.email``. A write that loses a race against a
concurrent insert fails in the store with ``IntegrityError``; that is rolled
back and reported as ``DuplicateEmailError`` as well.
"""

import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError

from app.core.exceptions import DuplicateEmailError, EmployeeNotFoundError
from app.models.employee import Employee
from app.repositories.employee_repository import EmployeeRepository
from app.schemas.employee import EmployeeCreate, EmployeeUpdate

logger = logging.getLogger("employee_directory.employee_service")


class EmployeeService:
    """Mediates all access to the employee store."""

    def __init__(self, repository: EmployeeRepository):
        self.repository = repository

    async def create(self, candidate: EmployeeCreate) -> Employee:
        """
        Persist a new employee.

        Raises:
            DuplicateEmailError: the email is already taken
        """
        existing = await self.repository.find_by_email(candidate.email)
        if existing is not None:
            logger.info(f"Rejected create: email {candidate.email} already used by employee {existing.id}")
            raise DuplicateEmailError(candidate.email)

        employee = Employee(
            first_name=candidate.first_name,
            last_name=candidate.last_name,
            email=candidate.email,
        )
        saved = await self._save(employee)
        logger.info(f"Created employee {saved.id}")
        return saved

    async def list(self) -> List[Employee]:
        return await self.repository.find_all()

    async def get_by_id(self, employee_id: int) -> Optional[Employee]:
        return await self.repository.find_by_id(employee_id)

    async def update(self, employee_id: int, payload: EmployeeUpdate) -> Employee:
        """
        Overwrite first name, last name and email of an existing employee.

        Raises:
            EmployeeNotFoundError: no employee with ``employee_id``
            DuplicateEmailError: the new email belongs to another employee
        """
        employee = await self.repository.find_by_id(employee_id)
        if employee is None:
            raise EmployeeNotFoundError(employee_id)

        if payload.email != employee.email:
            owner = await self.repository.find_by_email(payload.email)
            if owner is not None and owner.id != employee.id:
                logger.info(f"Rejected update of employee {employee_id}: email used by employee {owner.id}")
                raise DuplicateEmailError(payload.email)

        employee.first_name = payload.first_name
        employee.last_name = payload.last_name
        employee.email = payload.email
        saved = await self._save(employee)
        logger.info(f"Updated employee {saved.id}")
        return saved

    async def delete(self, employee_id: int) -> Employee:
        """
        Delete an employee and return its state from before the delete.

        Raises:
            EmployeeNotFoundError: no employee with ``employee_id``
        """
        employee = await self.repository.find_by_id(employee_id)
        if employee is None:
            raise EmployeeNotFoundError(employee_id)

        snapshot = Employee(
            id=employee.id,
            first_name=employee.first_name,
            last_name=employee.last_name,
            email=employee.email,
        )
        await self.repository.delete_by_id(employee_id)
        logger.info(f"Deleted employee {employee_id}")
        return snapshot

    async def _save(self, employee: Employee) -> Employee:
        # Read before the write: rollback expires persistent instances
        email = employee.email
        try:
            return await self.repository.save(employee)
        except IntegrityError as exc:
            await self.repository.rollback()
            logger.warning(f"Unique constraint violated for email {email}: {exc.orig}")
            raise DuplicateEmailError(email) from exc
