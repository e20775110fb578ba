"""
Persistence for employee records.

Thin wrapper over an ``AsyncSession``: each method is a single read or a
single committed write against the ``employees`` table. Business rules live
in ``app.services.employee_service``.
"""

from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.employee import Employee


class EmployeeRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def save(self, employee: Employee) -> Employee:
        """Insert or update ``employee`` and return it refreshed from the store."""
        self.db.add(employee)
        await self.db.commit()
        await self.db.refresh(employee)
        return employee

    async def find_by_id(self, employee_id: int) -> Optional[Employee]:
        return await self.db.get(Employee, employee_id)

    async def find_by_email(self, email: str) -> Optional[Employee]:
        return await self.db.scalar(select(Employee).where(Employee.email == email))

    async def find_all(self) -> List[Employee]:
        result = await self.db.execute(select(Employee).order_by(Employee.id))
        return list(result.scalars().all())

    async def delete_by_id(self, employee_id: int) -> None:
        await self.db.execute(delete(Employee).where(Employee.id == employee_id))
        await self.db.commit()

    async def rollback(self) -> None:
        await self.db.rollback()
