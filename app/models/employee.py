from app.db.base_class import Base
from sqlalchemy import Column, Integer, String

class Employee(Base):
    __tablename__ = "employees"  # type: ignore[assignment]

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    # Unique at the store level as well; the service checks first and maps conflicts
    email = Column(String, nullable=False, unique=True, index=True)

    def __repr__(self) -> str:
        return f"<Employee id={self.id} email={self.email!r}>"
