from sqlalchemy import Column, Integer, String, Text, ForeignKey, Enum as SQLEnum, Date, Time, JSON
from sqlalchemy.orm import relationship
from hrms.db.base import BaseModel
from hrms.models.shared.enums import EmployeeStatus

DEFAULT_WORKING_DAYS = [1, 2, 3, 4, 5]  # ISO weekdays, Monday to Friday

class Employee(BaseModel):
    __tablename__ = 'employees'

    employee_code = Column(String(30), unique=True, nullable=False, index=True)
    user_id = Column(Integer, nullable=True)  # Reference to the external auth user
    first_name = Column(String(50), nullable=False)
    last_name = Column(String(50), nullable=False)
    email = Column(String(100), unique=True, nullable=False)
    phone = Column(String(20))
    designation = Column(String(100))
    hire_date = Column(Date, nullable=False)
    department_id = Column(Integer, ForeignKey('departments.id'))
    manager_id = Column(Integer, ForeignKey('employees.id'))
    status = Column(SQLEnum(EmployeeStatus), nullable=False, default=EmployeeStatus.ACTIVE)
    working_hours_start = Column(Time)
    working_hours_end = Column(Time)
    working_days = Column(JSON, default=lambda: list(DEFAULT_WORKING_DAYS))
    avatar_url = Column(String(255))
    address = Column(Text)

    # Relationships
    department = relationship("Department", back_populates="employees")
    manager = relationship("Employee", remote_side="Employee.id")
    attendance_records = relationship("AttendanceRecord", back_populates="employee")
    leave_requests = relationship("LeaveRequest", back_populates="employee")
    salary_structure = relationship("SalaryStructure", back_populates="employee", uselist=False)
    payroll_records = relationship("PayrollRecord", back_populates="employee")
    goals = relationship("Goal", back_populates="employee")
    performance_reviews = relationship(
        "PerformanceReview", foreign_keys="PerformanceReview.employee_id", back_populates="employee"
    )
    asset_assignments = relationship("AssetAssignment", back_populates="employee")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
