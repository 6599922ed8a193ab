from decimal import Decimal
from sqlalchemy import Column, Integer, DateTime, Numeric, ForeignKey, Enum as SQLEnum, Date, UniqueConstraint
from sqlalchemy.orm import relationship
from hrms.db.base import BaseModel
from hrms.models.shared.enums import PayrollStatus

class SalaryStructure(BaseModel):
    __tablename__ = 'salary_structures'

    employee_id = Column(Integer, ForeignKey('employees.id'), nullable=False, unique=True)
    basic_salary = Column(Numeric(10, 2), nullable=False)
    hra = Column(Numeric(10, 2), default=0)
    transport_allowance = Column(Numeric(10, 2), default=0)
    medical_allowance = Column(Numeric(10, 2), default=0)
    other_allowances = Column(Numeric(10, 2), default=0)
    tax_deduction = Column(Numeric(10, 2), default=0)
    other_deductions = Column(Numeric(10, 2), default=0)
    effective_from = Column(Date, nullable=False)

    employee = relationship("Employee", back_populates="salary_structure")

    @property
    def total_allowances(self) -> Decimal:
        return sum((Decimal(str(v or 0)) for v in (
            self.hra, self.transport_allowance, self.medical_allowance, self.other_allowances
        )), Decimal("0"))

    @property
    def total_deductions(self) -> Decimal:
        return Decimal(str(self.tax_deduction or 0)) + Decimal(str(self.other_deductions or 0))

    @property
    def net_salary(self) -> Decimal:
        return Decimal(str(self.basic_salary or 0)) + self.total_allowances - self.total_deductions


class PayrollRecord(BaseModel):
    __tablename__ = 'payroll_records'
    __table_args__ = (
        UniqueConstraint('employee_id', 'month', 'year', name='uq_payroll_employee_month'),
    )

    employee_id = Column(Integer, ForeignKey('employees.id'), nullable=False, index=True)
    month = Column(Integer, nullable=False)
    year = Column(Integer, nullable=False)
    basic_salary = Column(Numeric(10, 2), nullable=False)
    total_allowances = Column(Numeric(10, 2), default=0)
    total_deductions = Column(Numeric(10, 2), default=0)
    net_salary = Column(Numeric(10, 2), nullable=False)
    status = Column(SQLEnum(PayrollStatus), nullable=False, default=PayrollStatus.DRAFT)
    paid_at = Column(DateTime(timezone=True))

    employee = relationship("Employee", back_populates="payroll_records")
