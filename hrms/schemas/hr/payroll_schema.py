from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional
from datetime import date, datetime
from decimal import Decimal

from hrms.models.shared.enums import PayrollStatus
from hrms.schemas.hr.attendance_schema import EmployeeInfo


class SalaryStructureCreate(BaseModel):
    employee_id: int
    basic_salary: Decimal = Field(..., ge=0)
    hra: Decimal = Field(Decimal("0"), ge=0)
    transport_allowance: Decimal = Field(Decimal("0"), ge=0)
    medical_allowance: Decimal = Field(Decimal("0"), ge=0)
    other_allowances: Decimal = Field(Decimal("0"), ge=0)
    tax_deduction: Decimal = Field(Decimal("0"), ge=0)
    other_deductions: Decimal = Field(Decimal("0"), ge=0)
    effective_from: date


class SalaryStructureResponse(SalaryStructureCreate):
    id: int
    total_allowances: Decimal
    total_deductions: Decimal
    net_salary: Decimal
    employee: Optional[EmployeeInfo] = None

    model_config = ConfigDict(from_attributes=True)


class PayrollGenerateRequest(BaseModel):
    month: int = Field(..., ge=1, le=12)
    year: int = Field(..., ge=2000, le=9999)


class PayrollGenerateResponse(BaseModel):
    month: int
    year: int
    count: int


class PayrollStatusUpdate(BaseModel):
    status: PayrollStatus


class PayrollBulkStatusUpdate(BaseModel):
    ids: List[int] = Field(..., min_length=1)
    status: PayrollStatus


class PayrollRecordResponse(BaseModel):
    id: int
    employee_id: int
    month: int
    year: int
    basic_salary: Decimal
    total_allowances: Decimal
    total_deductions: Decimal
    net_salary: Decimal
    status: PayrollStatus
    paid_at: Optional[datetime] = None
    employee: Optional[EmployeeInfo] = None

    model_config = ConfigDict(from_attributes=True)


class PayrollStats(BaseModel):
    total_payroll: Decimal
    employee_count: int
    avg_salary: Decimal
    pending: int
