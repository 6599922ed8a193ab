from pydantic import BaseModel
from typing import Dict, List, Optional
from datetime import date
from decimal import Decimal


class LeaveTypeBalance(BaseModel):
    leave_type: str
    total: int
    used: int
    remaining: int


class LeaveBalanceRecord(BaseModel):
    employee_id: int
    employee_code: str
    employee_name: str
    department: str
    balances: List[LeaveTypeBalance]


class LeaveBalanceReport(BaseModel):
    year: int
    leave_types: List[str]
    records: List[LeaveBalanceRecord]


class PayrollSummaryReport(BaseModel):
    month_name: str
    record_count: int
    total_basic: Decimal
    total_allowances: Decimal
    total_deductions: Decimal
    total_net: Decimal
    by_status: Dict[str, int]


class StatusCount(BaseModel):
    status: str
    count: int


class CategoryCount(BaseModel):
    category: str
    count: int


class AssetReportRecord(BaseModel):
    id: int
    asset_code: str
    name: str
    category: str
    serial_number: str
    status: str
    purchase_date: Optional[date] = None
    purchase_cost: Decimal
    warranty_end_date: Optional[date] = None
    vendor: str
    assigned_to: str


class AssetInventoryReport(BaseModel):
    total_assets: int
    total_value: Decimal
    by_status: List[StatusCount]
    by_category: List[CategoryCount]
    records: List[AssetReportRecord]
