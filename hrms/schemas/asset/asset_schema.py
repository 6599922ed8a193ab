from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Dict, Optional
from datetime import date, datetime
from decimal import Decimal

from hrms.models.shared.enums import AssetStatus
from hrms.schemas.hr.attendance_schema import EmployeeInfo


class AssetBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    category: str = Field(..., min_length=1, max_length=50)
    serial_number: Optional[str] = Field(None, max_length=100)
    purchase_date: Optional[date] = None
    purchase_cost: Optional[Decimal] = Field(None, ge=0)
    vendor: Optional[str] = Field(None, max_length=100)
    warranty_end_date: Optional[date] = None
    notes: Optional[str] = None

    @field_validator('name', 'category')
    @classmethod
    def strip_required(cls, v):
        v = v.strip()
        if not v:
            raise ValueError('Value cannot be empty')
        return v


class AssetCreate(AssetBase):
    pass


class AssetUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    category: Optional[str] = Field(None, min_length=1, max_length=50)
    serial_number: Optional[str] = Field(None, max_length=100)
    purchase_date: Optional[date] = None
    purchase_cost: Optional[Decimal] = Field(None, ge=0)
    vendor: Optional[str] = Field(None, max_length=100)
    warranty_end_date: Optional[date] = None
    notes: Optional[str] = None
    status: Optional[AssetStatus] = None

    @field_validator('status')
    @classmethod
    def validate_status(cls, v):
        if v == AssetStatus.ASSIGNED:
            raise ValueError('Use the assign endpoint to hand an asset to an employee')
        return v


class AssetAssignRequest(BaseModel):
    employee_id: int
    assigned_date: Optional[date] = None
    notes: Optional[str] = None


class AssetReturnRequest(BaseModel):
    returned_date: Optional[date] = None
    notes: Optional[str] = None


class AssetAssignmentResponse(BaseModel):
    id: int
    asset_id: int
    employee_id: int
    assigned_date: date
    returned_date: Optional[date] = None
    notes: Optional[str] = None
    employee: Optional[EmployeeInfo] = None

    model_config = ConfigDict(from_attributes=True)


class AssetResponse(AssetBase):
    id: int
    asset_code: str
    status: AssetStatus
    created_at: Optional[datetime] = None
    current_assignment: Optional[AssetAssignmentResponse] = None

    model_config = ConfigDict(from_attributes=True)


class AssetStats(BaseModel):
    total: int
    laptops: int
    monitors: int
    phones: int
    by_status: Dict[str, int]


class AssetSummary(BaseModel):
    id: int
    asset_code: str
    name: str
    category: str
    serial_number: Optional[str] = None
    status: AssetStatus

    model_config = ConfigDict(from_attributes=True)


class EmployeeAssetResponse(BaseModel):
    """An open assignment with the asset it hands out"""
    id: int
    asset_id: int
    assigned_date: date
    notes: Optional[str] = None
    asset: AssetSummary

    model_config = ConfigDict(from_attributes=True)
