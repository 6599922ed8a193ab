from sqlalchemy import Column, Integer, String, Text, ForeignKey, Enum as SQLEnum, Date, Numeric
from sqlalchemy.orm import relationship
from hrms.db.base import BaseModel
from hrms.models.shared.enums import AssetStatus

class Asset(BaseModel):
    __tablename__ = 'assets'

    asset_code = Column(String(30), unique=True, nullable=False, index=True)
    name = Column(String(100), nullable=False)
    category = Column(String(50), nullable=False)
    serial_number = Column(String(100))
    purchase_date = Column(Date)
    purchase_cost = Column(Numeric(12, 2))
    vendor = Column(String(100))
    warranty_end_date = Column(Date)
    notes = Column(Text)
    status = Column(SQLEnum(AssetStatus), nullable=False, default=AssetStatus.AVAILABLE)

    assignments = relationship("AssetAssignment", back_populates="asset", order_by="AssetAssignment.id")

    @property
    def current_assignment(self):
        return next((a for a in self.assignments if a.returned_date is None and not a.is_deleted), None)


class AssetAssignment(BaseModel):
    __tablename__ = 'asset_assignments'

    asset_id = Column(Integer, ForeignKey('assets.id'), nullable=False, index=True)
    employee_id = Column(Integer, ForeignKey('employees.id'), nullable=False, index=True)
    assigned_date = Column(Date, nullable=False)
    returned_date = Column(Date)
    notes = Column(Text)

    asset = relationship("Asset", back_populates="assignments")
    employee = relationship("Employee", back_populates="asset_assignments")
