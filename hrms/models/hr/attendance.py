from sqlalchemy import Column, Integer, String, DateTime, Text, Numeric, ForeignKey, Enum as SQLEnum, Date, UniqueConstraint
from sqlalchemy.orm import relationship
from hrms.db.base import BaseModel
from hrms.models.shared.enums import AttendanceStatus, WorkMode

class AttendanceRecord(BaseModel):
    __tablename__ = 'attendance_records'
    __table_args__ = (
        UniqueConstraint('employee_id', 'date', name='uq_attendance_employee_date'),
    )

    employee_id = Column(Integer, ForeignKey('employees.id'), nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)
    clock_in = Column(DateTime(timezone=True))
    clock_out = Column(DateTime(timezone=True))
    total_hours = Column(Numeric(5, 2))
    status = Column(SQLEnum(AttendanceStatus), nullable=False, default=AttendanceStatus.PRESENT)
    work_mode = Column(SQLEnum(WorkMode))
    notes = Column(Text)
    clock_in_latitude = Column(Numeric(10, 8))
    clock_in_longitude = Column(Numeric(11, 8))
    clock_in_location_name = Column(String(255))
    clock_out_latitude = Column(Numeric(10, 8))
    clock_out_longitude = Column(Numeric(11, 8))
    clock_out_location_name = Column(String(255))

    # Relationships
    employee = relationship("Employee", back_populates="attendance_records")
    breaks = relationship("AttendanceBreak", back_populates="attendance_record", order_by="AttendanceBreak.pause_time")


class AttendanceBreak(BaseModel):
    __tablename__ = 'attendance_breaks'

    attendance_record_id = Column(Integer, ForeignKey('attendance_records.id'), nullable=False, index=True)
    pause_time = Column(DateTime(timezone=True), nullable=False)
    resume_time = Column(DateTime(timezone=True))
    pause_latitude = Column(Numeric(10, 8))
    pause_longitude = Column(Numeric(11, 8))
    pause_location_name = Column(String(255))
    resume_latitude = Column(Numeric(10, 8))
    resume_longitude = Column(Numeric(11, 8))
    resume_location_name = Column(String(255))

    attendance_record = relationship("AttendanceRecord", back_populates="breaks")
