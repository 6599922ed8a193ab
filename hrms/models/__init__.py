from hrms.models.organization.department import Department
from hrms.models.hr.employee import Employee
from hrms.models.hr.attendance import AttendanceRecord, AttendanceBreak
from hrms.models.hr.leave import LeaveType, LeaveRequest
from hrms.models.hr.payroll import SalaryStructure, PayrollRecord
from hrms.models.system.system_setting import SystemSetting
from hrms.models.notification.notification import Notification
from hrms.models.performance.goal import Goal
from hrms.models.performance.review import PerformanceReview
from hrms.models.asset.asset import Asset, AssetAssignment


__all__ = [
    "Department",
    "Employee",
    "AttendanceRecord",
    "AttendanceBreak",
    "LeaveType",
    "LeaveRequest",
    "SalaryStructure",
    "PayrollRecord",
    "SystemSetting",
    "Notification",
    "Goal",
    "PerformanceReview",
    "Asset",
    "AssetAssignment",
]
