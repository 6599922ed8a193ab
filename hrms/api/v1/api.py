from fastapi import APIRouter
from hrms.api.v1.endpoints.asset import assets
from hrms.api.v1.endpoints.hr import attendance, employees, leaves, payroll
from hrms.api.v1.endpoints.notification import notifications
from hrms.api.v1.endpoints.organization import departments
from hrms.api.v1.endpoints.performance import goals, reviews
from hrms.api.v1.endpoints.reports import reports

api_router = APIRouter()

# Organization routes
api_router.include_router(departments.router, prefix="/organization/department", tags=["Organization"])

# HR routes
api_router.include_router(employees.router, prefix="/hr/employee", tags=["Human Resource"])
api_router.include_router(attendance.router, prefix="/hr/attendance", tags=["Human Resource"])
api_router.include_router(leaves.router, prefix="/hr/leave", tags=["Human Resource"])
api_router.include_router(payroll.router, prefix="/hr/payroll", tags=["Human Resource"])

# Performance routes
api_router.include_router(goals.router, prefix="/performance/goal", tags=["Performance"])
api_router.include_router(reviews.router, prefix="/performance/review", tags=["Performance"])

# Asset routes
api_router.include_router(assets.router, prefix="/asset", tags=["Asset"])

# Notification routes
api_router.include_router(notifications.router, prefix="/notification", tags=["Notification"])

# Report routes
api_router.include_router(reports.router, prefix="/reports", tags=["Reports"])
