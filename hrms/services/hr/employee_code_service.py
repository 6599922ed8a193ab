import logging
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from hrms.models.hr.employee import Employee
from hrms.models.system.system_setting import SystemSetting
from hrms.schemas.hr.employee_code_schema import (
    DEFAULT_EMPLOYEE_CODE_PATTERN,
    EmployeeCodePattern,
    EmployeeCodeValidationResponse,
)
from hrms.utils.employee_code import like_prefix, next_code, validate_code

logger = logging.getLogger(__name__)

EMPLOYEE_CODE_PATTERN_KEY = "employee_code_pattern"


class EmployeeCodeService:
    def __init__(self, session: AsyncSession):
        self.session = session

    # ---------- Pattern ----------
    async def _get_setting(self) -> Optional[SystemSetting]:
        result = await self.session.execute(
            select(SystemSetting).where(SystemSetting.setting_key == EMPLOYEE_CODE_PATTERN_KEY)
        )
        return result.scalar_one_or_none()

    async def get_pattern(self) -> EmployeeCodePattern:
        setting = await self._get_setting()
        if setting is None or not setting.setting_value:
            return DEFAULT_EMPLOYEE_CODE_PATTERN
        return EmployeeCodePattern.model_validate(setting.setting_value)

    async def update_pattern(self, pattern: EmployeeCodePattern, current_user_id: Optional[int] = None) -> EmployeeCodePattern:
        setting = await self._get_setting()
        if setting is None:
            setting = SystemSetting(
                setting_key=EMPLOYEE_CODE_PATTERN_KEY,
                description="Prefix, separator and minimum digit width of generated employee codes",
            )
            self.session.add(setting)
        setting.setting_value = pattern.model_dump()
        setting.updated_by = current_user_id

        await self.session.commit()
        logger.info(
            f"Employee code pattern set to prefix={pattern.prefix!r} separator={pattern.separator!r} "
            f"min_digits={pattern.min_digits} by user {current_user_id}"
        )
        return pattern

    # ---------- Codes ----------
    async def get_family_codes(self, pattern: EmployeeCodePattern) -> List[str]:
        result = await self.session.execute(
            select(Employee.employee_code).where(
                Employee.employee_code.ilike(like_prefix(pattern), escape="\\")
            )
        )
        return list(result.scalars().all())

    async def get_next_code(self, pattern: Optional[EmployeeCodePattern] = None) -> str:
        pattern = pattern or await self.get_pattern()
        codes = await self.get_family_codes(pattern)
        return next_code(codes, pattern)

    async def is_code_taken(self, code: str) -> bool:
        result = await self.session.execute(
            select(Employee.id).where(func.upper(Employee.employee_code) == code.upper()).limit(1)
        )
        return result.scalar_one_or_none() is not None

    async def check_code(self, code: str) -> EmployeeCodeValidationResponse:
        pattern = await self.get_pattern()
        return EmployeeCodeValidationResponse(
            code=code,
            is_valid=validate_code(code, pattern),
            is_available=not await self.is_code_taken(code),
        )
