from pydantic import BaseModel, ConfigDict, Field, field_validator


class EmployeeCodePattern(BaseModel):
    prefix: str = Field("ACQ", min_length=1, max_length=10)
    separator: str = Field("", max_length=3)
    min_digits: int = Field(3, ge=1, le=10)

    model_config = ConfigDict(frozen=True)

    @field_validator("prefix")
    @classmethod
    def normalize_prefix(cls, v):
        v = v.strip().upper()
        if not v:
            raise ValueError("Prefix cannot be empty")
        return v


DEFAULT_EMPLOYEE_CODE_PATTERN = EmployeeCodePattern()


class EmployeeCodePreview(BaseModel):
    next_code: str
    pattern: EmployeeCodePattern


class EmployeeCodeValidationRequest(BaseModel):
    code: str


class EmployeeCodeValidationResponse(BaseModel):
    code: str
    is_valid: bool
    is_available: bool
