# models.py
from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

RISK_LEVEL_CHOICES = ["Low Risk", "Medium Risk", "High Risk"]


class Employee(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: Optional[str] = Field(default=None, alias="_id")
    name: str = ""
    first_name: str = ""
    last_name: str = ""
    department: str = ""
    position: str = ""
    risk_level: str = ""
    turnover_probability: float = 0.0
    email: str = ""
    hire_date: Optional[str] = None
    salary: Optional[float] = None
    performance_score: Optional[float] = None
    last_evaluation_date: Optional[str] = None
    projects: List[str] = Field(default_factory=list)
    skills: List[str] = Field(default_factory=list)

    @field_validator("projects", "skills", mode="before")
    @classmethod
    def _split_csv(cls, value):
        if value is None:
            return []
        if isinstance(value, str):
            return split_list(value)
        return value

    def to_payload(self) -> Dict[str, Any]:
        """Body for POST/PUT; the id travels in the URL only for creates."""
        data = self.model_dump(by_alias=True, exclude_none=True)
        if not data.get("_id"):
            data.pop("_id", None)
        return data


class DepartmentCount(BaseModel):
    department: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("department", "_id", "name")
    )
    count: int = 0

    @field_validator("count", mode="before")
    @classmethod
    def _none_is_zero(cls, value):
        return 0 if value is None else value


class RiskTrends(BaseModel):
    high: float = 0
    average: float = 0


class DashboardStats(BaseModel):
    model_config = ConfigDict(extra="allow")

    total_employees: int = 0
    high_risk_count: int = 0
    medium_risk_count: int = 0
    low_risk_count: int = 0
    average_risk: float = 0.0
    department_count: int = 0
    department_distribution: List[DepartmentCount] = Field(default_factory=list)
    risk_trends: Optional[RiskTrends] = None

    @field_validator(
        "total_employees", "high_risk_count", "medium_risk_count",
        "low_risk_count", "department_count", "average_risk", mode="before",
    )
    @classmethod
    def _none_is_zero(cls, value):
        return 0 if value is None else value

    @field_validator("department_distribution", mode="before")
    @classmethod
    def _none_is_empty(cls, value):
        return [] if value is None else value


class RiskCount(BaseModel):
    risk_level: str = ""
    count: int = 0

    @field_validator("count", mode="before")
    @classmethod
    def _none_is_zero(cls, value):
        return 0 if value is None else value

    @field_validator("risk_level", mode="before")
    @classmethod
    def _none_is_blank(cls, value):
        return "" if value is None else value


class DepartmentRisk(BaseModel):
    department: str = Field(default="Unknown", validation_alias=AliasChoices("_id", "department"))
    risk_distribution: List[RiskCount] = Field(default_factory=list)

    @field_validator("department", mode="before")
    @classmethod
    def _none_is_unknown(cls, value):
        return "Unknown" if value is None else value

    @field_validator("risk_distribution", mode="before")
    @classmethod
    def _none_is_empty(cls, value):
        return [] if value is None else value


def split_list(text: str) -> List[str]:
    return [part.strip() for part in text.split(",") if part.strip()]


def employee_from_form(values: Dict[str, Any], employee_id: Optional[str] = None) -> Employee:
    """Build an Employee from add/edit form values (blank inputs dropped)."""
    data = {k: v for k, v in values.items() if v not in ("", None)}
    if employee_id:
        data["_id"] = employee_id
    if not data.get("name"):
        full = " ".join(p for p in (data.get("first_name"), data.get("last_name")) if p)
        if full:
            data["name"] = full
    for key in ("hire_date", "last_evaluation_date"):
        if key in data and not isinstance(data[key], str):
            data[key] = data[key].isoformat()
    return Employee.model_validate(data)


CSV_MIME_TYPES = ("text/csv", "application/vnd.ms-excel")


def is_csv_file(filename: Optional[str], mime: Optional[str]) -> bool:
    """File-type sniffing for uploads: a CSV mime type or a .csv name."""
    if mime in CSV_MIME_TYPES:
        return True
    return bool(filename) and filename.lower().endswith(".csv")
