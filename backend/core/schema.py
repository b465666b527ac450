from __future__ import annotations

from datetime import date
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, StringConstraints
from pydantic.alias_generators import to_camel

from backend.domain import AllocationRole, Category, ClaimStatus, UserRole, UserStatus


def _calendar_date(value: str) -> str:
    date.fromisoformat(value)
    return value


ISODate = Annotated[str, StringConstraints(pattern=r"^\d{4}-\d{2}-\d{2}$"), AfterValidator(_calendar_date)]


class Record(BaseModel):
    """Base for persisted records: snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_record(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class WeldSpec(Record):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str
    config_name: str | None = None
    drawing_no: str
    weld_no: str
    weight: float
    price: float = 0

    @property
    def configuration(self) -> str:
        return self.config_name or self.drawing_no


class CatalogItem(Record):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str
    category: Category
    item_name: str
    base_price: int = Field(..., ge=0)
    welder_price: int = Field(..., ge=0)
    foreman_price: int = Field(..., ge=0)
    default_welders: int = Field(0, ge=0)
    default_foremen: int = Field(0, ge=0)
    specs: tuple[WeldSpec, ...] = ()

    @property
    def configurations(self) -> list[str]:
        seen: list[str] = []
        for spec in self.specs:
            if spec.configuration not in seen:
                seen.append(spec.configuration)
        return seen

    def sub_budget(self, role: AllocationRole) -> int:
        return self.welder_price if role is AllocationRole.WELDER else self.foreman_price


class ClaimLineItem(Record):
    spec_id: str
    drawing_no: str
    weld_no: str
    item_serial: str = ""
    weight: float = 0
    price: float = 0
    ut_date: ISODate | None = None


class Allocation(Record):
    worker_id: str = ""
    worker_name: str = ""
    role: AllocationRole = AllocationRole.WELDER
    amount: int = Field(0, ge=0)


class Claim(Record):
    id: str
    sheet_no: str
    workstation: str
    applicant_name: str
    submit_date: ISODate
    master_item_id: str
    items: list[ClaimLineItem] = Field(default_factory=list)
    allocations: list[Allocation] = Field(default_factory=list)
    status: ClaimStatus = ClaimStatus.PENDING
    admin_comment: str | None = None
    summary_date: ISODate | None = None

    @property
    def submitted_on(self) -> date:
        return date.fromisoformat(self.submit_date)


class ClaimDraft(Record):
    """Author-supplied part of a claim; identity fields are assigned on submit."""

    master_item_id: str
    submit_date: ISODate | None = None
    items: list[ClaimLineItem] = Field(default_factory=list)
    allocations: list[Allocation] = Field(default_factory=list)


class User(Record):
    id: str
    name: str
    password: str | None = None
    workstation: str
    role: UserRole = UserRole.WORKER
    status: UserStatus = UserStatus.PENDING


class UserPublic(Record):
    """User as returned to clients; never carries the credential."""

    id: str
    name: str
    workstation: str
    role: UserRole
    status: UserStatus

    @classmethod
    def from_user(cls, user: User) -> "UserPublic":
        return cls(
            id=user.id,
            name=user.name,
            workstation=user.workstation,
            role=user.role,
            status=user.status,
        )


GUEST_USER = User(
    id="guest",
    name="Guest Viewer",
    workstation="VIEWER",
    role=UserRole.GUEST,
    status=UserStatus.ACTIVE,
)
