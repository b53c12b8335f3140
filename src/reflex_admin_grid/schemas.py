"""Request / response models of the batch API (camelCase on the wire)."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class ApiResponse(ApiModel):
    code: str | None = None
    message: str | None = None


# -- menu

class MenuTree(ApiModel):
    menu_id: str
    parent_id: str | None = None
    name: str
    icon: str | None = None
    path: str = ""
    children: list["MenuTree"] = Field(default_factory=list)


class MenuEnquiryResponse(ApiResponse):
    menu_trees: list[MenuTree] = Field(default_factory=list)


# -- search criteria config

class SearchCriteriaConfigResponse(ApiResponse):
    disabled_fields: list[str] = Field(default_factory=list)


class UpdateCriteriaConfigRequest(ApiModel):
    page_key: str
    disabled_fields: list[str]


# -- jobs

class Job(ApiModel):
    job_name: str
    task_group: str = "DEFAULT"
    job_params: dict[str, Any] = Field(default_factory=dict)
    active_status: str = "ACTIVE"
    last_execution_status: str | None = None
    last_execution_time: str | None = None
    result_message: str | None = None


class EnquiryJobResponse(ApiResponse):
    job_task_list: list[Job] = Field(default_factory=list)
    total: int = 0
    page: int = 1
    page_size: int = 10


class LaunchJobRequest(ApiModel):
    job_name: str
    job_params: dict[str, Any] = Field(default_factory=dict)
    task_group: str | None = None


class CreateJobRequest(ApiModel):
    job_name: str
    task_group: str
    task_description: str = ""
    job_class_path: str
    job_params: dict[str, Any] = Field(default_factory=dict)
    active_status: str = "ACTIVE"


# -- stocks

class StockSnapshot(ApiModel):
    symbol: str
    quote_date: str | None = None
    close_price: float | None = None
    stock_pe: float | None = None


class StockSearchResponse(ApiResponse):
    stock_snapshots: list[StockSnapshot] = Field(default_factory=list)
    total: int = 0
