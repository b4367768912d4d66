"""
Generation job status and account consumption records from the orchestration API.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import Field, field_validator

from civitai_client.schemas.common import ApiModel


class JobResult(ApiModel):
    """Output blob of a finished job; blob_url is only set once available."""

    blob_key: Optional[str] = Field(default=None, alias="blobKey")
    available: bool = False
    blob_url: Optional[str] = Field(default=None, alias="blobUrl")
    blob_url_expiration_date: Optional[datetime] = Field(default=None, alias="blobUrlExpirationDate")


class JobStatus(ApiModel):
    job_id: UUID = Field(alias="jobId")
    cost: Decimal = Decimal(0)
    result: Optional[JobResult] = None
    scheduled: bool = False
    properties: Optional[Dict[str, Any]] = None
    service_providers: Optional[Any] = Field(default=None, alias="serviceProviders")
    position: Optional[int] = None

    @property
    def is_complete(self) -> bool:
        return self.result is not None and self.result.available


class JobStatusCollection(ApiModel):
    """Jobs of one submission batch, plus the batch token used to poll them."""

    token: Optional[str] = None
    jobs: List[JobStatus] = Field(default_factory=list)

    @field_validator("jobs", mode="before")
    @classmethod
    def null_jobs_as_empty(cls, v: Any) -> Any:
        return [] if v is None else v


class ConsumptionDetails(ApiModel):
    """Credit consumption of the authenticated account over a period."""

    total_cost: Decimal = Field(default=Decimal(0), alias="totalCost")
    total_credits: Decimal = Field(default=Decimal(0), alias="totalCredits")
    remaining_credits: Decimal = Field(default=Decimal(0), alias="remainingCredits")
    period_start: Optional[datetime] = Field(default=None, alias="periodStart")
    period_end: Optional[datetime] = Field(default=None, alias="periodEnd")
    job_count: int = Field(default=0, alias="jobCount")
    average_cost_per_job: Decimal = Field(default=Decimal(0), alias="averageCostPerJob")
