"""Configuration model for the tracker transport client."""

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from tracker_gateway.http.constants import (
    DEFAULT_BASE_URL,
    DEFAULT_TIMEOUT_SECONDS,
    DEFAULT_USER_AGENT,
    ORG_HEADER_CLOUD_ORG_ID,
    ORG_HEADER_ORG_ID,
)


class TransportConfig(BaseModel):
    """Configuration for the tracker HTTP transport.

    Supplied by the composition root; the transport never reads
    environment variables or files itself.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    base_url: Annotated[str, Field(min_length=1)] = DEFAULT_BASE_URL
    token: Annotated[str, Field(min_length=1, repr=False)]
    org_id: Annotated[str, Field(min_length=1)]
    org_header: Literal["X-Org-ID", "X-Cloud-Org-ID"] = ORG_HEADER_ORG_ID
    auth_scheme: Literal["Bearer", "OAuth"] = "Bearer"
    timeout_seconds: Annotated[float, Field(gt=0.0, le=300.0)] = (
        DEFAULT_TIMEOUT_SECONDS
    )
    user_agent: Annotated[str, Field(min_length=1, max_length=500)] = (
        DEFAULT_USER_AGENT
    )
    max_batch_concurrency: Annotated[int, Field(ge=1)] | None = Field(
        default=None,
        description="Upper bound on in-flight batch items; None starts all at once",
    )
    max_batch_size: Annotated[int, Field(ge=1)] | None = Field(
        default=None,
        description="Upper bound on items per operation batch; None accepts any size",
    )

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Require an absolute http(s) URL without a trailing slash."""
        if not v.startswith(("http://", "https://")):
            msg = f"base_url must start with http:// or https://, got {v!r}"
            raise ValueError(msg)
        return v.rstrip("/")

    @property
    def uses_cloud_org(self) -> bool:
        """Whether the organization is a Cloud organization."""
        return self.org_header == ORG_HEADER_CLOUD_ORG_ID

    def auth_headers(self) -> dict[str, str]:
        """Build the headers injected into every request.

        Returns:
            Authorization and organization headers.
        """
        return {
            "Authorization": f"{self.auth_scheme} {self.token}",
            self.org_header: self.org_id,
        }
