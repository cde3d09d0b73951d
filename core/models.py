"""Data models shared across the pipeline."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

DEFAULT_SERVICE_NAME = "serverless-service"
DEFAULT_STAGE = "dev"
DEFAULT_REGION = "us-east-1"
POLICY_VERSION = "2012-10-17"


class ProviderConfig(BaseModel):
    """The ``provider`` block of a serverless definition."""

    name: Optional[str] = None
    stage: str = Field(DEFAULT_STAGE, description="Deployment stage used in resource names")
    region: str = Field(DEFAULT_REGION, description="AWS region used in resource ARNs")
    vpc: Any = Field(default=None, description="Only presence matters")
    environment: dict[str, Any] = Field(default_factory=dict)

    model_config = {"extra": "allow"}

    @field_validator("stage", mode="before")
    @classmethod
    def _default_stage(cls, value: Any) -> str:
        if value is None or value == "":
            return DEFAULT_STAGE
        return str(value)

    @field_validator("region", mode="before")
    @classmethod
    def _default_region(cls, value: Any) -> str:
        if value is None or value == "":
            return DEFAULT_REGION
        return str(value)

    @field_validator("environment", mode="before")
    @classmethod
    def _empty_environment(cls, value: Any) -> Any:
        return {} if value is None else value


class ResourcesSection(BaseModel):
    """The ``resources`` block; only ``Resources`` is inspected."""

    definitions: dict[str, Any] = Field(default_factory=dict, alias="Resources")

    model_config = {
        "extra": "allow",
        "populate_by_name": True,
    }

    @field_validator("definitions", mode="before")
    @classmethod
    def _empty_definitions(cls, value: Any) -> Any:
        return value if isinstance(value, dict) else {}


class ServerlessConfig(BaseModel):
    """Read-only snapshot of a parsed ``serverless.yml``."""

    service: str = DEFAULT_SERVICE_NAME
    provider: ProviderConfig = Field(default_factory=ProviderConfig)
    functions: dict[str, Any] | list[Any] = Field(default_factory=dict)
    resources: ResourcesSection = Field(default_factory=ResourcesSection)
    custom: Any = None

    model_config = {
        "extra": "allow",
        "frozen": True,
    }

    @field_validator("service", mode="before")
    @classmethod
    def _service_name(cls, value: Any) -> str:
        # Older framework versions allow `service: {name: ...}`.
        if isinstance(value, dict):
            value = value.get("name")
        if value is None or value == "":
            return DEFAULT_SERVICE_NAME
        return str(value)

    @field_validator("provider", mode="before")
    @classmethod
    def _empty_block(cls, value: Any) -> Any:
        return {} if value is None else value

    @field_validator("resources", mode="before")
    @classmethod
    def _resources_block(cls, value: Any) -> Any:
        # `${file(...)}` lists and strings carry no inline Resources.
        return value if isinstance(value, (dict, ResourcesSection)) else {}

    @field_validator("functions", mode="before")
    @classmethod
    def _empty_functions(cls, value: Any) -> Any:
        return {} if value is None else value

    @property
    def stage(self) -> str:
        return self.provider.stage

    @property
    def region(self) -> str:
        return self.provider.region


class PolicyStatement(BaseModel):
    """IAM policy statement."""

    sid: str | None = Field(default=None, alias="Sid")
    effect: str = Field(default="Allow", alias="Effect")
    actions: list[str] = Field(default_factory=list, alias="Action")
    resources: list[str] = Field(default_factory=list, alias="Resource")
    conditions: dict[str, Any] | None = Field(default=None, alias="Condition")

    model_config = {
        "populate_by_name": True,
        "use_enum_values": True,
    }


class PolicyDoc(BaseModel):
    """Policy document composed of IAM statements."""

    version: str = Field(default=POLICY_VERSION, alias="Version")
    statements: list[PolicyStatement] = Field(default_factory=list, alias="Statement")

    model_config = {
        "populate_by_name": True,
        "use_enum_values": True,
    }

    @property
    def services(self) -> list[str]:
        """Return unique AWS services referenced in the policy."""
        services: set[str] = set()
        for statement in self.statements:
            for action in statement.actions:
                services.add(action.split(":", 1)[0])
        return sorted(services)

    def to_document(self) -> dict[str, Any]:
        """Render the document exactly as IAM expects it."""
        return self.model_dump(by_alias=True, exclude_none=True)


class DeploymentContext(BaseModel):
    """Who is deploying what, derived from git metadata and the environment."""

    user_email: str = Field(..., alias="userEmail")
    user_role: str = Field("none", alias="userRole")
    branch: str = "unknown"
    environment: str = DEFAULT_STAGE
    pipeline_stage: str = Field(DEFAULT_STAGE, alias="pipelineStage")

    model_config = {"populate_by_name": True}


class AuthorizationRequest(BaseModel):
    """Input document sent to the remote policy engine."""

    role: str = "none"
    stage: str = DEFAULT_STAGE
    environment: str = DEFAULT_STAGE

    def as_input(self) -> dict[str, Any]:
        return {
            "user": {"role": self.role},
            "pipeline": {"stage": self.stage},
            "resource": {"environment": self.environment},
        }


__all__ = [
    "AuthorizationRequest",
    "DeploymentContext",
    "PolicyDoc",
    "PolicyStatement",
    "ProviderConfig",
    "ResourcesSection",
    "ServerlessConfig",
    "DEFAULT_REGION",
    "DEFAULT_SERVICE_NAME",
    "DEFAULT_STAGE",
    "POLICY_VERSION",
]
