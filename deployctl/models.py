from enum import Enum
from typing import List, Optional

from pydantic import (
    AliasChoices,
    AnyHttpUrl,
    BaseModel,
    Field,
    TypeAdapter,
    field_validator,
)

from .constants import DEFAULT_API_URL


class OutputMode(str, Enum):
    human = "human"
    json = "json"


class Verbosity(str, Enum):
    none = "none"
    error = "error"
    warning = "warning"
    info = "info"
    debug = "debug"


class AppContext(BaseModel):
    verbosity: Verbosity = Verbosity.none
    output_mode: OutputMode = OutputMode.human
    auto_approve: bool = False
    prompt: bool = True
    token: Optional[str] = None
    scope: Optional[str] = None
    api_url: Optional[str] = None


class AuthConfig(BaseModel):
    url: str = DEFAULT_API_URL
    token: str
    scope: Optional[str] = None

    @field_validator("url", "token")
    @classmethod
    def not_empty(cls, value: str):
        value = value.strip()
        if not value:
            raise ValueError("Empty string not allowed")
        return value

    @field_validator("url")
    @classmethod
    def http_url(cls, value: str):
        TypeAdapter(AnyHttpUrl).validate_python(value)
        return value.rstrip("/")

    def display_dict(self, hide: bool = True):
        data = self.model_dump()
        if hide:
            data["token"] = "*" * 8
        data["scope"] = self.scope or ""
        return data


class ScopeContext(BaseModel):

    """Account (user or team) which owns the resources of the current run"""

    context_name: str
    user_id: str
    team_id: Optional[str] = None


########################################
# Platform resources
########################################


class Alias(BaseModel):
    alias: str
    uid: Optional[str] = None
    deployment_id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("deploymentId", "deployment_id"),
    )


class Deployment(BaseModel):
    id: str = Field(validation_alias=AliasChoices("id", "uid"))
    name: str
    url: Optional[str] = None
    created_at: int = Field(
        default=0,
        validation_alias=AliasChoices("createdAt", "created", "created_at"),
    )
    aliases: List[Alias] = Field(default_factory=list)


class Project(BaseModel):
    id: str
    name: str


class Example(BaseModel):
    name: str
    visible: bool = True
    suggestions: List[str] = Field(default_factory=list)


########################################
# Lookup results
########################################


class LookupStatus(str, Enum):
    ok = "ok"
    not_found = "not_found"
    failed = "failed"


class DeploymentLookup(BaseModel):
    identifier: str
    status: LookupStatus
    deployment: Optional[Deployment] = None
    error: Optional[str] = None


class ProjectLookup(BaseModel):
    identifier: str
    status: LookupStatus
    project: Optional[Project] = None
    error: Optional[str] = None
