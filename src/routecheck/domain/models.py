from __future__ import annotations

from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

HttpMethod = Literal["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "HEAD"]


class ParamKind(str, Enum):
    PATH = "path"
    QUERY = "query"
    BODY = "body"
    MULTIPART = "multipart"


class ParamSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    kind: ParamKind
    required: bool = True


class EndpointDefinition(BaseModel):
    """
    One declared endpoint, as supplied by the contract front end.

    `path` is kept as raw template text; it is normalized by the engine so
    malformed templates become diagnostics instead of construction failures.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    path: str
    method: HttpMethod
    content_type: Optional[str] = None
    params: tuple[ParamSpec, ...] = ()
    precedence: tuple[str, ...] = ()  # ids this endpoint takes priority over
    location: str = ""  # opaque, passed through to diagnostics

    @field_validator("method", mode="before")
    @classmethod
    def _upper_method(cls, v):
        return v.upper().strip() if isinstance(v, str) else v

    @field_validator("id")
    @classmethod
    def _non_empty_id(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("endpoint id must not be empty")
        return v

    @model_validator(mode="after")
    def _check_params(self) -> "EndpointDefinition":
        seen: set[str] = set()
        for p in self.params:
            if p.name in seen:
                raise ValueError(f"duplicate parameter name: {p.name}")
            seen.add(p.name)
        if self.id in self.precedence:
            raise ValueError("endpoint cannot take precedence over itself")
        return self

    def has_body(self) -> bool:
        return any(p.kind in (ParamKind.BODY, ParamKind.MULTIPART) for p in self.params)

    def path_param_names(self) -> list[str]:
        return [p.name for p in self.params if p.kind == ParamKind.PATH]


class Contract(BaseModel):
    """A set of endpoints compiled together, with endpoint-level defaults."""

    name: str = "contract"
    content_type: Optional[str] = None  # default for endpoints carrying a body
    endpoints: list[EndpointDefinition] = Field(default_factory=list)

    def resolved_endpoints(self) -> list[EndpointDefinition]:
        if not self.content_type:
            return list(self.endpoints)
        out: list[EndpointDefinition] = []
        for ep in self.endpoints:
            if ep.content_type is None and ep.has_body():
                ep = ep.model_copy(update={"content_type": self.content_type})
            out.append(ep)
        return out
