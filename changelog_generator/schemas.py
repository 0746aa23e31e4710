"""
Request shapes accepted at the boundary.

Requests are parsed explicitly with parse_generation_request() (or
parse_body() for the simpler routes). The first violation is raised as a
ValidationError carrying the dotted wire path of the offending field.
"""

from typing import Any, Dict, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from .errors import ValidationError
from .models import OutputFormat, SourceType, Template

ModelT = TypeVar("ModelT", bound=BaseModel)


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class SourceConfig(_WireModel):
    """GitHub repository and range for source-control requests."""
    owner: Optional[str] = None
    repo: Optional[str] = None
    token: Optional[str] = None
    from_tag: Optional[str] = Field(default=None, alias="fromTag")
    to_tag: Optional[str] = Field(default=None, alias="toTag")


class _GenerationRequestBase(_WireModel):
    format: OutputFormat
    template: Template
    instructions: Optional[str] = None


class ManualRequest(_GenerationRequestBase):
    """Changelog from text typed or pasted by the user."""
    source_type: SourceType = Field(default=SourceType.MANUAL, alias="sourceType")
    content: Optional[str] = None
    source_config: Optional[SourceConfig] = Field(default=None, alias="githubConfig")


class GitHubRequest(_GenerationRequestBase):
    """Changelog from a range of commits of a GitHub repository."""
    source_type: SourceType = Field(default=SourceType.GITHUB, alias="sourceType")
    content: Optional[str] = None
    source_config: Optional[SourceConfig] = Field(default=None, alias="githubConfig")


GenerationRequest = Union[ManualRequest, GitHubRequest]

_REQUEST_MODELS: Dict[SourceType, Type[_GenerationRequestBase]] = {
    SourceType.MANUAL: ManualRequest,
    SourceType.GITHUB: GitHubRequest,
}


class TagsRequest(_WireModel):
    owner: str = Field(min_length=1)
    repo: str = Field(min_length=1)
    token: Optional[str] = None


class SavedSettings(_WireModel):
    format: OutputFormat
    template: Template
    repo: Optional[str] = None


class SaveChangelogRequest(_WireModel):
    """Body of a save request; the owner comes from the caller identity."""
    title: str = "Untitled Changelog"
    input_content: Optional[str] = Field(default=None, alias="inputContent")
    output_content: Optional[str] = Field(default=None, alias="outputContent")
    source_type: SourceType = Field(default=SourceType.MANUAL, alias="sourceType")
    settings: Optional[SavedSettings] = None


def _first_violation(exc: PydanticValidationError) -> ValidationError:
    error = exc.errors()[0]
    field = ".".join(str(part) for part in error["loc"]) or None
    return ValidationError(error["msg"], field=field)


def parse_body(model: Type[ModelT], payload: Any) -> ModelT:
    """
    Validate a request body against a model.

    Raises:
        ValidationError: On the first violation, with its field path
    """
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")
    try:
        return model.model_validate(payload)
    except PydanticValidationError as e:
        raise _first_violation(e) from e


def parse_generation_request(payload: Any) -> GenerationRequest:
    """
    Parse a generation request, dispatching on its sourceType tag.

    Only the field of the selected mode may carry material: content on a
    GitHub request, or githubConfig on a manual request, is rejected.

    Raises:
        ValidationError: On the first violation, with its field path
    """
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")

    raw_type = payload.get("sourceType", payload.get("source_type"))
    try:
        source_type = SourceType(raw_type)
    except ValueError:
        allowed = ", ".join(repr(s.value) for s in SourceType)
        raise ValidationError(f"sourceType must be one of {allowed}", field="sourceType") from None

    request = parse_body(_REQUEST_MODELS[source_type], payload)

    if source_type is SourceType.MANUAL and request.source_config is not None:
        raise ValidationError(
            "githubConfig is not allowed when sourceType is 'manual'", field="githubConfig"
        )
    if source_type is SourceType.GITHUB and request.content and request.content.strip():
        raise ValidationError(
            "content is not allowed when sourceType is 'github'", field="content"
        )
    return request
