"""API request and response schemas.

Pydantic v2 models for API serialization/deserialization.
"""

from typing import Literal

from pydantic import BaseModel, Field, model_validator

# Re-export editor models used in request bodies
from contrato.editor.models import Capsule, ClauseNumbering, SignerConfig, TemplatePayload


# =============================================================================
# Common Schemas
# =============================================================================


class ErrorResponse(BaseModel):
    """Standard error response."""

    detail: str = Field(description="Error message")
    error_code: str | None = Field(default=None, description="Machine-readable error code")


# =============================================================================
# Stateless Render Schemas
# =============================================================================


class RenderRequest(BaseModel):
    """Request for a one-off render of a template."""

    template: str = Field(default="", description="Template text with {{ variable }} tokens")
    variables: list[str] | None = Field(
        default=None,
        description="Variables to substitute, in order. Extracted from the template if omitted.",
    )
    form_data: dict[str, str] = Field(default_factory=dict)
    active_field: str | None = None
    selected_capsule_ids: list[int] = Field(default_factory=list)
    capsules: list[Capsule] = Field(default_factory=list)
    base_price: float = Field(default=0, ge=0)
    clause_numbering: list[ClauseNumbering] = Field(default_factory=list)
    signers_config: list[SignerConfig] = Field(default_factory=list)
    renderer: Literal["inline", "preview"] | None = Field(
        default=None, description="Renderer strategy; defaults to the configured one"
    )


class RenderResponse(BaseModel):
    """Rendered document with its derived values."""

    html: str
    has_content: bool
    variables: list[str]
    completion_percentage: int
    total_price: float
    formatted_total: str


# =============================================================================
# Session Schemas
# =============================================================================


class CreateSessionRequest(BaseModel):
    """Request to open an editor session.

    Either ``slug`` (fetched from the contracts backend) or an inline
    ``template`` must be given.
    """

    slug: str | None = Field(default=None, description="Template slug to fetch")
    template: TemplatePayload | None = Field(default=None, description="Inline template payload")
    contract_id: str | None = Field(default=None, description="Contract id for draft saving")
    form_data: dict[str, str] = Field(default_factory=dict)
    selected_capsule_ids: list[int] = Field(default_factory=list)
    resume_draft: bool = Field(
        default=False, description="Load the saved draft of contract_id as initial FormData"
    )

    @model_validator(mode="after")
    def require_template_source(self) -> "CreateSessionRequest":
        """Exactly one of slug and template is required."""
        if (self.slug is None) == (self.template is None):
            raise ValueError("Provide exactly one of 'slug' or 'template'")
        if self.resume_draft and not self.contract_id:
            raise ValueError("'resume_draft' requires 'contract_id'")
        return self


class NodeResponse(BaseModel):
    """One placeholder node of the editable document."""

    node_id: str
    variable: str
    text: str
    state: Literal["idle_empty", "idle_filled", "editing"]
    classes: list[str]


class SessionStateResponse(BaseModel):
    """Full state of an editor session."""

    session_id: str
    contract_id: str | None
    html: str
    has_content: bool
    read_only: bool
    nodes: list[NodeResponse]
    active_field: str | None
    variables: list[str]
    form_data: dict[str, str]
    selected_capsule_ids: list[int]
    total_price: float
    formatted_total: str
    completion_percentage: int
    missing_fields: list[str]
    validation_errors: dict[str, str]
    can_continue: bool = False


class EditorEventRequest(BaseModel):
    """A focus, input or blur event on a placeholder node."""

    type: Literal["focus", "input", "blur"]
    node_id: str = Field(min_length=1)
    text: str | None = Field(default=None, description="Current text, required for 'input'")

    @model_validator(mode="after")
    def require_text_for_input(self) -> "EditorEventRequest":
        """Input events carry the node's text."""
        if self.type == "input" and self.text is None:
            raise ValueError("'text' is required for input events")
        return self


class EditorEventResponse(BaseModel):
    """Result of an editor event."""

    node: NodeResponse
    committed: bool = Field(description="Whether FormData was updated by this event")
    form_data: dict[str, str]
    completion_percentage: int


class SaveDraftResponse(BaseModel):
    """Result of an explicit draft save."""

    saved: bool
    contract_id: str | None = None
    field_count: int = 0
    saved_at: str | None = None


# =============================================================================
# Validation Schemas
# =============================================================================


class ValidateRequest(BaseModel):
    """Request to validate FormData field by field."""

    variables: list[str] | None = Field(
        default=None, description="Variables to check; defaults to every key in form_data"
    )
    form_data: dict[str, str] = Field(default_factory=dict)
    check_rut_digit: bool = Field(
        default=False, description="Also verify the RUT modulo-11 check digit"
    )


class ValidateResponse(BaseModel):
    """Per-field validation messages."""

    valid: bool
    errors: dict[str, str]


class FormatFieldRequest(BaseModel):
    """As-you-type input for one field."""

    variable: str = Field(min_length=1)
    value: str = ""


class FormatFieldResponse(BaseModel):
    """Normalized field input."""

    variable: str
    value: str
