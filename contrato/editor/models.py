"""Contract editor domain models.

Pydantic models shared by the renderers, the edit surface and the API layer.
They live here to avoid circular imports with the API schemas.
"""

from pydantic import BaseModel, ConfigDict, Field


class Capsule(BaseModel):
    """An optional clause that can be toggled into the contract."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(description="Capsule identifier used for selection")
    title: str = Field(default="", description="Human-readable clause title")
    price: float = Field(default=0, description="Price added when the capsule is selected")
    legal_text: str | None = Field(
        default=None, description="Clause text with {{ variable }} placeholders"
    )
    slug: str = Field(default="", description="Normalized identifier used by clause numbering")
    description: str | None = Field(default=None, description="Short description for the catalog")
    display_order: int = Field(default=0, description="Position in the capsule catalog")


class ClauseNumbering(BaseModel):
    """A numbered clause marker (``NUMERACIÓN: <title>``) in the template."""

    model_config = ConfigDict(frozen=True)

    order: int = Field(description="Position of the clause in the document")
    title: str = Field(description="Clause title that follows the marker")
    is_in_capsule: bool = Field(default=False, description="Whether the clause lives in a capsule")
    capsule_slug: str | None = Field(default=None, description="Slug of the owning capsule")


class SignerConfig(BaseModel):
    """A signing party and the variables holding its identity."""

    model_config = ConfigDict(frozen=True)

    role: str
    display_name: str
    signature_order: int = 0
    name_variable: str
    rut_variable: str
    email_variable: str


class TemplatePayload(BaseModel):
    """A contract template as served by the contracts backend."""

    model_config = ConfigDict(extra="ignore")

    slug: str = Field(default="", description="Template slug")
    title: str = Field(default="", description="Template title")
    template_content: str = Field(default="", description="Template text with placeholders")
    base_price: float = Field(default=0, description="Price without optional clauses")
    capsules: list[Capsule] = Field(default_factory=list, description="Optional clause catalog")
    clause_numbering: list[ClauseNumbering] = Field(default_factory=list)
    signers_config: list[SignerConfig] = Field(default_factory=list)
