"""Contract editor API routes.

Handles stateless rendering, editor sessions with inline edit events,
capsule toggling, draft saving and field validation.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import ValidationError

from contrato.api.deps import SessionRegistry, get_factory, get_registry, get_session
from contrato.api.schemas import (
    CreateSessionRequest,
    EditorEventRequest,
    EditorEventResponse,
    FormatFieldRequest,
    FormatFieldResponse,
    NodeResponse,
    RenderRequest,
    RenderResponse,
    SaveDraftResponse,
    SessionStateResponse,
    ValidateRequest,
    ValidateResponse,
)
from contrato.core.factory import ComponentFactory
from contrato.editor.aggregator import completion_percentage, format_price, total_price
from contrato.editor.models import TemplatePayload
from contrato.editor.placeholders import extract_variables
from contrato.editor.session import EditorSession
from contrato.editor.surface import UnknownNodeError
from contrato.editor.validators import format_field_value, validation_errors
from contrato.interfaces.contract_store import DraftSaveError, TemplateFetchError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/editor", tags=["editor"])


# =============================================================================
# Helper Functions
# =============================================================================


def _session_state(session: EditorSession) -> SessionStateResponse:
    state = session.state()
    state["can_continue"] = not state["missing_fields"] and not state["validation_errors"]
    return SessionStateResponse(**state)


def _format_total(factory: ComponentFactory, amount: float) -> str:
    settings = factory.settings
    return format_price(amount, symbol=settings.currency_symbol, thousands_separator=settings.thousands_separator)


# =============================================================================
# Endpoints
# =============================================================================


@router.post("/render", response_model=RenderResponse, status_code=status.HTTP_200_OK)
async def render_document(
    request: RenderRequest,
    factory: ComponentFactory = Depends(get_factory),
) -> RenderResponse:
    """Render a template once, with its price and completion.

    Args:
        request: Template, variables, FormData and capsule selection.
        factory: Component factory.

    Returns:
        RenderResponse with the merged HTML and derived values.
    """
    variables = (
        request.variables
        if request.variables is not None
        else extract_variables(request.template, request.capsules, request.selected_capsule_ids)
    )
    renderer = factory.get_renderer(request.renderer)
    result = renderer.render(
        request.template,
        variables,
        request.form_data,
        active_field=request.active_field,
        selected_capsule_ids=request.selected_capsule_ids,
        capsules=request.capsules,
        clause_numbering=request.clause_numbering,
        signers=request.signers_config,
    )
    price = total_price(request.base_price, request.capsules, request.selected_capsule_ids)

    return RenderResponse(
        html=result.html,
        has_content=result.has_content,
        variables=variables,
        completion_percentage=completion_percentage(variables, request.form_data),
        total_price=price,
        formatted_total=_format_total(factory, price),
    )


@router.post(
    "/sessions",
    response_model=SessionStateResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_session(
    request: CreateSessionRequest,
    factory: ComponentFactory = Depends(get_factory),
    registry: SessionRegistry = Depends(get_registry),
) -> SessionStateResponse:
    """Open an editor session over an inline or fetched template.

    Raises:
        HTTPException: 404 if the template cannot be fetched, 502 if the
            fetched payload is malformed or the draft cannot be loaded.
    """
    store = factory.get_contract_store()

    if request.template is not None:
        template = request.template
    else:
        try:
            payload = await store.fetch_template(request.slug)
            template = TemplatePayload.model_validate(payload)
        except TemplateFetchError as e:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
        except ValidationError as e:
            logger.error(f"Malformed template payload for '{request.slug}': {e}")
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail=f"Template '{request.slug}' has an invalid format",
            ) from e

    form_data = dict(request.form_data)
    if request.resume_draft:
        try:
            draft = await store.load_draft(request.contract_id)
        except DraftSaveError as e:
            raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e)) from e
        form_data = {**(draft or {}), **form_data}

    session = EditorSession(
        template,
        contract_id=request.contract_id,
        form_data=form_data,
        selected_capsule_ids=request.selected_capsule_ids,
        store=store,
        autosave_delay=factory.settings.autosave_delay_seconds,
        renderer=factory.get_inline_renderer(),
    )
    registry.add(session)
    logger.info(f"Created editor session {session.session_id} ({len(registry)} open)")

    return _session_state(session)


@router.get("/sessions/{session_id}", response_model=SessionStateResponse)
async def get_session_state(
    session: EditorSession = Depends(get_session),
) -> SessionStateResponse:
    """Return the full state of an editor session."""
    return _session_state(session)


@router.delete("/sessions/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def close_session(
    session_id: str,
    registry: SessionRegistry = Depends(get_registry),
) -> None:
    """Close an editor session, saving any uncommitted edit first."""
    session = registry.remove(session_id)
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Editor session '{session_id}' not found",
        )
    try:
        await session.save()
    except DraftSaveError as e:
        logger.error(f"Final save failed for session {session_id}: {e}")
    logger.info(f"Closed editor session {session_id}")


@router.post("/sessions/{session_id}/events", response_model=EditorEventResponse)
async def dispatch_event(
    event: EditorEventRequest,
    session: EditorSession = Depends(get_session),
) -> EditorEventResponse:
    """Apply a focus, input or blur event to a placeholder node.

    Only blur commits the node's text into FormData.
    """
    before = dict(session.form_data)
    try:
        match event.type:
            case "focus":
                node = session.focus(event.node_id)
            case "input":
                node = session.input(event.node_id, event.text)
            case "blur":
                node = session.blur(event.node_id)
    except UnknownNodeError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Node '{event.node_id}' not found in session '{session.session_id}'",
        ) from e

    return EditorEventResponse(
        node=NodeResponse(**node.to_dict()),
        committed=session.form_data != before,
        form_data=session.form_data,
        completion_percentage=session.completion_percentage,
    )


@router.post(
    "/sessions/{session_id}/capsules/{capsule_id}/toggle",
    response_model=SessionStateResponse,
)
async def toggle_capsule(
    capsule_id: int,
    session: EditorSession = Depends(get_session),
) -> SessionStateResponse:
    """Select or deselect an optional clause."""
    if capsule_id not in {capsule.id for capsule in session.template.capsules}:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Capsule {capsule_id} is not offered by this template",
        )
    session.toggle_capsule(capsule_id)
    return _session_state(session)


@router.post("/sessions/{session_id}/save", response_model=SaveDraftResponse)
async def save_draft(
    session: EditorSession = Depends(get_session),
) -> SaveDraftResponse:
    """Save the session's draft immediately.

    Raises:
        HTTPException: 502 if the contracts backend rejects the draft.
    """
    try:
        result = await session.save()
    except DraftSaveError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e)) from e

    if result is None:
        return SaveDraftResponse(saved=False, contract_id=session.contract_id)
    return SaveDraftResponse(
        saved=True,
        contract_id=result.contract_id,
        field_count=result.field_count,
        saved_at=result.saved_at,
    )


@router.post("/validate", response_model=ValidateResponse)
async def validate_fields(request: ValidateRequest) -> ValidateResponse:
    """Validate FormData values by the kind of each variable."""
    variables = request.variables if request.variables is not None else list(request.form_data)
    errors = validation_errors(variables, request.form_data, request.check_rut_digit)
    return ValidateResponse(valid=not errors, errors=errors)


@router.post("/format", response_model=FormatFieldResponse)
async def format_field(request: FormatFieldRequest) -> FormatFieldResponse:
    """Normalize RUT and phone input as the user types."""
    return FormatFieldResponse(
        variable=request.variable,
        value=format_field_value(request.variable, request.value),
    )
