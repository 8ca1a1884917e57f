import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException

from app import crud
from app.api.deps import SessionDep, require_capability
from app.core.permissions import Capability
from app.models import BotSettingsPublic, BotSettingsUpdate, PromptPreview, User
from app.prompt import PromptData, parse_prompt, serialize_prompt

router = APIRouter()
logger = logging.getLogger(__name__)

PromptReader = Annotated[User, Depends(require_capability(Capability.VIEW_PROMPT))]
PromptEditor = Annotated[User, Depends(require_capability(Capability.EDIT_PROMPT))]


@router.get("/", response_model=BotSettingsPublic)
def read_bot_settings(session: SessionDep, current_user: PromptReader) -> Any:
    settings = crud.get_bot_settings(session=session)
    if not settings:
        raise HTTPException(status_code=404, detail="Bot settings not found")
    return settings


@router.patch("/", response_model=BotSettingsPublic)
def update_bot_settings(
    *, session: SessionDep, current_user: PromptEditor, settings_in: BotSettingsUpdate
) -> Any:
    """
    Replace the system prompt text as-is.
    """
    settings = crud.update_bot_settings(session=session, prompt_system=settings_in.prompt_system)
    logger.info(
        "System prompt updated by %s (%s chars)", current_user.email, len(settings.prompt_system)
    )
    return settings


@router.get("/prompt", response_model=PromptData)
def read_structured_prompt(session: SessionDep, current_user: PromptReader) -> Any:
    """
    The stored system prompt parsed into editable sections.
    """
    settings = crud.get_bot_settings(session=session)
    return parse_prompt(settings.prompt_system if settings else "")


@router.put("/prompt", response_model=BotSettingsPublic)
def update_structured_prompt(
    *, session: SessionDep, current_user: PromptEditor, prompt_in: PromptData
) -> Any:
    """
    Serialize the edited sections and store them as the new system prompt.
    """
    prompt_system = serialize_prompt(prompt_in)
    settings = crud.update_bot_settings(session=session, prompt_system=prompt_system)
    logger.info(
        "Structured system prompt saved by %s (%s chars)", current_user.email, len(prompt_system)
    )
    return settings


@router.post("/prompt/preview", response_model=PromptPreview)
def preview_structured_prompt(current_user: PromptReader, prompt_in: PromptData) -> Any:
    return PromptPreview(prompt_system=serialize_prompt(prompt_in))
