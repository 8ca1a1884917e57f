"""Conversion between the tagged chatbot system prompt and its editable form."""

from app.prompt.models import (
    BranchInfo,
    CompanyInfo,
    ExampleItem,
    PromptData,
    RuleItem,
    create_empty_prompt_data,
    new_item_id,
)
from app.prompt.parser import parse_prompt
from app.prompt.serializer import serialize_prompt
from app.prompt.slugs import format_label, slugify

__all__ = [
    "BranchInfo",
    "CompanyInfo",
    "ExampleItem",
    "PromptData",
    "RuleItem",
    "create_empty_prompt_data",
    "format_label",
    "new_item_id",
    "parse_prompt",
    "serialize_prompt",
    "slugify",
]
