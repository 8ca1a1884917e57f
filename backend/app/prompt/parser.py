import logging
import re
import textwrap

from app.prompt.models import (
    BranchInfo,
    ExampleItem,
    PromptData,
    RuleItem,
    create_empty_prompt_data,
)
from app.prompt.scanner import (
    all_blocks,
    all_values,
    child_elements,
    first_block,
    first_value,
    strip_block,
)
from app.prompt.slugs import candidate_keys, fallback_tag, find_branch_index, format_label, slugify

logger = logging.getLogger(__name__)

_LIST_SEPARATORS = re.compile(r"[,;|]")
_LOCATION_FIELDS = (
    "location_name",
    "location_address",
    "location_phone",
    "location_mail",
    "location_link",
    "location_hours",
)
_SCALAR_BRANCH_FIELDS = ("tag", "etiqueta", "responsable", "sitio", "direccion", "horario", "enlace")
_LIST_BRANCH_FIELDS = ("telefonos", "emails")


def _split_list(value: str) -> list[str]:
    return [item.strip() for item in _LIST_SEPARATORS.split(value) if item.strip()]


def _free_text(text: str, tag: str) -> str:
    block = first_block(text, tag)
    if block is None:
        return ""
    return textwrap.dedent(block).strip()


def parse_rule_section(content: str | None) -> list[RuleItem]:
    """Rules from ``<rule>`` items, or one rule per non-empty line when there are none."""
    if not content:
        return []
    blocks = all_blocks(content, "rule")
    if blocks:
        texts = [block.strip() for block in blocks]
    else:
        texts = [line.strip() for line in re.split(r"\n+", content)]
    return [RuleItem(texto=texto) for texto in texts if texto]


def merge_branch(branches: list[BranchInfo], incoming: BranchInfo, candidates: set[str]) -> BranchInfo:
    """Fold ``incoming`` into the first branch matching ``candidates`` or append it.

    Scalars already set on the existing branch win; list fields are replaced
    only when ``incoming`` brings a non-empty list.
    """
    index = find_branch_index(branches, candidates)
    if index < 0:
        branches.append(incoming)
        return incoming

    existing = branches[index]
    for field in _SCALAR_BRANCH_FIELDS:
        if not getattr(existing, field).strip() and getattr(incoming, field).strip():
            setattr(existing, field, getattr(incoming, field))
    for field in _LIST_BRANCH_FIELDS:
        values = getattr(incoming, field)
        if values:
            setattr(existing, field, list(values))
    return existing


def _parse_location(content: str, index: int) -> tuple[BranchInfo, set[str]] | None:
    fallback = fallback_tag(index)
    if any(f"<{field}>" in content for field in _LOCATION_FIELDS):
        name = first_value(content, "location_name")
        address = first_value(content, "location_address")
        base = name or address or fallback
        tag = slugify(base, fallback)
        branch = BranchInfo(
            tag=tag,
            etiqueta=name or format_label(base),
            direccion=address,
            telefonos=all_values(content, "location_phone"),
            emails=all_values(content, "location_mail"),
            enlace=first_value(content, "location_link"),
            horario=first_value(content, "location_hours"),
        )
        return branch, candidate_keys(name, address, tag)

    text = content.strip()
    if not text:
        return None
    tag = slugify(text, fallback)
    branch = BranchInfo(tag=tag, etiqueta=format_label(text), direccion=text)
    return branch, candidate_keys(text, tag)


def parse_locations(branches: list[BranchInfo], content: str) -> None:
    for index, entry in enumerate(all_blocks(content, "location")):
        parsed = _parse_location(entry, index)
        if parsed is None:
            continue
        branch, candidates = parsed
        merge_branch(branches, branch, candidates)


def parse_contacts(branches: list[BranchInfo], content: str) -> None:
    for index, (element, inner) in enumerate(child_elements(content)):
        tag = slugify(element, fallback_tag(index))
        name = first_value(inner, "name")
        branch = BranchInfo(
            tag=tag,
            etiqueta=format_label(tag),
            responsable=name,
            telefonos=_split_list(first_value(inner, "phone")),
            emails=_split_list(first_value(inner, "email")),
            sitio=first_value(inner, "website"),
        )
        merge_branch(branches, branch, candidate_keys(element, name, tag))


def parse_examples(content: str) -> list[ExampleItem]:
    examples: list[ExampleItem] = []
    for entry in all_blocks(content, "example"):
        example = ExampleItem(
            pregunta=first_value(entry, "question"),
            respuesta=first_value(entry, "answer"),
        )
        if not example.is_empty():
            examples.append(example)
    return examples


def _parse_into(data: PromptData, text: str) -> None:
    data.role = first_value(text, "role")
    data.purpose = first_value(text, "purpose")

    core_rules = first_block(text, "core_rules")
    if core_rules is None:
        core_rules = first_block(text, "rules")
    data.core_rules = parse_rule_section(core_rules)
    data.behavior_rules = parse_rule_section(first_block(text, "behavior_rules"))

    data.negative_prompt = _free_text(text, "negative_prompt")
    data.tools = _free_text(text, "tools")

    company = first_block(text, "company")
    if company is not None:
        data.company.acerca = first_value(company, "about")
        services = first_block(company, "services")
        if services is not None:
            data.company.servicios = all_values(services, "service")
        locations = first_block(company, "locations")
        if locations is not None:
            parse_locations(data.branches, locations)

    contacts = first_block(text, "contacts")
    if contacts is not None:
        parse_contacts(data.branches, contacts)

    top_level_locations = first_block(strip_block(text, "company"), "locations")
    if top_level_locations is not None:
        parse_locations(data.branches, top_level_locations)

    examples = first_block(text, "examples")
    if examples is not None:
        data.examples = parse_examples(examples)


def parse_prompt(text: str | None) -> PromptData:
    """Build a :class:`PromptData` from the tagged system prompt text.

    Never raises: missing or malformed sections are left empty, and an
    unexpected failure is logged and the fields parsed so far are returned.
    """
    data = create_empty_prompt_data()
    if text is None:
        return data
    if not isinstance(text, str):
        text = str(text)

    try:
        _parse_into(data, text)
    except Exception:
        logger.exception("Failed to parse system prompt, returning partial result")
    return data
