import textwrap
from dataclasses import dataclass

from app.prompt.models import BranchInfo, PromptData, RuleItem
from app.prompt.slugs import BRANCH_PREFIX, fallback_tag, format_label, slugify

_INDENT = "  "

# Element names the parser looks up anywhere in the text; a branch key must not reuse them.
_VOCABULARY = frozenset(
    {
        "assistant",
        "role",
        "purpose",
        "rules",
        "core_rules",
        "behavior_rules",
        "rule",
        "negative_prompt",
        "tools",
        "contacts",
        "name",
        "phone",
        "email",
        "website",
        "company",
        "about",
        "services",
        "service",
        "locations",
        "location",
        "location_name",
        "location_address",
        "location_phone",
        "location_mail",
        "location_link",
        "location_hours",
        "examples",
        "example",
        "question",
        "answer",
    }
)


@dataclass
class _KeptBranch:
    branch: BranchInfo
    label: str
    key: str


def _pad(depth: int) -> str:
    return _INDENT * depth


def _non_empty(values: list[str]) -> list[str]:
    return [value.strip() for value in values if value.strip()]


def _inline(lines: list[str], depth: int, tag: str, value: str) -> None:
    value = value.strip()
    if value:
        lines.append(f"{_pad(depth)}<{tag}>{value}</{tag}>")


def _text_block(lines: list[str], depth: int, tag: str, value: str) -> None:
    body = textwrap.dedent(value).strip()
    if not body:
        return
    lines.append(f"{_pad(depth)}<{tag}>")
    lines.append(textwrap.indent(body, _pad(depth + 1)))
    lines.append(f"{_pad(depth)}</{tag}>")


def _rules(lines: list[str], tag: str, rules: list[RuleItem]) -> None:
    texts = _non_empty([rule.texto for rule in rules])
    if not texts:
        return
    lines.append(f"{_pad(1)}<{tag}>")
    lines += [f"{_pad(2)}<rule>{text}</rule>" for text in texts]
    lines.append(f"{_pad(1)}</{tag}>")


def _kept_branches(branches: list[BranchInfo]) -> list[_KeptBranch]:
    """Non-empty branches with the label and key the parser will derive back."""
    kept: list[_KeptBranch] = []
    for branch in branches:
        if branch.is_empty():
            continue
        fallback = fallback_tag(len(kept))
        label = branch.etiqueta.strip() or format_label(
            branch.tag.strip() or branch.direccion.strip() or fallback
        )
        key = slugify(label, fallback)
        if key in _VOCABULARY:
            # the parser strips the prefix again when matching contacts to locations
            key = f"{BRANCH_PREFIX}{key}"
        kept.append(_KeptBranch(branch=branch, label=label, key=key))
    return kept


def _has_contact_details(branch: BranchInfo) -> bool:
    return bool(branch.responsable.strip() or branch.sitio.strip())


def _contacts(lines: list[str], kept: list[_KeptBranch]) -> None:
    entries = [item for item in kept if _has_contact_details(item.branch)]
    if not entries:
        return
    lines.append(f"{_pad(1)}<contacts>")
    for item in entries:
        branch = item.branch
        lines.append(f"{_pad(2)}<{item.key}>")
        _inline(lines, 3, "name", branch.responsable)
        _inline(lines, 3, "website", branch.sitio)
        lines.append(f"{_pad(2)}</{item.key}>")
    lines.append(f"{_pad(1)}</contacts>")


def _location(lines: list[str], item: _KeptBranch) -> None:
    branch = item.branch
    lines.append(f"{_pad(3)}<location>")
    _inline(lines, 4, "location_name", item.label)
    _inline(lines, 4, "location_address", branch.direccion)
    for phone in _non_empty(branch.telefonos):
        _inline(lines, 4, "location_phone", phone)
    for email in _non_empty(branch.emails):
        _inline(lines, 4, "location_mail", email)
    _inline(lines, 4, "location_link", branch.enlace)
    _inline(lines, 4, "location_hours", branch.horario)
    lines.append(f"{_pad(3)}</location>")


def _company(lines: list[str], data: PromptData, kept: list[_KeptBranch]) -> None:
    about = data.company.acerca.strip()
    services = _non_empty(data.company.servicios)
    if not (about or services or kept):
        return
    lines.append(f"{_pad(1)}<company>")
    _inline(lines, 2, "about", about)
    if services:
        lines.append(f"{_pad(2)}<services>")
        lines += [f"{_pad(3)}<service>{service}</service>" for service in services]
        lines.append(f"{_pad(2)}</services>")
    if kept:
        lines.append(f"{_pad(2)}<locations>")
        for item in kept:
            _location(lines, item)
        lines.append(f"{_pad(2)}</locations>")
    lines.append(f"{_pad(1)}</company>")


def _examples(lines: list[str], data: PromptData) -> None:
    examples = [example for example in data.examples if not example.is_empty()]
    if not examples:
        return
    lines.append(f"{_pad(1)}<examples>")
    for example in examples:
        lines.append(f"{_pad(2)}<example>")
        _inline(lines, 3, "question", example.pregunta)
        _inline(lines, 3, "answer", example.respuesta)
        lines.append(f"{_pad(2)}</example>")
    lines.append(f"{_pad(1)}</examples>")


def serialize_prompt(data: PromptData) -> str:
    """Render ``data`` as the canonical tagged system prompt.

    Sections are emitted in a fixed order and empty sections, rules, branches
    and examples are left out. Item ids are never written.
    """
    kept = _kept_branches(data.branches)
    lines: list[str] = ["<assistant>"]
    _inline(lines, 1, "role", data.role)
    _inline(lines, 1, "purpose", data.purpose)
    _rules(lines, "core_rules", data.core_rules)
    _rules(lines, "behavior_rules", data.behavior_rules)
    _text_block(lines, 1, "negative_prompt", data.negative_prompt)
    _text_block(lines, 1, "tools", data.tools)
    _contacts(lines, kept)
    _company(lines, data, kept)
    _examples(lines, data)
    lines.append("</assistant>")
    return "\n".join(lines)
