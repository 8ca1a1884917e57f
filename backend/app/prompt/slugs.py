import re
import unicodedata

from app.prompt.models import BranchInfo

_COMBINING_MARKS = re.compile("[\u0300-\u036f]")
_NON_ALNUM = re.compile(r"[^a-z0-9]+")
_SEPARATORS = re.compile(r"[_-]+")
BRANCH_PREFIX = "sucursal_"


def _normalize(value: str | None) -> str:
    if not value:
        return ""
    decomposed = unicodedata.normalize("NFD", value.lower())
    stripped = _COMBINING_MARKS.sub("", decomposed)
    return _NON_ALNUM.sub("_", stripped).strip("_")


def slugify(value: str | None, fallback: str) -> str:
    """Lowercase, diacritic-free, underscore-separated form of ``value``."""
    return _normalize(value) or fallback


def format_label(value: str | None) -> str:
    """Turn a slug back into a display label: ``"zona_norte"`` -> ``"Zona norte"``."""
    if not value:
        return ""
    with_spaces = _SEPARATORS.sub(" ", value)
    return with_spaces[:1].upper() + with_spaces[1:]


def fallback_tag(index: int) -> str:
    """Positional tag for the ``index``-th (0-based) branch of a section."""
    return f"{BRANCH_PREFIX}{index + 1}"


def _add_key_variants(keys: set[str], value: str | None) -> None:
    key = _normalize(value)
    if not key:
        return
    keys.add(key)
    if key.startswith(BRANCH_PREFIX):
        keys.add(key[len(BRANCH_PREFIX):])


def candidate_keys(*values: str | None) -> set[str]:
    keys: set[str] = set()
    for value in values:
        _add_key_variants(keys, value)
    return keys


def branch_keys(branch: BranchInfo) -> set[str]:
    return candidate_keys(branch.tag, branch.etiqueta, branch.direccion)


def find_branch_index(branches: list[BranchInfo], candidates: set[str]) -> int:
    if not candidates:
        return -1
    for index, branch in enumerate(branches):
        if branch_keys(branch) & candidates:
            return index
    return -1
