"""Static model capability flags keyed by model slug prefix."""

from __future__ import annotations

from dataclasses import dataclass, replace


@dataclass(frozen=True)
class ModelFamily:
    slug: str
    family: str
    needs_special_apply_patch_instructions: bool = False
    supports_reasoning_summaries: bool = False
    uses_local_shell_tool: bool = False


# Order matters: the first matching prefix wins.
_FAMILIES: tuple[ModelFamily, ...] = (
    ModelFamily(slug="o3", family="o3", supports_reasoning_summaries=True),
    ModelFamily(slug="o4-mini", family="o4-mini", supports_reasoning_summaries=True),
    ModelFamily(
        slug="codex-mini-latest",
        family="codex-mini-latest",
        supports_reasoning_summaries=True,
        uses_local_shell_tool=True,
    ),
    ModelFamily(slug="codex-", family="codex-", supports_reasoning_summaries=True),
    ModelFamily(slug="gpt-4.1", family="gpt-4.1", needs_special_apply_patch_instructions=True),
    ModelFamily(slug="gpt-oss", family="gpt-oss"),
    ModelFamily(slug="gpt-4o", family="gpt-4o", needs_special_apply_patch_instructions=True),
    ModelFamily(slug="gpt-3.5", family="gpt-3.5", needs_special_apply_patch_instructions=True),
    ModelFamily(slug="gpt-5", family="gpt-5", supports_reasoning_summaries=True),
)


def _normalize_slug(slug: str) -> str:
    return slug.strip().lower()


def find_family_for_model(slug: str) -> ModelFamily | None:
    normalized = _normalize_slug(slug)
    for family in _FAMILIES:
        if normalized.startswith(family.slug):
            return replace(family, slug=normalized)
    return None


def derive_default_family(slug: str) -> ModelFamily:
    """Family for slugs the catalog does not know: every optional capability off."""
    normalized = _normalize_slug(slug)
    return ModelFamily(slug=normalized, family=normalized)


def family_for_model(slug: str) -> ModelFamily:
    return find_family_for_model(slug) or derive_default_family(slug)
