"""Catalog listing filters."""

from collections.abc import Iterable

from pydantic import BaseModel, Field

from provider_registry.models import CatalogListing, ModelEntry, ModelKind

# Providers kept when built-in hosted models are hidden. Legacy rows were
# written with inconsistent casing, so both spellings are listed.
SELF_HOSTED_PROVIDERS: frozenset[str] = frozenset(
    {"Local", "local", "ollama", "transformer", "Transformer"}
)


class CatalogFilter(BaseModel):
    """Criteria for a catalog listing."""

    provider_kinds: frozenset[str] | None = Field(
        None, description="Only include these providers (None for all)"
    )
    exclude_deleted: bool = Field(True, description="Drop soft-deleted entries")
    include_hidden: bool = Field(False, description="Keep hidden entries")

    def matches(self, entry: ModelEntry) -> bool:
        """Check whether an entry belongs in the listing."""
        if self.exclude_deleted and entry.deleted:
            return False
        if not self.include_hidden and entry.hidden:
            return False
        if self.provider_kinds is not None and entry.provider_kind not in self.provider_kinds:
            return False
        return True


def build_listing_filter(hide_defaults: bool, include_hidden: bool = False) -> CatalogFilter:
    """Build the filter used for catalog listings.

    Args:
        hide_defaults: Restrict the listing to self-hosted providers.
        include_hidden: Keep entries an administrator has hidden.

    Returns:
        Filter excluding soft-deleted entries.
    """
    return CatalogFilter(
        provider_kinds=SELF_HOSTED_PROVIDERS if hide_defaults else None,
        exclude_deleted=True,
        include_hidden=include_hidden,
    )


def partition_entries(entries: Iterable[ModelEntry]) -> CatalogListing:
    """Split entries into chat and embedding groups, preserving order."""
    listing = CatalogListing()
    for entry in entries:
        if entry.model_kind == ModelKind.EMBEDDING:
            listing.embedding.append(entry)
        else:
            listing.chat.append(entry)
    return listing
