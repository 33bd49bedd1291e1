"""Catalog derivations over a fetched model list.

Every view here is a pure function of the list it is given; nothing is
cached, so a newer fetch can never be shadowed by a stale derived view.
Order of the input list is preserved by every filter.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, List, Sequence

from megallm.schemas.models import Model
from megallm.services.formatting import (
    NOT_AVAILABLE,
    feature_icons,
    format_discounted_price,
    format_token_count,
)

ALL = "All"

PROVIDER_KEYWORDS: dict[str, tuple[str, ...]] = {
    "OpenAI": ("openai", "azure"),
    "Anthropic": ("anthropic",),
    "Google": ("google",),
    "xAI": ("xai",),
    "Meta": ("meta",),
    "Mistral": ("mistral",),
    "Alibaba": ("alibaba",),
}

# owners that have a tab of their own; anything else lands under "Other"
_MAJOR_PROVIDER_KEYWORDS = ("openai", "azure", "anthropic", "google", "meta", "xai")
_OTHER_EXPLICIT_KEYWORDS = ("mistral", "alibaba")


def _owner(model: Model) -> str:
    return (model.owned_by or "").lower()


def is_embedding_model(model: Model) -> bool:
    return "embedding" in model.id.lower() or "embedding" in (model.display_name or "").lower()


def embedding_models(models: Sequence[Model]) -> List[Model]:
    return [m for m in models if is_embedding_model(m)]


def chat_models(models: Sequence[Model]) -> List[Model]:
    return [m for m in models if not is_embedding_model(m)]


def filter_models_by_provider(models: Sequence[Model], provider: str) -> List[Model]:
    """Models whose ``owned_by`` mentions one of ``provider``'s keywords.

    ``"All"`` returns the input unchanged; an unknown tag returns nothing.
    """
    if provider == ALL:
        return list(models)
    keywords = PROVIDER_KEYWORDS.get(provider)
    if not keywords:
        return []
    return [m for m in models if any(k in _owner(m) for k in keywords)]


def is_other_provider(model: Model) -> bool:
    owner = _owner(model)
    if any(k in owner for k in _OTHER_EXPLICIT_KEYWORDS):
        return True
    return not any(k in owner for k in _MAJOR_PROVIDER_KEYWORDS)


def other_models(models: Sequence[Model]) -> List[Model]:
    return [m for m in chat_models(models) if is_other_provider(m)]


# ---------------------------------------------------------------------------
# Tabs
# ---------------------------------------------------------------------------

COLUMN_LABELS: dict[str, str] = {
    "id": "Model ID",
    "provider": "Provider",
    "context": "Context",
    "context_window": "Context Window",
    "max_output": "Max Output",
    "input_price": "Input $/M",
    "output_price": "Output $/M",
    "input_price_tokens": "Input $/M tokens",
    "output_price_tokens": "Output $/M tokens",
    "features": "Features",
}

_LISTING_COLUMNS = ("id", "provider", "context", "max_output", "input_price", "output_price", "features")
_PROVIDER_COLUMNS = ("id", "context_window", "max_output", "input_price_tokens", "output_price_tokens", "features")
_OTHER_COLUMNS = ("id", "provider", "context_window", "max_output", "input_price_tokens", "output_price_tokens", "features")
_EMBEDDING_COLUMNS = ("id", "provider", "context", "input_price_tokens", "features")


def _cell(model: Model, column: str) -> Any:
    pricing = model.pricing
    if column == "id":
        return model.id
    if column == "provider":
        return model.owned_by
    if column in ("context", "context_window"):
        return format_token_count(model.context_length)
    if column == "max_output":
        return format_token_count(model.max_output_tokens)
    if column in ("input_price", "input_price_tokens"):
        return format_discounted_price(pricing.input_tokens_cost_per_million if pricing else None)
    if column in ("output_price", "output_price_tokens"):
        return format_discounted_price(pricing.output_tokens_cost_per_million if pricing else None)
    if column == "features":
        return feature_icons(model.capabilities)
    raise KeyError(column)


def build_row(model: Model, columns: Iterable[str]) -> dict[str, Any]:
    """Display row keyed by column; price cells are ``DiscountedPrice`` or ``None``."""
    return {column: _cell(model, column) for column in columns}


@dataclass(frozen=True)
class CatalogTab:
    name: str
    title: str
    columns: tuple[str, ...]
    models: List[Model] = field(default_factory=list)

    @property
    def rows(self) -> List[dict[str, Any]]:
        return [build_row(m, self.columns) for m in self.models]

    def to_dict(self) -> dict[str, Any]:
        rows = []
        for row in self.rows:
            rows.append({
                k: (v.to_dict() if hasattr(v, "to_dict") else (NOT_AVAILABLE if v is None else v))
                for k, v in row.items()
            })
        return {
            "name": self.name,
            "title": self.title,
            "columns": [{"key": c, "label": COLUMN_LABELS[c]} for c in self.columns],
            "rows": rows,
        }


def build_tabs(models: Sequence[Model]) -> List[CatalogTab]:
    chats = chat_models(models)
    return [
        CatalogTab("All Models", "Complete Model Listing", _LISTING_COLUMNS, chats),
        CatalogTab(
            "OpenAI",
            "OpenAI Models",
            _PROVIDER_COLUMNS,
            [m for m in filter_models_by_provider(models, "OpenAI") if "embedding" not in m.id.lower()],
        ),
        CatalogTab("Anthropic", "Anthropic Claude Models", _PROVIDER_COLUMNS, filter_models_by_provider(models, "Anthropic")),
        CatalogTab("Google", "Google Gemini Models", _PROVIDER_COLUMNS, filter_models_by_provider(models, "Google")),
        CatalogTab("xAI", "xAI Models", _PROVIDER_COLUMNS, filter_models_by_provider(models, "xAI")),
        CatalogTab("Meta", "Meta Llama Models", _PROVIDER_COLUMNS, filter_models_by_provider(models, "Meta")),
        CatalogTab("Other", "Other Models (Mistral, Alibaba, etc.)", _OTHER_COLUMNS, other_models(models)),
        CatalogTab("Embedding", "Embedding Models", _EMBEDDING_COLUMNS, embedding_models(models)),
    ]


TAB_NAMES = ("All Models", "OpenAI", "Anthropic", "Google", "xAI", "Meta", "Other", "Embedding")
