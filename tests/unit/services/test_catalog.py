import pytest

from megallm.schemas.models import Model
from megallm.services.catalog import (
    TAB_NAMES,
    build_row,
    build_tabs,
    chat_models,
    embedding_models,
    filter_models_by_provider,
    is_embedding_model,
    other_models,
)


@pytest.fixture()
def models(sample_models):
    return [Model.model_validate(m) for m in sample_models]


def _ids(models):
    return [m.id for m in models]


@pytest.mark.unit
def test_chat_and_embedding_partition_the_list(models):
    chats = chat_models(models)
    embeddings = embedding_models(models)
    assert not set(_ids(chats)) & set(_ids(embeddings))
    assert sorted(_ids(chats) + _ids(embeddings)) == sorted(_ids(models))
    assert _ids(embeddings) == ["text-embedding-3-small"]


@pytest.mark.unit
def test_embedding_match_is_case_insensitive():
    assert is_embedding_model(Model(id="Voyage-EMBEDDING-3"))
    assert is_embedding_model(Model(id="voyage-3", display_name="Voyage Embedding"))
    assert not is_embedding_model(Model(id="gpt-4o", display_name="GPT-4o"))


@pytest.mark.unit
def test_filter_all_is_identity(models):
    assert filter_models_by_provider(models, "All") == models


@pytest.mark.unit
def test_filter_by_provider(models):
    assert _ids(filter_models_by_provider(models, "OpenAI")) == ["gpt-4o-mini", "text-embedding-3-small"]
    assert _ids(filter_models_by_provider(models, "Anthropic")) == ["claude-sonnet-4"]
    assert _ids(filter_models_by_provider(models, "Mistral")) == ["mistral-large"]
    assert _ids(filter_models_by_provider(models, "Alibaba")) == ["qwen-max"]
    assert filter_models_by_provider(models, "xAI") == []
    assert filter_models_by_provider(models, "Cohere") == []


@pytest.mark.unit
def test_azure_counts_as_openai():
    azure = Model(id="gpt-4.1", owned_by="Azure OpenAI")
    assert filter_models_by_provider([azure], "OpenAI") == [azure]


@pytest.mark.unit
def test_mistral_lands_in_other_only(models):
    other = _ids(other_models(models))
    assert "mistral-large" in other
    assert "qwen-max" in other
    for tag in ("OpenAI", "Anthropic", "Google", "xAI", "Meta"):
        assert "mistral-large" not in _ids(filter_models_by_provider(models, tag))


@pytest.mark.unit
def test_other_keeps_unknown_providers_but_not_embeddings():
    unknown = Model(id="command-r", owned_by="cohere")
    embed = Model(id="mistral-embedding", owned_by="mistral")
    assert other_models([unknown, embed]) == [unknown]


@pytest.mark.unit
def test_build_tabs(models):
    tabs = {t.name: t for t in build_tabs(models)}
    assert tuple(tabs) == TAB_NAMES
    assert "text-embedding-3-small" not in _ids(tabs["All Models"].models)
    assert "text-embedding-3-small" not in _ids(tabs["OpenAI"].models)
    assert _ids(tabs["Embedding"].models) == ["text-embedding-3-small"]
    assert _ids(tabs["Other"].models) == ["mistral-large", "qwen-max"]


@pytest.mark.unit
def test_build_row_formats_cells(models):
    gemini = next(m for m in models if m.id == "gemini-2.5-pro")
    row = build_row(gemini, ("id", "context", "max_output", "input_price", "features"))
    assert row["id"] == "gemini-2.5-pro"
    assert row["context"] == "1M"
    assert row["max_output"] == "66K"
    assert row["input_price"].original == "1.25"
    assert row["features"] == ""

    mistral = next(m for m in models if m.id == "mistral-large")
    row = build_row(mistral, ("context", "output_price"))
    assert row == {"context": "N/A", "output_price": None}


@pytest.mark.unit
def test_tab_to_dict_renders_missing_prices_as_na(models):
    other = next(t for t in build_tabs(models) if t.name == "Other")
    body = other.to_dict()
    assert body["columns"][0] == {"key": "id", "label": "Model ID"}
    mistral = body["rows"][0]
    assert mistral["input_price_tokens"] == "N/A"
    assert mistral["provider"] == "Mistral AI"


@pytest.mark.unit
def test_infinite_upstream_price_renders_na():
    model = Model.model_validate({"id": "odd", "pricing": {"input_tokens_cost_per_million": float("inf")}})
    assert build_row(model, ("input_price",)) == {"input_price": None}
