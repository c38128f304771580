from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

TOKENS_PER_MILLION = Decimal(1_000_000)


@dataclass(frozen=True)
class ModelInfo:
    """Metadata and pricing for a known Claude model.

    Costs are US dollars per million tokens. Cache prices default to
    1.25x (write) and 0.1x (read) of the input price when unset.
    """

    id: str
    display_name: str
    context_window: int
    max_output: int
    input_cost_per_million: Decimal
    output_cost_per_million: Decimal
    cache_write_cost_per_million: Decimal | None = None
    cache_read_cost_per_million: Decimal | None = None
    aliases: list[str] = field(default_factory=list)

    @property
    def cache_write_cost(self) -> Decimal:
        if self.cache_write_cost_per_million is not None:
            return self.cache_write_cost_per_million
        return self.input_cost_per_million * Decimal("1.25")

    @property
    def cache_read_cost(self) -> Decimal:
        if self.cache_read_cost_per_million is not None:
            return self.cache_read_cost_per_million
        return self.input_cost_per_million * Decimal("0.1")


MODEL_CATALOG: list[ModelInfo] = [
    ModelInfo(
        id="claude-sonnet-4-5",
        display_name="Claude Sonnet 4.5",
        context_window=200_000,
        max_output=64_000,
        input_cost_per_million=Decimal("3"),
        output_cost_per_million=Decimal("15"),
        aliases=["sonnet", "claude-sonnet", "claude-sonnet-4-5-20250929"],
    ),
    ModelInfo(
        id="claude-opus-4-1",
        display_name="Claude Opus 4.1",
        context_window=200_000,
        max_output=32_000,
        input_cost_per_million=Decimal("15"),
        output_cost_per_million=Decimal("75"),
        aliases=["opus", "claude-opus", "claude-opus-4-1-20250805"],
    ),
    ModelInfo(
        id="claude-haiku-4-5",
        display_name="Claude Haiku 4.5",
        context_window=200_000,
        max_output=64_000,
        input_cost_per_million=Decimal("1"),
        output_cost_per_million=Decimal("5"),
        aliases=["haiku", "claude-haiku", "claude-haiku-4-5-20251001"],
    ),
    ModelInfo(
        id="claude-sonnet-4-0",
        display_name="Claude Sonnet 4",
        context_window=200_000,
        max_output=64_000,
        input_cost_per_million=Decimal("3"),
        output_cost_per_million=Decimal("15"),
        aliases=["claude-sonnet-4-20250514"],
    ),
    ModelInfo(
        id="claude-opus-4-0",
        display_name="Claude Opus 4",
        context_window=200_000,
        max_output=32_000,
        input_cost_per_million=Decimal("15"),
        output_cost_per_million=Decimal("75"),
        aliases=["claude-opus-4-20250514"],
    ),
    ModelInfo(
        id="claude-3-7-sonnet-latest",
        display_name="Claude Sonnet 3.7",
        context_window=200_000,
        max_output=64_000,
        input_cost_per_million=Decimal("3"),
        output_cost_per_million=Decimal("15"),
        aliases=["claude-3-7-sonnet-20250219"],
    ),
    ModelInfo(
        id="claude-3-5-haiku-latest",
        display_name="Claude Haiku 3.5",
        context_window=200_000,
        max_output=8_192,
        input_cost_per_million=Decimal("0.80"),
        output_cost_per_million=Decimal("4"),
        aliases=["claude-3-5-haiku-20241022"],
    ),
    ModelInfo(
        id="claude-3-haiku-20240307",
        display_name="Claude Haiku 3",
        context_window=200_000,
        max_output=4_096,
        input_cost_per_million=Decimal("0.25"),
        output_cost_per_million=Decimal("1.25"),
    ),
]

DEFAULT_MODEL = "claude-sonnet-4-5"

_CATALOG_INDEX: dict[str, ModelInfo] = {m.id: m for m in MODEL_CATALOG}


def get_model_info(model_id: str) -> ModelInfo | None:
    """Look up model metadata by ID or alias.

    Exact ID match takes precedence over aliases.
    """
    info = _CATALOG_INDEX.get(model_id)
    if info is not None:
        return info

    for entry in MODEL_CATALOG:
        if model_id in entry.aliases:
            return entry

    return None


def list_models() -> list[ModelInfo]:
    """List all known models, newest first."""
    return list(MODEL_CATALOG)


def get_default_model() -> ModelInfo:
    return _CATALOG_INDEX[DEFAULT_MODEL]
