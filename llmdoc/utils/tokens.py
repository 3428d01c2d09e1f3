"""Token estimation and cost prediction for LLM requests.

Token counts are a character-ratio heuristic, not a real tokenizer.
Pricing and context-window sizes come from a static table that can
be swapped out per call.
"""

import math
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Optional

# Code tokenizes denser than English prose (~4 chars per token).
TOKENS_PER_CHAR: Mapping[str, float] = MappingProxyType({"code": 0.35, "prose": 0.25})

HIGH_USAGE_PERCENT = 80.0
CRITICAL_USAGE_PERCENT = 95.0


@dataclass(frozen=True)
class ModelPricing:
    """Pricing and limits for one model.

    Attributes:
        input: USD per million input tokens.
        output: USD per million output tokens.
        context: Context window size in tokens.
    """

    input: float
    output: float
    context: int


# Approximate list prices, per million tokens.
MODEL_PRICING: Mapping[str, ModelPricing] = MappingProxyType(
    {
        # OpenAI
        "gpt-5": ModelPricing(input=1.25, output=10, context=400_000),
        "gpt-5-mini": ModelPricing(input=0.25, output=2, context=400_000),
        "o1-preview": ModelPricing(input=15, output=60, context=128_000),
        "o1-mini": ModelPricing(input=3, output=12, context=128_000),
        "gpt-4o": ModelPricing(input=2.5, output=10, context=128_000),
        "gpt-4o-mini": ModelPricing(input=0.15, output=0.6, context=128_000),
        "gpt-4-turbo": ModelPricing(input=10, output=30, context=128_000),
        # Anthropic
        "claude-opus-4-20250514": ModelPricing(input=15, output=75, context=200_000),
        "claude-sonnet-4-20250514": ModelPricing(input=3, output=15, context=200_000),
        "claude-haiku-4-5-20251001": ModelPricing(input=0.8, output=4, context=200_000),
        "claude-3-5-sonnet-20241022": ModelPricing(input=3, output=15, context=200_000),
        "claude-3-5-haiku-20241022": ModelPricing(input=0.8, output=4, context=200_000),
        "claude-3-opus-20240229": ModelPricing(input=15, output=75, context=200_000),
        # Google, prompts up to 200k tokens
        "gemini-3-pro": ModelPricing(input=2, output=12, context=1_000_000),
        "gemini-2.5-pro": ModelPricing(input=1.25, output=10, context=1_000_000),
        "gemini-2.5-flash": ModelPricing(input=0.3, output=2.5, context=1_000_000),
        "gemini-1.5-pro": ModelPricing(input=1.25, output=5, context=2_000_000),
        "gemini-1.5-flash": ModelPricing(input=0.075, output=0.3, context=1_000_000),
        "gemini-1.5-flash-8b": ModelPricing(input=0.0375, output=0.15, context=1_000_000),
        # Mistral
        "mistral-large-latest": ModelPricing(input=2, output=6, context=128_000),
        "mistral-nemo": ModelPricing(input=0.15, output=0.15, context=128_000),
    }
)


@dataclass
class TokenEstimate:
    """Token and cost estimate for a piece of content.

    Attributes:
        characters: Total characters in the content.
        tokens: Estimated token count.
        estimated_cost: Estimated input cost in USD, if pricing is known.
        context_window: Context window of the model, if known.
        context_usage_percent: Share of the context window used.
        warning: Set when the content approaches the context limit.
    """

    characters: int
    tokens: int
    estimated_cost: Optional[float] = None
    context_window: Optional[int] = None
    context_usage_percent: Optional[float] = None
    warning: Optional[str] = None


def estimate_tokens(content: str, is_code: bool = True) -> int:
    """Estimate the token count of a text.

    Args:
        content: Text to estimate.
        is_code: Use the source-code ratio instead of the prose ratio.

    Returns:
        ``ceil(len(content) * ratio)``.
    """
    ratio = TOKENS_PER_CHAR["code"] if is_code else TOKENS_PER_CHAR["prose"]
    return math.ceil(len(content) * ratio)


def find_model_pricing(
    model: str,
    pricing: Mapping[str, ModelPricing] = MODEL_PRICING,
) -> Optional[ModelPricing]:
    """Look up pricing for a model name.

    Tries an exact key first, then a case-insensitive substring match in
    either direction, so ``gpt-4o-2024-05-13`` finds ``gpt-4o``.

    Args:
        model: Model identifier from the configuration.
        pricing: Pricing table to search.

    Returns:
        The first matching entry, or None.
    """
    if model in pricing:
        return pricing[model]

    model_lower = model.lower()
    for key, value in pricing.items():
        key_lower = key.lower()
        if key_lower in model_lower or model_lower in key_lower:
            return value
    return None


def _usage_percent(tokens: int, window: int) -> float:
    # One decimal place, halves rounded up.
    return math.floor(tokens / window * 1000 + 0.5) / 10


def _usage_warning(percent: float) -> Optional[str]:
    """Pick the context warning for a usage level. Critical wins over high."""
    if percent > CRITICAL_USAGE_PERCENT:
        return f"Critical: Approaching context limit ({percent}%). Request may fail."
    if percent > HIGH_USAGE_PERCENT:
        return (
            f"High context usage ({percent}%). Consider splitting into subfolders."
        )
    return None


def get_token_estimate(
    content: str,
    model: Optional[str] = None,
    is_code: bool = True,
    pricing: Mapping[str, ModelPricing] = MODEL_PRICING,
) -> TokenEstimate:
    """Estimate tokens, cost and context usage for a request payload.

    Args:
        content: The full text that will be sent.
        model: Model identifier used for pricing lookup.
        is_code: Whether the content is mostly source code.
        pricing: Pricing table to use.

    Returns:
        A TokenEstimate. Cost and context fields stay None when no model
        is given or the model is not in the pricing table.
    """
    estimate = TokenEstimate(
        characters=len(content),
        tokens=estimate_tokens(content, is_code),
    )
    if not model:
        return estimate

    model_pricing = find_model_pricing(model, pricing)
    if model_pricing is None:
        return estimate

    estimate.estimated_cost = estimate.tokens / 1_000_000 * model_pricing.input
    estimate.context_window = model_pricing.context
    estimate.context_usage_percent = _usage_percent(
        estimate.tokens, model_pricing.context
    )
    estimate.warning = _usage_warning(estimate.context_usage_percent)
    return estimate


def aggregate_estimates(estimates: list[TokenEstimate]) -> TokenEstimate:
    """Combine estimates from several requests.

    Characters, tokens and cost are summed. The context window is taken
    from the first estimate that has one, and the usage percentage is
    recomputed from the summed tokens against that window.

    Args:
        estimates: Per-request estimates.

    Returns:
        The aggregate estimate. Cost is 0.0 when no estimate had one.
    """
    total = TokenEstimate(characters=0, tokens=0, estimated_cost=0.0)

    for est in estimates:
        total.characters += est.characters
        total.tokens += est.tokens
        if est.estimated_cost is not None:
            total.estimated_cost += est.estimated_cost

    window = next((e.context_window for e in estimates if e.context_window), None)
    if window:
        total.context_window = window
        total.context_usage_percent = _usage_percent(total.tokens, window)
        total.warning = _usage_warning(total.context_usage_percent)

    return total


def format_token_estimate(estimate: TokenEstimate, model: Optional[str] = None) -> str:
    """Render an estimate as a short multi-line report.

    Args:
        estimate: The estimate to display.
        model: Model name, used when pricing was unavailable.

    Returns:
        Human-readable report text.
    """
    lines = [
        f"Characters: {estimate.characters:,}",
        f"Estimated tokens: ~{estimate.tokens:,}",
    ]

    if estimate.context_window:
        lines.append(
            f"Context usage: {estimate.context_usage_percent}% of "
            f"{estimate.context_window / 1000:.0f}K"
        )

    if estimate.estimated_cost is not None:
        if estimate.estimated_cost < 0.01:
            lines.append("Estimated input cost: <$0.01")
        else:
            lines.append(f"Estimated input cost: ${estimate.estimated_cost:.4f}")
    elif model:
        lines.append(f'Cost estimate: unavailable for model "{model}"')

    if estimate.warning:
        lines.append(f"Warning: {estimate.warning}")

    return "\n".join(lines)
