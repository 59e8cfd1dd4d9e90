"""Post-processing for structured LLM output.

Models are asked for bare JSON but often wrap it in prose or code fences,
or truncate it. Extraction is best-effort; callers decide the fallback.
"""

import json
import logging
import re
from typing import Any

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from src.db.models import ExpenseStrategy, InvestmentStrategyRow, StrategyInsight

logger = logging.getLogger(__name__)

# ```json ... ``` (language tag optional)
_FENCED_RE = re.compile(r"```(?:json)?\s*([\s\S]*?)```", re.IGNORECASE)

# First JSON array of objects, then first JSON object
_ARRAY_RE = re.compile(r"\[\s*\{[\s\S]*\}\s*\]")
_OBJECT_RE = re.compile(r"\{[\s\S]*\}")

_EXPENSE_LIST = TypeAdapter(list[ExpenseStrategy])


def extract_json(raw: str) -> Any:
    """Pull a JSON value out of free-form model output.

    Tries, in order: the whole text, a fenced code block, the first
    array of objects, the first object.

    Raises:
        ValueError: If no candidate parses as JSON.
    """
    candidates = [raw.strip()]
    fenced = _FENCED_RE.search(raw)
    if fenced:
        candidates.append(fenced.group(1).strip())
    for pattern in (_ARRAY_RE, _OBJECT_RE):
        match = pattern.search(raw)
        if match:
            candidates.append(match.group(0))

    for candidate in candidates:
        try:
            return json.loads(candidate)
        except json.JSONDecodeError:
            continue

    raise ValueError("No valid JSON found in response")


def parse_insights(raw: str) -> list[StrategyInsight | None]:
    """Parse an ``{"insights": [...]}`` payload into per-strategy insights.

    Entries that are not usable objects become ``None`` so positions are
    preserved for index-based merging.

    Raises:
        ValueError: If no JSON could be extracted at all.
    """
    payload = extract_json(raw)
    if isinstance(payload, dict):
        items = payload.get("insights", [payload] if "strategy" in payload else [])
    elif isinstance(payload, list):
        items = payload
    else:
        items = []
    if not isinstance(items, list):
        logger.warning("Insights payload is not a list: %r", items)
        items = []

    insights: list[StrategyInsight | None] = []
    for item in items:
        try:
            insights.append(StrategyInsight.model_validate(item))
        except PydanticValidationError:
            logger.warning("Discarding malformed insight entry: %r", item)
            insights.append(None)
    return insights


def parse_expense_strategies(raw: str) -> list[ExpenseStrategy]:
    """Parse expense strategies from model output.

    Accepts a ``{"strategies": [...]}`` wrapper, a bare list, or a single
    strategy object.

    Raises:
        ValueError: If no JSON is found or it does not match ExpenseStrategy
            (pydantic's ValidationError is a ValueError).
    """
    payload = extract_json(raw)
    if isinstance(payload, dict):
        payload = payload.get("strategies", [payload])
    return _EXPENSE_LIST.validate_python(payload)


def merge_insights(
    rows: list[InvestmentStrategyRow],
    insights: list[StrategyInsight | None],
    defaults: dict[str, Any],
) -> list[InvestmentStrategyRow]:
    """Attach narrative to each row by position, field by field.

    Rows beyond the end of ``insights`` and fields an insight leaves
    empty take the value from ``defaults`` (keyed by camelCase name).
    """
    merged: list[InvestmentStrategyRow] = []
    for index, row in enumerate(rows):
        insight = insights[index] if index < len(insights) else None
        update: dict[str, Any] = {}
        for field in ("description", "advantages", "considerations", "best_for", "cra_compliance"):
            value = getattr(insight, field) if insight is not None else None
            if not value:
                value = defaults.get(to_camel(field))
            update[field] = value if value is not None else getattr(row, field)
        merged.append(row.model_copy(update=update))
    return merged
