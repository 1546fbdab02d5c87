"""Compile canonical query requests into store-level directives."""

from recipe_discovery.domain.queries import (
    CompiledQuery,
    Condition,
    ConditionOperator,
    MatchType,
    QueryRequest,
    SortDirective,
    SortOrder,
)
from recipe_discovery.services.filters import escape_pattern


def compile_query(request: QueryRequest) -> CompiledQuery:
    """Turn a normalized request into a conjunction of conditions."""
    conditions: list[Condition] = []
    if request.search:
        conditions.append(
            Condition("title", ConditionOperator.MATCHES, escape_pattern(request.search))
        )
    if request.category:
        conditions.append(
            Condition("category", ConditionOperator.EQUALS, request.category)
        )
    if request.tags:
        conditions.append(_set_condition("tags", request.tags, request.tag_match))
    if request.ingredients:
        conditions.append(
            _set_condition(
                "ingredients", request.ingredients, request.ingredient_match
            )
        )
    if request.number_of_steps is not None:
        conditions.append(
            Condition("step_count", ConditionOperator.EQUALS, request.number_of_steps)
        )

    sort = None
    if request.sort_by is not None:
        sort = SortDirective(
            column=request.sort_by.column,
            descending=request.order is SortOrder.DESC,
        )

    return CompiledQuery(
        conditions=tuple(conditions),
        sort=sort,
        skip=(request.page - 1) * request.limit,
        limit=request.limit,
    )


def _set_condition(
    field: str, values: frozenset[str], match: MatchType
) -> Condition:
    operator = (
        ConditionOperator.CONTAINS_ALL
        if match is MatchType.ALL
        else ConditionOperator.OVERLAPS
    )
    return Condition(field, operator, tuple(sorted(values)))
