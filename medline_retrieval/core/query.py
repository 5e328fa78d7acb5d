from __future__ import annotations

AND_OPERATOR = " AND "


def normalize_query(query: str) -> str:
    """Rewrite comma-separated terms into E-utilities boolean conjunctions.

    ``", "`` is replaced first so that ``"a, b,c"`` becomes
    ``"a AND b AND c"`` instead of doubling the surrounding spaces. The
    result is stable under repeated application.
    """

    return query.replace(", ", AND_OPERATOR).replace(",", AND_OPERATOR)
