"""
List query compilation (filter, sort, scope, paginate, count).
"""

from .builder import CompiledQuery, ListQuery, QueryBuilder, escape_like, order_field

__all__ = [
    "CompiledQuery",
    "ListQuery",
    "QueryBuilder",
    "escape_like",
    "order_field",
]
