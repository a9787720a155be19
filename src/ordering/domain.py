"""Ordering bounded context — checkout, discount codes and the order lifecycle.

Orders are plain (not event-sourced) aggregates persisted through the
domain's default provider.
"""

from protean.domain import Domain

ordering = Domain(name="ordering")
