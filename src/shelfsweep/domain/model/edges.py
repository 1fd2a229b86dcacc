"""Relationship edges of catalog records and their re-targeting."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, assert_never

from shelfsweep.domain.model.catalog import Category, Product, RepairRecord, Tag
from shelfsweep.domain.model.enums import EdgeKind

if TYPE_CHECKING:
    from shelfsweep.domain.model.entity import Entity


type CatalogRecord = Category | Tag | Product


@dataclass(frozen=True, slots=True)
class Edge:
    """Link between a reconciled ``record`` and one ``neighbor``."""

    kind: EdgeKind
    record: CatalogRecord
    neighbor: Entity


def edges_of(record: CatalogRecord) -> tuple[Edge, ...]:
    """Return every edge attached to ``record``."""

    match record:
        case Category():
            return tuple(
                Edge(kind=EdgeKind.CATEGORY_PRODUCT, record=record, neighbor=product)
                for product in record.products
            )
        case Tag():
            return tuple(
                Edge(kind=EdgeKind.TAG_PRODUCT, record=record, neighbor=product)
                for product in record.products
            )
        case Product():
            tag_edges = tuple(
                Edge(kind=EdgeKind.PRODUCT_TAG, record=record, neighbor=tag)
                for tag in record.tags
            )
            repair_edges = tuple(
                Edge(kind=EdgeKind.PRODUCT_REPAIR_RECORD, record=record, neighbor=repair)
                for repair in record.repair_records
            )
            return tag_edges + repair_edges
        case _:
            assert_never(record)


def retarget_edge(edge: Edge, to: CatalogRecord) -> None:
    """Re-point ``edge`` from ``edge.record`` to ``to``.

    Re-targeting onto the record the edge already belongs to is a no-op, and
    so is re-targeting a link the survivor already holds.
    """

    if type(to) is not type(edge.record):
        raise TypeError(
            f"Cannot retarget {edge.kind.value} edge from {type(edge.record).__name__} "
            f"to {type(to).__name__}"
        )
    if to is edge.record:
        return

    match edge.kind:
        case EdgeKind.CATEGORY_PRODUCT:
            product = _expect(edge.neighbor, Product)
            product.assign_category(_expect(to, Category))
        case EdgeKind.TAG_PRODUCT:
            product = _expect(edge.neighbor, Product)
            product.add_tag(_expect(to, Tag))
            product.remove_tag(_expect(edge.record, Tag))
        case EdgeKind.PRODUCT_TAG:
            tag = _expect(edge.neighbor, Tag)
            _expect(to, Product).add_tag(tag)
            _expect(edge.record, Product).remove_tag(tag)
        case EdgeKind.PRODUCT_REPAIR_RECORD:
            repair = _expect(edge.neighbor, RepairRecord)
            repair.reassign(_expect(to, Product))
        case _:
            assert_never(edge.kind)


def _expect[T](value: object, cls: type[T]) -> T:
    if not isinstance(value, cls):
        raise TypeError(f"Expected {cls.__name__}, got {type(value).__name__}")
    return value


def detach_record(record: CatalogRecord) -> None:
    """Drop every link still attached to ``record`` before it is deleted.

    A product's category stays with the product when duplicates are merged,
    so removing the product has to unlink it from that category here. Repair
    records left on a removed product become orphans.
    """

    match record:
        case Category():
            for product in record.products:
                product.assign_category(None)
        case Tag():
            for product in record.products:
                product.remove_tag(record)
        case Product():
            record.assign_category(None)
            for tag in record.tags:
                record.remove_tag(tag)
            for repair in record.repair_records:
                repair.detach()
        case _:
            assert_never(record)
