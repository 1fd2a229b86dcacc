"""Catalog entities. Ownership of links lives on ``Product``.

Every command keeps both sides of a relationship consistent and is a no-op
when the link is already in the requested state. The same code runs whether
the classes are plain dataclasses or mapped by the SQLAlchemy adapter, where
``back_populates`` may already have synchronised the opposite side.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import ClassVar

from shelfsweep.domain.model.entity import Entity, Record
from shelfsweep.domain.model.enums import RecordKind


@dataclass(eq=False, kw_only=True)
class Category(Record):
    RECORD_KIND: ClassVar[RecordKind] = RecordKind.CATEGORY

    # Bidirectional view (read-only); owned by Product
    _products: list[Product] = field(default_factory=list["Product"], repr=False)

    @property
    def products(self) -> tuple[Product, ...]:
        return tuple(self._products)


@dataclass(eq=False, kw_only=True)
class Tag(Record):
    RECORD_KIND: ClassVar[RecordKind] = RecordKind.TAG

    _products: list[Product] = field(default_factory=list["Product"], repr=False)

    @property
    def products(self) -> tuple[Product, ...]:
        return tuple(self._products)


@dataclass(eq=False, kw_only=True)
class Product(Record):
    RECORD_KIND: ClassVar[RecordKind] = RecordKind.PRODUCT

    brand: str | None = None
    model: str | None = None

    _category: Category | None = field(default=None, repr=False)
    _tags: list[Tag] = field(default_factory=list["Tag"], repr=False)
    _repair_records: list[RepairRecord] = field(
        default_factory=list["RepairRecord"], repr=False
    )

    def __post_init__(self) -> None:
        category = self._category
        if category is not None and self not in category._products:  # noqa: SLF001
            category._products.append(self)  # noqa: SLF001

    @property
    def category(self) -> Category | None:
        return self._category

    @property
    def tags(self) -> tuple[Tag, ...]:
        return tuple(self._tags)

    @property
    def repair_records(self) -> tuple[RepairRecord, ...]:
        return tuple(self._repair_records)

    def assign_category(self, category: Category | None) -> None:
        current = self._category
        if current is category:
            return
        if current is not None and self in current._products:  # noqa: SLF001
            current._products.remove(self)  # noqa: SLF001
        self._category = category
        if category is not None and self not in category._products:  # noqa: SLF001
            category._products.append(self)  # noqa: SLF001

    def add_tag(self, tag: Tag) -> None:
        if tag not in self._tags:
            self._tags.append(tag)
        if self not in tag._products:  # noqa: SLF001
            tag._products.append(self)  # noqa: SLF001

    def remove_tag(self, tag: Tag) -> None:
        if tag in self._tags:
            self._tags.remove(tag)
        if self in tag._products:  # noqa: SLF001
            tag._products.remove(self)  # noqa: SLF001

    def add_repair_record(self, *, summary: str, cost: Decimal | None = None) -> RepairRecord:
        record = RepairRecord(summary=summary, cost=cost)
        record.reassign(self)
        return record

    # Friend primitives (called only by RepairRecord)
    def _attach_repair_record(self, record: RepairRecord) -> None:
        if record not in self._repair_records:
            self._repair_records.append(record)

    def _detach_repair_record(self, record: RepairRecord) -> None:
        if record in self._repair_records:
            self._repair_records.remove(record)


@dataclass(eq=False, kw_only=True)
class RepairRecord(Entity):
    summary: str
    cost: Decimal | None = None

    _product: Product | None = field(default=None, repr=False)

    @property
    def product(self) -> Product | None:
        return self._product

    def reassign(self, product: Product) -> None:
        current = self._product
        if current is product:
            product._attach_repair_record(self)  # noqa: SLF001
            return
        if current is not None:
            current._detach_repair_record(self)  # noqa: SLF001
        self._product = product
        product._attach_repair_record(self)  # noqa: SLF001

    def detach(self) -> None:
        current = self._product
        if current is None:
            return
        current._detach_repair_record(self)  # noqa: SLF001
        self._product = None
