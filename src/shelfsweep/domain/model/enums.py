"""Enumerations shared across the catalog domain."""

from __future__ import annotations

from enum import StrEnum


class RecordKind(StrEnum):
    """Record kinds the reconciliation engine can scan."""

    CATEGORY = "category"
    TAG = "tag"
    PRODUCT = "product"


class EdgeKind(StrEnum):
    """Relationship edges, named ``<reconciled record>_<neighbor>``."""

    CATEGORY_PRODUCT = "category_product"
    TAG_PRODUCT = "tag_product"
    PRODUCT_TAG = "product_tag"
    PRODUCT_REPAIR_RECORD = "product_repair_record"
