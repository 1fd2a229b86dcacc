from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import inspect, select

from shelfsweep.adapters.sqlalchemy import start_mappers
from shelfsweep.adapters.sqlalchemy.mappings import product_tag_table
from shelfsweep.domain.model import Category, Product, Tag

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine
    from sqlalchemy.orm import Session

    from tests.helpers.catalog import CatalogFactory


def test_start_mappers_is_idempotent() -> None:
    # First invocation happens in the sqlite_engine fixture
    start_mappers()
    start_mappers()


def test_migrations_create_catalog_tables(sqlite_engine: Engine) -> None:
    table_names = set(inspect(sqlite_engine).get_table_names())

    for required in ("category", "tag", "product", "product_tag", "repair_record"):
        assert required in table_names
    assert "alembic_version" in table_names


def test_mappings_round_trip_catalog_graph(
    sqlite_session: Session, catalog: CatalogFactory
) -> None:
    audio = catalog.category("Audio")
    gift = catalog.tag("gift")
    walkman = catalog.product("Walkman", category=audio, tags=[gift])
    walkman.brand = "Sony"
    walkman.add_repair_record(summary="Belt replaced", cost=Decimal("12.50"))
    sqlite_session.add(walkman)
    sqlite_session.commit()
    sqlite_session.expunge_all()

    loaded = sqlite_session.execute(select(Product)).scalars().one()

    assert loaded.id == walkman.id
    assert loaded.brand == "Sony"
    assert loaded.created_at == walkman.created_at
    assert loaded.created_at.tzinfo is not None
    category = loaded.category
    assert isinstance(category, Category)
    assert category.name == "Audio"
    assert category.products == (loaded,)
    assert [tag.name for tag in loaded.tags] == ["gift"]
    (repair,) = loaded.repair_records
    assert repair.cost == Decimal("12.50")
    assert repair.product is loaded


def test_tag_links_are_stored_in_association_table(
    sqlite_session: Session, catalog: CatalogFactory
) -> None:
    gift = catalog.tag("gift")
    walkman = catalog.product("Walkman", tags=[gift])
    sqlite_session.add(walkman)
    sqlite_session.commit()

    rows = sqlite_session.execute(select(product_tag_table)).all()

    assert [(row.product_id, row.tag_id) for row in rows] == [(walkman.id, gift.id)]
    assert isinstance(sqlite_session.get(Tag, gift.id), Tag)
