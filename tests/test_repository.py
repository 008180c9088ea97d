"""ProductRepository against in-memory SQLite.

Tests cover:
    - create assigns an id and find_by_id returns the same fields
    - update/remove of a missing id raise NotFoundError
    - name filter is a substring match with literal % and _
    - remove_all empties the table and reports the count
    - constraint violations and a closed connection raise QueryError
"""

import pytest

from productos.errors import NotFoundError, QueryError
from productos.schemas import ProductIn


def test_create_then_find_returns_same_fields(repo, pen):
    created = repo.create(pen)
    assert created.id is not None

    found = repo.find_by_id(created.id)
    assert found == created
    assert found.model_dump() == {"id": created.id, "name": "Pen", "description": "Blue", "price": 1.5, "stock": 100}


def test_create_assigns_distinct_ids(repo, pen):
    first = repo.create(pen)
    second = repo.create(pen)
    assert first.id != second.id


def test_find_missing_raises_not_found(repo):
    with pytest.raises(NotFoundError) as exc_info:
        repo.find_by_id(999)
    assert exc_info.value.product_id == 999


def test_remove_then_find_raises_not_found(repo, pen):
    created = repo.create(pen)
    repo.remove(created.id)
    with pytest.raises(NotFoundError):
        repo.find_by_id(created.id)


def test_remove_missing_raises_not_found(repo):
    with pytest.raises(NotFoundError):
        repo.remove(42)


def test_update_overwrites_all_fields(repo, pen):
    created = repo.create(pen)
    changed = ProductIn(name="Pencil", description=None, price=0.75, stock=3)

    updated = repo.update_by_id(created.id, changed)

    assert updated.id == created.id
    assert repo.find_by_id(created.id).model_dump() == {
        "id": created.id, "name": "Pencil", "description": None, "price": 0.75, "stock": 3,
    }


def test_update_missing_raises_not_found(repo, pen):
    with pytest.raises(NotFoundError):
        repo.update_by_id(12345, pen)


def test_get_all_empty_table(repo):
    assert repo.get_all() == []


def test_get_all_with_filter_is_subset_containing_name(repo):
    for name in ("Blue Pen", "Red Pen", "Notebook", "Pencil case"):
        repo.create(ProductIn(name=name, price=1.0, stock=1))

    everything = repo.get_all()
    filtered = repo.get_all("Pen")

    assert {p.name for p in filtered} == {"Blue Pen", "Red Pen", "Pencil case"}
    assert all(p in everything for p in filtered)


def test_get_all_empty_filter_returns_everything(repo, pen):
    repo.create(pen)
    assert len(repo.get_all("")) == 1


def test_get_all_filter_treats_wildcards_literally(repo):
    repo.create(ProductIn(name="100% Cotton", price=9.0, stock=5))
    repo.create(ProductIn(name="Cotton", price=5.0, stock=5))
    repo.create(ProductIn(name="snake_case mug", price=7.0, stock=1))
    repo.create(ProductIn(name="snakeXcase mug", price=7.0, stock=1))

    assert [p.name for p in repo.get_all("%")] == ["100% Cotton"]
    assert [p.name for p in repo.get_all("snake_case")] == ["snake_case mug"]


def test_get_all_filter_is_not_injectable(repo, pen):
    repo.create(pen)
    assert repo.get_all("' OR '1'='1") == []
    assert len(repo.get_all()) == 1


def test_remove_all_then_get_all_is_empty(repo, pen):
    repo.create(pen)
    repo.create(pen)

    assert repo.remove_all() == 2
    assert repo.get_all() == []


def test_remove_all_on_empty_table(repo):
    assert repo.remove_all() == 0


def test_missing_name_raises_query_error(repo):
    with pytest.raises(QueryError) as exc_info:
        repo.create(ProductIn(price=1.0, stock=1))
    assert exc_info.value.operation == "create"
    assert exc_info.value.message


def test_connection_usable_after_query_error(repo, pen):
    with pytest.raises(QueryError):
        repo.create(ProductIn(description="no name"))
    assert repo.create(pen).name == "Pen"


def test_closed_repository_raises_query_error(repo):
    repo.close()
    with pytest.raises(QueryError):
        repo.get_all()
