"""Tests for the local key-value record store."""

import asyncio
import json
import pytest
from datetime import datetime, timedelta, timezone

from budget_tracker.errors import PersistenceError
from budget_tracker.models.local_entry import LocalEntry
from budget_tracker.schemas.category import Category, EntryType
from budget_tracker.schemas.transaction import Transaction


def new_category(owner_id="alice", name="Food", kind=EntryType.expense, budget_limit=None):
    return Category(name=name, kind=kind, budget_limit=budget_limit, owner_id=owner_id)


def new_transaction(owner_id="alice", amount=10, category_id=None, created_at=None, description="Coffee"):
    return Transaction(
        description=description,
        amount=amount,
        kind=EntryType.expense,
        currency="USD",
        category_id=category_id,
        owner_id=owner_id,
        created_at=created_at,
    )


def write_raw(session_factory, key, records):
    with session_factory() as session:
        session.merge(LocalEntry(key=key, value=json.dumps(records)))
        session.commit()


class TestLocalCategories:
    """Test category persistence."""

    def test_insert_assigns_id_and_timestamp(self, local_store):
        """A fresh category gets an id and created_at, and can be listed back."""
        saved = asyncio.run(local_store.save_category(new_category(budget_limit=400)))

        assert saved.id
        assert saved.created_at is not None

        listed = asyncio.run(local_store.list_categories("alice"))
        assert len(listed) == 1
        assert listed[0].id == saved.id
        assert listed[0].name == "Food"
        assert listed[0].kind == EntryType.expense
        assert listed[0].budget_limit == 400

    def test_owner_scoping(self, local_store):
        """Records of other owners are never returned."""
        asyncio.run(local_store.save_category(new_category(owner_id="alice")))
        asyncio.run(local_store.save_category(new_category(owner_id="bob", name="Rent")))

        alice = asyncio.run(local_store.list_categories("alice"))
        assert [c.name for c in alice] == ["Food"]
        assert asyncio.run(local_store.list_categories("carol")) == []

    def test_update_keeps_created_at(self, local_store):
        """Updating replaces fields but never the creation timestamp."""
        saved = asyncio.run(local_store.save_category(new_category()))

        changed = saved.model_copy(update={
            "name": "Groceries",
            "budget_limit": 250,
            "created_at": datetime(2000, 1, 1, tzinfo=timezone.utc),
        })
        updated = asyncio.run(local_store.save_category(changed))

        assert updated.created_at == saved.created_at
        listed = asyncio.run(local_store.list_categories("alice"))
        assert len(listed) == 1
        assert listed[0].name == "Groceries"
        assert listed[0].budget_limit == 250

    def test_update_missing_id_is_noop(self, local_store):
        """Saving an unknown id doesn't create a record."""
        ghost = new_category().model_copy(update={"id": "does-not-exist"})

        asyncio.run(local_store.save_category(ghost))

        assert asyncio.run(local_store.list_categories("alice")) == []

    def test_update_of_other_owners_record_is_noop(self, local_store):
        saved = asyncio.run(local_store.save_category(new_category(owner_id="alice")))
        hijack = saved.model_copy(update={"owner_id": "bob", "name": "Mine now"})

        asyncio.run(local_store.save_category(hijack))

        assert asyncio.run(local_store.list_categories("alice"))[0].name == "Food"
        assert asyncio.run(local_store.list_categories("bob")) == []

    def test_delete_clears_references(self, local_store):
        """Deleting a category un-categorizes every transaction that used it."""
        category = asyncio.run(local_store.save_category(new_category()))
        other = asyncio.run(local_store.save_category(new_category(name="Rent")))
        for _ in range(3):
            asyncio.run(local_store.save_transaction(new_transaction(category_id=category.id)))
        asyncio.run(local_store.save_transaction(new_transaction(category_id=other.id)))

        asyncio.run(local_store.delete_category(category.id))

        assert [c.id for c in asyncio.run(local_store.list_categories("alice"))] == [other.id]
        transactions = asyncio.run(local_store.list_transactions("alice"))
        assert len(transactions) == 4
        assert sorted(t.category_id or "" for t in transactions) == ["", "", "", other.id]

    def test_delete_missing_is_noop(self, local_store):
        asyncio.run(local_store.save_category(new_category()))

        asyncio.run(local_store.delete_category("missing"))

        assert len(asyncio.run(local_store.list_categories("alice"))) == 1


class TestLocalTransactions:
    """Test transaction persistence."""

    def test_listed_newest_first(self, local_store):
        base = datetime(2024, 1, 1, tzinfo=timezone.utc)
        for offset, name in [(1, "middle"), (2, "newest"), (0, "oldest")]:
            asyncio.run(local_store.save_transaction(
                new_transaction(created_at=base + timedelta(days=offset), description=name)
            ))

        listed = asyncio.run(local_store.list_transactions("alice"))

        assert [t.description for t in listed] == ["newest", "middle", "oldest"]

    def test_user_supplied_date_kept(self, local_store):
        """The transaction date is editable and survives insert."""
        when = datetime(2023, 5, 1, 9, 30, tzinfo=timezone.utc)
        saved = asyncio.run(local_store.save_transaction(new_transaction(created_at=when)))
        assert saved.created_at == when

    def test_update_replaces_fields(self, local_store):
        saved = asyncio.run(local_store.save_transaction(new_transaction(amount=10)))

        asyncio.run(local_store.save_transaction(saved.model_copy(update={"amount": 12.5, "currency": "EUR"})))

        listed = asyncio.run(local_store.list_transactions("alice"))
        assert len(listed) == 1
        assert listed[0].amount == 12.5
        assert listed[0].currency == "EUR"

    def test_delete_is_idempotent(self, local_store):
        saved = asyncio.run(local_store.save_transaction(new_transaction()))

        asyncio.run(local_store.delete_transaction(saved.id))
        asyncio.run(local_store.delete_transaction(saved.id))

        assert asyncio.run(local_store.list_transactions("alice")) == []

    def test_legacy_record_upgraded(self, local_store, session_factory):
        """A stored record without currency reads back as USD."""
        write_raw(session_factory, local_store.transactions_key, [{
            "id": "legacy-1",
            "description": "Old entry",
            "amount": 42,
            "type": "expense",
            "category_id": None,
            "user_id": "alice",
            "created_at": "2023-01-01T00:00:00+00:00",
        }])

        listed = asyncio.run(local_store.list_transactions("alice"))

        assert len(listed) == 1
        assert listed[0].currency == "USD"
        assert listed[0].owner_id == "alice"

    def test_corrupt_json_raises(self, local_store, session_factory):
        with session_factory() as session:
            session.merge(LocalEntry(key=local_store.transactions_key, value="{not json"))
            session.commit()

        with pytest.raises(PersistenceError):
            asyncio.run(local_store.list_transactions("alice"))

    def test_invalid_record_raises(self, local_store, session_factory):
        write_raw(session_factory, local_store.categories_key, [{"id": "c1", "name": "x", "type": "gift"}])

        with pytest.raises(PersistenceError):
            asyncio.run(local_store.list_categories("alice"))

    def test_records_stored_with_type_key(self, local_store, session_factory):
        """The stored JSON uses ``type`` and ``currency`` keys."""
        asyncio.run(local_store.save_transaction(new_transaction()))

        with session_factory() as session:
            raw = json.loads(session.get(LocalEntry, local_store.transactions_key).value)

        assert raw[0]["type"] == "expense"
        assert raw[0]["currency"] == "USD"
        assert "kind" not in raw[0]
