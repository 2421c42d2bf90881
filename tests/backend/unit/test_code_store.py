"""
Unit tests for services.code_store module.
Tests both backends: CRUD, newest-first listing and the conditional code update.
"""
import datetime as dt
import json
from decimal import Decimal

import pytest

from wordmate.services.code_store import DbCodeStore, JsonFileCodeStore, get_code_store
from wordmate.services.errors import StoreWriteFailed

UTC = dt.timezone.utc

ORDER_ATTRS = {
    "email": "buyer@example.com",
    "plan_id": "premium-month",
    "plan_name": "高级版",
    "plan_period": "月付",
    "amount": Decimal("3"),
    "currency": "CNY",
    "payment_method": "wechat",
    "notes": "高级版 - 月付",
}


@pytest.fixture
def file_store(tmp_path):
    return JsonFileCodeStore(tmp_path / "store")


class TestJsonFileOrders:
    """Tests for orders.json handling."""

    @pytest.mark.asyncio
    async def test_create_forces_pending_and_assigns_id(self, file_store):
        order = await file_store.create_order({**ORDER_ATTRS, "status": "paid", "id": "mine"})
        assert order.status == "pending"
        assert order.id != "mine"
        assert order.created_at.tzinfo is not None

        loaded = await file_store.get_order(order.id)
        assert loaded == order

    @pytest.mark.asyncio
    async def test_document_is_a_json_array(self, file_store):
        order = await file_store.create_order(ORDER_ATTRS)
        rows = json.loads(file_store.orders_file.read_text(encoding="utf-8"))
        assert isinstance(rows, list)
        assert rows[0]["id"] == order.id
        assert rows[0]["plan_name"] == "高级版"
        assert not file_store.orders_file.with_name("orders.json.tmp").exists()

    @pytest.mark.asyncio
    async def test_update_missing_order_returns_none(self, file_store):
        assert await file_store.update_order("nope", {"status": "paid"}) is None
        assert await file_store.get_order("nope") is None

    @pytest.mark.asyncio
    async def test_update_is_partial(self, file_store):
        order = await file_store.create_order(ORDER_ATTRS)
        paid_at = dt.datetime(2024, 5, 1, 12, tzinfo=UTC)
        updated = await file_store.update_order(order.id, {"status": "paid", "paid_at": paid_at})
        assert updated.status == "paid"
        assert updated.paid_at == paid_at
        assert updated.email == ORDER_ATTRS["email"]

    @pytest.mark.asyncio
    async def test_list_newest_first_with_filter(self, file_store):
        first = await file_store.create_order(ORDER_ATTRS)
        second = await file_store.create_order(ORDER_ATTRS)
        await file_store.update_order(first.id, {"created_at": dt.datetime(2024, 1, 1, tzinfo=UTC)})
        await file_store.update_order(second.id, {"created_at": dt.datetime(2024, 1, 2, tzinfo=UTC), "status": "paid"})

        assert [o.id for o in await file_store.list_orders()] == [second.id, first.id]
        assert [o.id for o in await file_store.list_orders(status="pending")] == [first.id]

    @pytest.mark.asyncio
    async def test_missing_or_corrupt_documents_read_as_empty(self, file_store):
        assert await file_store.list_orders() == []
        file_store.data_dir.mkdir(parents=True)
        file_store.orders_file.write_text("{not json", encoding="utf-8")
        assert await file_store.list_orders() == []

    @pytest.mark.asyncio
    async def test_unreadable_document_is_never_overwritten(self, file_store):
        await file_store.create_order(ORDER_ATTRS)
        second = await file_store.create_order(ORDER_ATTRS)
        damaged = file_store.orders_file.read_text(encoding="utf-8") + ","
        file_store.orders_file.write_text(damaged, encoding="utf-8")

        with pytest.raises(StoreWriteFailed):
            await file_store.create_order(ORDER_ATTRS)
        with pytest.raises(StoreWriteFailed):
            await file_store.update_order(second.id, {"status": "paid"})

        assert file_store.orders_file.read_text(encoding="utf-8") == damaged


class TestJsonFileCodes:
    """Tests for codes.json handling and the compare-and-swap update."""

    @pytest.mark.asyncio
    async def test_create_and_find_exact(self, file_store):
        await file_store.create_code({"code": "ABCD-EFGH-JKMN", "plan_name": "高级版", "period": "月付"})
        found = await file_store.find_code("ABCD-EFGH-JKMN")
        assert found.status == "unused"
        assert await file_store.find_code("abcd-efgh-jkmn") is None

    @pytest.mark.asyncio
    async def test_conditional_update_only_applies_to_expected_status(self, file_store):
        await file_store.create_code({"code": "ABCD-EFGH-JKMN"})
        used_at = dt.datetime(2024, 5, 1, tzinfo=UTC)

        first = await file_store.update_code(
            "ABCD-EFGH-JKMN", {"status": "used", "used_at": used_at, "used_by": "u1"}, expected_status="unused"
        )
        assert first.status == "used"
        assert first.used_by == "u1"

        second = await file_store.update_code(
            "ABCD-EFGH-JKMN", {"status": "used", "used_by": "u2"}, expected_status="unused"
        )
        assert second is None
        assert (await file_store.find_code("ABCD-EFGH-JKMN")).used_by == "u1"

    @pytest.mark.asyncio
    async def test_unreadable_codes_document_refuses_writes(self, file_store):
        await file_store.create_code({"code": "ABCD-EFGH-JKMN"})
        file_store.codes_file.write_text("[{\"code\": ", encoding="utf-8")

        assert await file_store.find_code("ABCD-EFGH-JKMN") is None
        with pytest.raises(StoreWriteFailed):
            await file_store.create_code({"code": "PQRS-TUVW-XYZ2"})
        with pytest.raises(StoreWriteFailed):
            await file_store.update_code("ABCD-EFGH-JKMN", {"status": "used"}, expected_status="unused")
        assert file_store.codes_file.read_text(encoding="utf-8") == "[{\"code\": "

    @pytest.mark.asyncio
    async def test_update_unknown_code_returns_none(self, file_store):
        assert await file_store.update_code("ZZZZ-ZZZZ-ZZZZ", {"status": "used"}) is None


class TestDbStore:
    """Tests for the relational backend."""

    @pytest.mark.asyncio
    async def test_order_round_trip(self, db):
        store = DbCodeStore()
        order = await store.create_order(ORDER_ATTRS)
        assert order.status == "pending"
        assert (await store.get_order(order.id)).email == ORDER_ATTRS["email"]

        updated = await store.update_order(order.id, {"status": "cancelled"})
        assert updated.status == "cancelled"
        assert [o.id for o in await store.list_orders(status="cancelled")] == [order.id]
        assert await store.list_orders(status="paid") == []

    @pytest.mark.asyncio
    async def test_non_uuid_order_id_is_not_found(self, db):
        store = DbCodeStore()
        assert await store.get_order("not-a-uuid") is None
        assert await store.update_order("not-a-uuid", {"status": "paid"}) is None

    @pytest.mark.asyncio
    async def test_conditional_code_update(self, db, create_user):
        store = DbCodeStore()
        user, _ = await create_user()
        await store.create_code({"code": "ABCD-EFGH-JKMN", "plan_name": "旗舰版", "period": "年付"})

        claimed = await store.update_code(
            "ABCD-EFGH-JKMN", {"status": "used", "used_by": str(user.id)}, expected_status="unused"
        )
        assert claimed.status == "used"
        assert claimed.used_by == str(user.id)

        again = await store.update_code("ABCD-EFGH-JKMN", {"status": "used"}, expected_status="unused")
        assert again is None


class TestBackendSelection:

    def test_file_backend(self, monkeypatch, test_settings, tmp_path):
        monkeypatch.setattr(test_settings, "code_store_backend", "file")
        monkeypatch.setattr(test_settings, "data_dir", str(tmp_path / "x"))
        store = get_code_store()
        assert isinstance(store, JsonFileCodeStore)
        assert store.codes_file == tmp_path / "x" / "codes.json"

    def test_db_backend_is_default(self):
        assert isinstance(get_code_store(), DbCodeStore)
