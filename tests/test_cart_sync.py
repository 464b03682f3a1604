"""Cart validator, synchronizer and post-sync verification."""

from decimal import Decimal

import pytest

from conftest import COLD_BREW, DELETED, LATTE, PIE, SCONE, local_line
from cafe.data.ids import is_object_id, new_object_id
from cafe.domain.errors import CartNotFound
from cafe.domain.owner import CartOwner
from cafe.services.cart_service import CartService
from cafe.services.cart_sync import (
    CartSynchronizer,
    SyncFailure,
    is_valid_line,
    validate_snapshot,
)

OWNER = CartOwner(user_id=7)


class FakeStore:
    """Records every call; add_item fails for refs listed in `failing`."""

    def __init__(self, failing=(), delete_error=None):
        self.failing = set(failing)
        self.delete_error = delete_error
        self.calls = []
        self.items = None

    def delete_cart(self, owner):
        self.calls.append(("delete", owner))
        if self.delete_error:
            raise self.delete_error
        if self.items is None:
            raise CartNotFound("no cart")
        self.items = None

    def add_item(self, owner, menu_item_id, quantity, **modifiers):
        self.calls.append(("add", menu_item_id, quantity, modifiers))
        if menu_item_id in self.failing:
            raise ValueError(f"Menu item {menu_item_id} not found")
        if self.items is None:
            self.items = []
        self.items.append(menu_item_id)
        return {"items": list(self.items)}

    def get_cart(self, owner):
        self.calls.append(("get", owner))
        if self.items is None:
            raise CartNotFound("no cart")
        return {"items": list(self.items)}

    @property
    def added(self):
        return [c[1] for c in self.calls if c[0] == "add"]


MIXED = [
    local_line(LATTE, "Latte", 2),
    local_line("short", "Latte"),
    local_line(COLD_BREW, ""),
    local_line(SCONE.upper(), "Date Scone"),
    {"display_name": "No ref"},
    local_line(123456789012345678901234, "Number ref"),
    "not a line",
    None,
    local_line(SCONE, "Date Scone", 1),
    local_line(COLD_BREW, None),
]


class TestValidator:
    def test_keeps_only_well_formed_lines_in_order(self):
        valid = validate_snapshot(MIXED)
        assert valid == [MIXED[0], MIXED[8]]

    def test_result_is_subsequence_of_input(self):
        valid = validate_snapshot(MIXED)
        positions = [next(i for i, line in enumerate(MIXED) if line is v) for v in valid]
        assert positions == sorted(positions)

    def test_revalidation_is_idempotent(self):
        once = validate_snapshot(MIXED)
        assert validate_snapshot(once) == once

    def test_empty_in_empty_out(self):
        assert validate_snapshot([]) == []

    def test_does_not_mutate_lines(self):
        line = local_line(LATTE, "Latte", 1, selected_size="Large")
        before = dict(line)
        validate_snapshot([line])
        assert line == before

    @pytest.mark.parametrize(
        "ref",
        ["a" * 23, "a" * 25, "g" * 24, "A" * 24, " " + "a" * 23, "", None, 42],
    )
    def test_rejects_malformed_refs(self, ref):
        assert not is_valid_line(local_line(ref, "Latte"))

    def test_accepts_lowercase_hex_ref(self):
        assert is_valid_line(local_line("a" * 24, "Latte"))


class TestSynchronize:
    def test_single_valid_line(self):
        store = FakeStore()
        sync = CartSynchronizer(store)

        outcome = sync.synchronize(OWNER, [local_line("a" * 24, "Latte", 2)])

        assert outcome.overall_success
        assert outcome.attempted_count == 1
        assert outcome.succeeded_count == 1
        assert store.calls[0] == ("delete", OWNER)
        assert store.calls[1] == ("add", "a" * 24, 2, {})
        assert sync.verify(OWNER) is True

    def test_bad_ref_never_reaches_store(self):
        store = FakeStore()
        outcome = CartSynchronizer(store).synchronize(OWNER, [local_line("short", "Latte")])

        assert not outcome.overall_success
        assert outcome.failure is SyncFailure.NO_VALID_LINES
        assert outcome.clear_local_cart is True
        assert outcome.discarded_count == 1
        assert store.calls == []

    def test_empty_snapshot_makes_no_store_calls(self):
        store = FakeStore()
        outcome = CartSynchronizer(store).synchronize(OWNER, [])

        assert not outcome.overall_success
        assert outcome.failure is SyncFailure.EMPTY_SNAPSHOT
        assert outcome.clear_local_cart is False
        assert store.calls == []

    def test_later_lines_still_attempted_after_failure(self):
        store = FakeStore(failing={COLD_BREW})
        snapshot = [
            local_line(LATTE, "Latte"),
            local_line(COLD_BREW, "Maple Cold Brew"),
            local_line(SCONE, "Date Scone"),
        ]

        outcome = CartSynchronizer(store).synchronize(OWNER, snapshot)

        assert outcome.overall_success
        assert store.added == [LATTE, COLD_BREW, SCONE]
        assert outcome.attempted_count == 3
        assert outcome.succeeded_count == 2
        assert [o.line["product_ref"] for o in outcome.failed] == [COLD_BREW]
        assert "not found" in outcome.failed[0].error
        assert store.items == [LATTE, SCONE]

    def test_second_line_failing(self):
        store = FakeStore(failing={COLD_BREW})
        snapshot = [local_line(LATTE, "Latte"), local_line(COLD_BREW, "Maple Cold Brew")]

        outcome = CartSynchronizer(store).synchronize(OWNER, snapshot)

        assert outcome.overall_success
        assert store.added == [LATTE, COLD_BREW]
        assert store.items == [LATTE]

    def test_all_adds_failing(self):
        store = FakeStore(failing={LATTE, SCONE})
        snapshot = [local_line(LATTE, "Latte"), local_line(SCONE, "Date Scone")]

        outcome = CartSynchronizer(store).synchronize(OWNER, snapshot)

        assert not outcome.overall_success
        assert outcome.failure is SyncFailure.NO_ITEMS_ADDED
        assert outcome.attempted_count == 2
        assert outcome.succeeded_count == 0
        assert store.added == [LATTE, SCONE]

    def test_delete_failure_is_ignored(self):
        store = FakeStore(delete_error=RuntimeError("store hiccup"))
        outcome = CartSynchronizer(store).synchronize(OWNER, [local_line(LATTE, "Latte")])

        assert outcome.overall_success
        assert store.added == [LATTE]

    def test_modifiers_are_forwarded(self):
        store = FakeStore()
        line = local_line(
            LATTE,
            "Latte",
            3,
            selected_size="Large",
            selected_milk="Oat Milk",
            add_cold_foam=True,
            special_instructions="extra hot",
        )

        CartSynchronizer(store).synchronize(OWNER, [line])

        assert store.calls[1] == (
            "add",
            LATTE,
            3,
            {
                "special_instructions": "extra hot",
                "selected_size": "Large",
                "selected_milk": "Oat Milk",
                "add_cold_foam": True,
            },
        )

    def test_invalid_lines_are_counted_not_replayed(self):
        store = FakeStore()
        outcome = CartSynchronizer(store).synchronize(OWNER, MIXED)

        assert outcome.overall_success
        assert outcome.discarded_count == len(MIXED) - 2
        assert store.added == [LATTE, SCONE]


class TestVerify:
    def test_missing_cart(self):
        assert CartSynchronizer(FakeStore()).verify(OWNER) is False

    def test_empty_cart(self):
        store = FakeStore()
        store.items = []
        assert CartSynchronizer(store).verify(OWNER) is False

    def test_store_error(self):
        class Broken(FakeStore):
            def get_cart(self, owner):
                raise ConnectionError("db gone")

        assert CartSynchronizer(Broken()).verify(OWNER) is False

    def test_cart_deleted_between_sync_and_verify(self):
        store = FakeStore()
        sync = CartSynchronizer(store)
        assert sync.synchronize(OWNER, [local_line(LATTE, "Latte")]).overall_success

        store.items = None

        assert sync.verify(OWNER) is False


class TestSynchronizeAgainstServerCart:
    @pytest.fixture()
    def service(self, db, menu_client):
        return CartService(db=db, menu_client=menu_client)

    def test_replaces_previous_server_cart(self, service):
        service.add_item(OWNER, SCONE, 5)

        outcome = CartSynchronizer(service).synchronize(
            OWNER, [local_line(LATTE, "Latte", 2), local_line(COLD_BREW, "Maple Cold Brew", 1)]
        )

        assert outcome.overall_success
        cart = service.get_cart(OWNER)
        assert [(i["menu_item_id"], i["quantity"]) for i in cart["items"]] == [
            (LATTE, 2),
            (COLD_BREW, 1),
        ]

    def test_stale_and_unavailable_items_are_skipped(self, service):
        snapshot = [
            local_line(DELETED, "Old Special"),
            local_line(LATTE, "Latte", 1),
            local_line(PIE, "Seasonal Pie", 1),
        ]

        outcome = CartSynchronizer(service).synchronize(OWNER, snapshot)

        assert outcome.overall_success
        assert outcome.succeeded_count == 1
        assert [i["menu_item_id"] for i in service.get_cart(OWNER)["items"]] == [LATTE]

    def test_invalid_quantity_is_a_per_item_failure(self, service):
        snapshot = [local_line(LATTE, "Latte", 0), local_line(SCONE, "Date Scone", "2")]

        sync = CartSynchronizer(service)
        outcome = sync.synchronize(OWNER, snapshot)

        assert outcome.failure is SyncFailure.NO_ITEMS_ADDED
        assert sync.verify(OWNER) is False

    def test_string_flags_do_not_add_cold_foam(self, service):
        snapshot = [local_line(LATTE, "Latte", 1, add_cold_foam="false")]

        CartSynchronizer(service).synchronize(OWNER, snapshot)

        line = service.get_cart(OWNER)["items"][0]
        assert line["add_cold_foam"] is False
        assert line["unit_price"] == Decimal("4.50")

    def test_guest_cart_is_separate_from_user_cart(self, service):
        guest = CartOwner(guest_id="sess-42")
        sync = CartSynchronizer(service)

        sync.synchronize(OWNER, [local_line(LATTE, "Latte")])
        sync.synchronize(guest, [local_line(SCONE, "Date Scone")])

        assert [i["menu_item_id"] for i in service.get_cart(OWNER)["items"]] == [LATTE]
        assert [i["menu_item_id"] for i in service.get_cart(guest)["items"]] == [SCONE]


class TestObjectIds:
    def test_minted_ids_are_valid(self):
        ids = {new_object_id() for _ in range(20)}
        assert len(ids) == 20
        assert all(is_object_id(i) for i in ids)

    @pytest.mark.parametrize("value", [LATTE.upper(), LATTE[:-1], LATTE + "0", None, 42])
    def test_rejects(self, value):
        assert not is_object_id(value)
