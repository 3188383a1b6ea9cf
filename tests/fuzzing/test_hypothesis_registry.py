"""
Hypothesis-based property tests for the currency registry.

Properties checked:
- find / find_by_iso_numeric are total: arbitrary input never raises.
- register then find returns every present attribute unchanged.
- Both indices agree after any sequence of register/unregister calls,
  and after inheriting from a seeded currency.
- reset() undoes any sequence of runtime mutations.
- Handle ordering follows priority alone; equality follows id alone.
"""

import string
from decimal import Decimal

from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st

from currency_kernel.domain.currency_table import CurrencyTable
from currency_kernel.domain.seed import StaticSeedSource
from currency_kernel.exceptions import DuplicateIsoNumericError

from tests.conftest import SAMPLE_SEED

currency_ids = st.text(alphabet=string.ascii_lowercase, min_size=3, max_size=6)
iso_numerics = st.integers(min_value=0, max_value=999)
priorities = st.one_of(st.none(), st.integers(min_value=-10, max_value=1000))

attribute_bags = st.fixed_dictionaries(
    {"id": currency_ids},
    optional={
        "priority": st.integers(min_value=0, max_value=1000),
        "name": st.text(min_size=1, max_size=20),
        "symbol": st.text(min_size=1, max_size=4),
        "subunit_to_unit": st.sampled_from([1, 5, 10, 100, 1000]),
        "decimal_mark": st.sampled_from([".", ","]),
        "thousands_separator": st.sampled_from([",", ".", " ", ""]),
        "symbol_first": st.booleans(),
        "smallest_denomination": st.integers(min_value=1, max_value=100),
    },
)

mutations = st.lists(
    st.one_of(
        st.tuples(st.just("register"), currency_ids, st.one_of(st.none(), iso_numerics)),
        st.tuples(st.just("unregister"), st.sampled_from([b["id"] for b in SAMPLE_SEED]) | currency_ids),
    ),
    max_size=30,
)


def _table() -> CurrencyTable:
    return CurrencyTable(StaticSeedSource(SAMPLE_SEED, name="fuzz"))


def _apply(table: CurrencyTable, operations) -> None:
    for operation in operations:
        if operation[0] == "register":
            _, currency_id, number = operation
            attrs = {"id": currency_id}
            if number is not None:
                attrs["iso_numeric"] = number
            try:
                table.register(attrs)
            except DuplicateIsoNumericError:
                continue
        else:
            table.unregister(operation[1])


def _assert_indices_agree(table: CurrencyTable) -> None:
    numbered = {}
    for handle in table.all_currencies():
        record = handle.record
        if record.iso_numeric is not None:
            numbered[int(record.iso_numeric)] = handle
    for number, handle in numbered.items():
        assert table.find_by_iso_numeric(number) == handle
    for number in range(0, 1000, 7):
        if number not in numbered:
            assert table.find_by_iso_numeric(number) is None


class TestTotalLookups:

    @given(identifier=st.one_of(st.text(), st.binary(), st.integers(), st.floats(), st.none()))
    @settings(max_examples=200, suppress_health_check=[HealthCheck.too_slow])
    def test_find_never_raises(self, identifier):
        table = _table()
        result = table.find(identifier)
        assert result is None or result.id in table.ids()

    @given(
        value=st.one_of(
            st.text(),
            st.binary(),
            st.integers(),
            st.floats(),
            st.decimals(min_value=-10**6, max_value=10**6),
            st.just(Decimal("NaN")),
            st.none(),
        )
    )
    @settings(max_examples=200)
    def test_find_by_iso_numeric_never_raises(self, value):
        table = _table()
        result = table.find_by_iso_numeric(value)
        assert result is None or result.record.iso_numeric is not None


class TestRegistration:

    @given(attrs=attribute_bags)
    @settings(max_examples=100)
    def test_present_attributes_round_trip(self, attrs):
        table = _table()
        table.register(attrs)
        handle = table.find(attrs["id"])
        for name, value in attrs.items():
            assert getattr(handle, name) == value

    @given(operations=mutations)
    @settings(max_examples=100)
    def test_indices_agree_after_mutations(self, operations):
        table = _table()
        _apply(table, operations)
        _assert_indices_agree(table)

    @given(operations=mutations)
    @settings(max_examples=100)
    def test_reset_restores_seed(self, operations):
        table = _table()
        original = [h.to_attributes() for h in table]
        _apply(table, operations)
        table.reset()
        assert [h.to_attributes() for h in table] == original
        _assert_indices_agree(table)

    @given(
        parent=st.sampled_from([b["id"] for b in SAMPLE_SEED]),
        child_key=st.one_of(st.none(), st.just("SAME"), st.just("UPPER"), currency_ids),
        overrides=st.fixed_dictionaries(
            {},
            optional={
                "name": st.text(min_size=1, max_size=20),
                "symbol": st.text(min_size=1, max_size=4),
                "priority": st.integers(min_value=0, max_value=1000),
            },
        ),
    )
    @settings(max_examples=100)
    def test_indices_agree_after_inherit(self, parent, child_key, overrides):
        table = _table()
        parent_numeric = table.get_record(parent).iso_numeric
        attrs = dict(overrides)
        if child_key == "SAME":
            attrs["id"] = parent
        elif child_key == "UPPER":
            attrs["id"] = parent.upper()
        elif child_key is not None:
            attrs["id"] = child_key

        child = table.inherit(parent, attrs)

        _assert_indices_agree(table)
        if child.id == parent:
            assert child.record.iso_numeric == parent_numeric
        else:
            assert child.record.iso_numeric is None
            assert table.get_record(parent).iso_numeric == parent_numeric


class TestHandleRelations:

    @given(first=priorities, second=priorities)
    @settings(max_examples=100)
    def test_ordering_follows_priority_only(self, first, second):
        table = CurrencyTable()
        a = table.register({"id": "aaa", "priority": first})
        b = table.register({"id": "bbb", "priority": second})

        assert a != b
        if first == second:
            assert a.compare(b) == 0
        elif first is None:
            assert a > b
        elif second is None:
            assert a < b
        else:
            assert (a < b) == (first < second)

    @given(currency_id=currency_ids, priority=priorities)
    @settings(max_examples=50)
    def test_equality_ignores_priority(self, currency_id, priority):
        table = CurrencyTable()
        before = table.register({"id": currency_id, "priority": 1})
        after = table.register({"id": currency_id.upper(), "priority": priority})
        assert before == after
        assert hash(before) == hash(after)
