"""
Tests for the store module.

This module contains tests for AccountStore ordering, lookup, removal
and balance mutation.
"""

from decimal import Decimal

import pytest

from bank_ledger.errors import AccountNotFound, DuplicateAccountNumber, IndexOutOfRange
from bank_ledger.store import AccountStore
from conftest import make_account


class TestAccountStore:
    """Test AccountStore class."""

    def test_initial_accounts_sorted(self, store):
        """Test accounts are sorted by number on creation."""
        assert store.numbers() == ['A0001', 'B0002']
        assert len(store) == 2

    def test_duplicate_initial_accounts(self):
        """Test duplicate numbers are rejected on creation."""
        with pytest.raises(DuplicateAccountNumber):
            AccountStore([make_account('A0001'), make_account('a0001')])

    def test_insert_keeps_order(self, store):
        """Test insert re-sorts and returns the new index."""
        index = store.insert(make_account('A0000'))

        assert index == 0
        assert store.numbers() == ['A0000', 'A0001', 'B0002']

        index = store.insert(make_account('Z9999'))
        assert index == 3

    def test_insert_duplicate(self, store):
        """Test inserting an existing number fails and leaves the store alone."""
        with pytest.raises(DuplicateAccountNumber):
            store.insert(make_account('b0002'))

        assert store.numbers() == ['A0001', 'B0002']

    def test_find_by_number(self, store):
        """Test exact lookup."""
        assert store.find_by_number('A0001') == 0
        assert store.find_by_number('b0002') == 1
        assert store.find_by_number('B000') is None
        assert store.find_by_number('C0003') is None

    def test_index_of_missing(self, store):
        """Test index_of raises for unknown numbers."""
        with pytest.raises(AccountNotFound):
            store.index_of('C0003')

    def test_get_by_number(self, store):
        """Test fetching an account by number."""
        assert store.get('B0002').balance == Decimal('5.00')

    def test_remove_at(self, store):
        """Test removal shifts later records down."""
        removed = store.remove_at(0)

        assert removed.account_number == 'A0001'
        assert store.numbers() == ['B0002']
        assert store.find_by_number('B0002') == 0

    @pytest.mark.parametrize('index', [-1, 2, 10])
    def test_remove_at_out_of_range(self, store, index):
        """Test invalid indices are rejected."""
        with pytest.raises(IndexOutOfRange):
            store.remove_at(index)
        assert len(store) == 2

    def test_getitem_out_of_range(self, store):
        """Test indexing past the end raises IndexOutOfRange."""
        with pytest.raises(IndexOutOfRange):
            store[5]

    def test_mutate_balance_at(self, store):
        """Test positive and negative deltas."""
        assert store.mutate_balance_at(0, Decimal('50.00')) == Decimal('150.00')
        assert store.mutate_balance_at(1, Decimal('-7.50')) == Decimal('-2.50')

    def test_mutate_balance_is_visible_through_references(self, store):
        """Test mutations act on the stored account itself."""
        account = store[0]
        store.mutate_balance_at(0, Decimal('1.00'))

        assert account.balance == Decimal('101.00')

    def test_apply_transfer(self, store):
        """Test both legs apply and the total is conserved."""
        total = store.total_balance()

        balances = store.apply_transfer(0, 1, Decimal('5.00'))

        assert balances == (Decimal('95.00'), Decimal('10.00'))
        assert store.total_balance() == total

    def test_apply_transfer_invalid_destination(self, store):
        """Test a bad destination leaves the source untouched."""
        with pytest.raises(IndexOutOfRange):
            store.apply_transfer(0, 7, Decimal('5.00'))

        assert store[0].balance == Decimal('100.00')

    def test_apply_transfer_same_record(self, store):
        """Test transferring to the same record is refused."""
        with pytest.raises(IndexOutOfRange):
            store.apply_transfer(1, 1, Decimal('1.00'))
        assert store[1].balance == Decimal('5.00')

    def test_accounts_returns_copy(self, store):
        """Test the returned list can be changed without touching the store."""
        accounts = store.accounts()
        accounts.clear()

        assert len(store) == 2

    def test_total_balance_empty(self):
        """Test total of an empty store."""
        assert AccountStore().total_balance() == Decimal('0.00')
