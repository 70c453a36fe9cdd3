"""
Tests for the spin action.

Tests:
- Spin commits an eligible receiver
- Spinning twice returns the same pair
- Empty pool and unknown giver
- Retry when the picked receiver is taken meanwhile
"""

import random

import pytest

from ..directory import Participant
from ..engine import AllocationTransaction, EligibilityResolver, PriorReceiverPolicy, Spinner
from ..errors import IneligibleGiver, InvalidInput, NoEligibleReceiver, ReceiverTaken, UnknownParticipant
from ..ledger import Assignment, InMemoryLedgerStore


class StaleResolver(EligibilityResolver):
    """Keeps offering receivers from a snapshot taken before other spinners committed."""

    def __init__(self, directory, ledger, stale: list[Participant], stale_calls: int):
        super().__init__(directory, ledger)
        self.stale = stale
        self.stale_calls = stale_calls
        self.calls = 0

    def available_receivers(self, giver_code):
        self.calls += 1
        if self.calls <= self.stale_calls:
            return list(self.stale)
        return super().available_receivers(giver_code)


class TestSpin:

    def test_spin_commits_eligible_receiver(self, spinner, ledger):
        outcome = spinner.spin(" x ")

        assert outcome.created
        assert outcome.assignment.giver_code == "X"
        assert outcome.assignment.receiver_code in {"Y", "Z"}
        assert ledger.list_all() == [outcome.assignment]

    def test_spin_twice_returns_same_pair(self, spinner, ledger):
        first = spinner.spin("X")
        second = spinner.spin("x")

        assert not second.created
        assert second.assignment == first.assignment
        assert len(ledger.list_all()) == 1

    def test_seeded_spin_is_reproducible(self, directory):
        def run():
            fresh = InMemoryLedgerStore()
            spinner = Spinner(
                EligibilityResolver(directory, fresh),
                AllocationTransaction(directory, fresh),
                rng=random.Random(123),
            )
            return spinner.spin("X").assignment.receiver_code

        assert run() == run()

    def test_blank_giver(self, spinner):
        with pytest.raises(InvalidInput):
            spinner.spin("  ")

    def test_unknown_giver(self, spinner):
        with pytest.raises(UnknownParticipant):
            spinner.spin("NOBODY")

    def test_no_eligible_receiver(self, spinner, ledger):
        ledger.insert_if_absent(Assignment("X", "Y", "Alice", "Bob"))
        ledger.insert_if_absent(Assignment("Y", "X", "Bob", "Alice"))

        with pytest.raises(NoEligibleReceiver):
            spinner.spin("Z")
        assert ledger.find_by_giver("Z") is None

    def test_prior_receiver_cannot_spin_under_forbid(self, spinner, transaction):
        transaction.allocate("X", "Y")
        with pytest.raises(IneligibleGiver):
            spinner.spin("Y")

    def test_prior_receiver_with_empty_pool_is_ineligible(self, spinner, ledger):
        """The policy decides before the pool does."""
        # W left the directory after giving; Y and Z hold each other
        ledger.insert_if_absent(Assignment("W", "X", "Walt", "Alice"))
        ledger.insert_if_absent(Assignment("Y", "Z", "Bob", "Cara"))
        ledger.insert_if_absent(Assignment("Z", "Y", "Cara", "Bob"))
        assert spinner.resolver.available_receivers("X") == []

        with pytest.raises(IneligibleGiver):
            spinner.spin("X")

    def test_max_attempts_must_be_positive(self, resolver, transaction):
        with pytest.raises(ValueError):
            Spinner(resolver, transaction, max_attempts=0)


class TestSpinRetry:

    def test_retries_after_receiver_taken(self, directory, ledger):
        ledger.insert_if_absent(Assignment("Y", "Z", "Bob", "Cara"))
        # First pick comes from a snapshot where Z was still free
        resolver = StaleResolver(
            directory, ledger,
            stale=[Participant("Z", "Cara")],
            stale_calls=1,
        )
        transaction = AllocationTransaction(directory, ledger, PriorReceiverPolicy.ALLOW)
        spinner = Spinner(resolver, transaction, rng=random.Random(1))

        outcome = spinner.spin("X")

        assert outcome.assignment.receiver_code == "Y"
        assert resolver.calls == 2

    def test_gives_up_after_max_attempts(self, directory, ledger):
        ledger.insert_if_absent(Assignment("Y", "Z", "Bob", "Cara"))
        resolver = StaleResolver(
            directory, ledger,
            stale=[Participant("Z", "Cara")],
            stale_calls=10,
        )
        transaction = AllocationTransaction(directory, ledger, PriorReceiverPolicy.ALLOW)
        spinner = Spinner(resolver, transaction, max_attempts=3)

        with pytest.raises(ReceiverTaken):
            spinner.spin("X")
        assert resolver.calls == 3
        assert ledger.find_by_giver("X") is None


class TestSpinEveryone:

    def test_everyone_spins_once(self, large_directory, ledger):
        """Under the allow policy every participant can spin; pairs stay unique."""
        resolver = EligibilityResolver(large_directory, ledger)
        transaction = AllocationTransaction(large_directory, ledger, PriorReceiverPolicy.ALLOW)
        spinner = Spinner(resolver, transaction, rng=random.Random(5))
        codes = [p.code for p in large_directory.list_all()]

        for code in codes:
            try:
                spinner.spin(code)
            except NoEligibleReceiver:
                # Only the last spinner can be left with nobody but themself
                assert code == codes[-1]

        committed = ledger.list_all()
        assert len({a.giver_code for a in committed}) == len(committed)
        assert len({a.receiver_code for a in committed}) == len(committed)
        assert all(a.giver_code != a.receiver_code for a in committed)
        assert len(committed) >= len(codes) - 1
