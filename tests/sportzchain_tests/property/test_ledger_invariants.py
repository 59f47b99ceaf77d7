"""
Property-based tests for token ledger and vesting invariants.

Random sequences of token calls from a small pool of accounts must keep:
- sum of balances equal to total supply
- total supply within the cap
- rejected calls free of side effects

Vesting must vest monotonically, never exceed the allocation and never
release more than has vested.

Uses Hypothesis for property-based testing with random inputs.
"""

import pytest
from hypothesis import given, strategies as st, settings, assume, HealthCheck

from sportzchain.core.contracts.access_control import Role
from sportzchain.core.contracts.erc20 import SportZchainToken
from sportzchain.core.contracts.vesting import TokenVesting, VestingScheduleData
from sportzchain.core.ledger_exceptions import LedgerError, NothingToReleaseError

pytestmark = pytest.mark.property

OWNER = "0x" + "a1" * 20
ACCOUNTS = [OWNER] + ["0x" + f"{i:02x}" * 20 for i in range(0xb0, 0xb4)]
CAP = 10_000
INITIAL_SUPPLY = 4_000

account = st.sampled_from(ACCOUNTS)
amount = st.integers(min_value=0, max_value=CAP + 10)

operation = st.one_of(
    st.tuples(st.just("transfer"), account, account, amount),
    st.tuples(st.just("approve"), account, account, amount),
    st.tuples(st.just("increase_allowance"), account, account, amount),
    st.tuples(st.just("decrease_allowance"), account, account, amount),
    st.tuples(st.just("transfer_from"), account, account, account, amount),
    st.tuples(st.just("mint"), account, account, amount),
    st.tuples(st.just("burn"), account, amount),
    st.tuples(st.just("pause"), account),
    st.tuples(st.just("unpause"), account),
    st.tuples(st.just("grant_role"), account, st.sampled_from(list(Role)), account),
    st.tuples(st.just("revoke_role"), account, st.sampled_from(list(Role)), account),
)


def _fresh_token():
    token = SportZchainToken(
        deployer=OWNER,
        name="Property Token",
        symbol="PRP",
        decimals=0,
        supply_upper_limit=CAP,
        initial_supply=INITIAL_SUPPLY,
        time_provider=lambda: 0,
    )
    token.grant_role(OWNER, Role.BURNER, OWNER)
    token.grant_role(OWNER, Role.PAUSER, OWNER)
    return token


def _snapshot(token):
    return (
        token.balances,
        token.total_supply,
        token.paused,
        {a: {b: token.allowance(a, b) for b in ACCOUNTS} for a in ACCOUNTS},
        {role: token.get_role_members(role) for role in Role},
        len(token.events),
    )


class TestTokenLedgerInvariants:
    """Property tests over random token call sequences."""

    @given(ops=st.lists(operation, max_size=40))
    @settings(max_examples=150, deadline=None, suppress_health_check=[HealthCheck.too_slow])
    def test_supply_conservation_and_atomic_rejection(self, ops):
        token = _fresh_token()

        for name, *args in ops:
            before = _snapshot(token)
            try:
                events = getattr(token, name)(*args)
            except LedgerError:
                assert _snapshot(token) == before, f"{name}{tuple(args)} left side effects"
                continue

            assert len(token.events) == before[-1] + len(events)
            assert sum(token.balances.values()) == token.total_supply
            assert 0 <= token.total_supply <= token.cap
            assert all(value > 0 for value in token.balances.values())

    @given(
        sender=account,
        recipient=account,
        value=st.integers(min_value=0, max_value=INITIAL_SUPPLY),
    )
    @settings(max_examples=100, deadline=None)
    def test_transfer_moves_exact_amount(self, sender, recipient, value):
        token = _fresh_token()
        if sender != OWNER:
            token.transfer(OWNER, sender, INITIAL_SUPPLY)

        sender_before = token.balance_of(sender)
        recipient_before = token.balance_of(recipient)
        token.transfer(sender, recipient, value)

        if sender == recipient:
            assert token.balance_of(sender) == sender_before
        else:
            assert token.balance_of(sender) == sender_before - value
            assert token.balance_of(recipient) == recipient_before + value

    @given(mints=st.lists(st.integers(min_value=0, max_value=CAP), max_size=10))
    @settings(max_examples=100, deadline=None)
    def test_minting_never_exceeds_cap(self, mints):
        token = _fresh_token()
        for value in mints:
            expected_ok = token.total_supply + value <= CAP
            try:
                token.mint(OWNER, OWNER, value)
                assert expected_ok
            except LedgerError:
                assert not expected_ok
            assert token.total_supply <= CAP


class TestVestingInvariants:
    """Property tests for the vesting curve and releases."""

    @given(
        total=st.integers(min_value=1, max_value=10**30),
        duration=st.integers(min_value=1, max_value=10**8),
        cliff_ratio=st.floats(min_value=0.0, max_value=1.0),
        times=st.lists(st.integers(min_value=0, max_value=3 * 10**8), min_size=2, max_size=20),
    )
    @settings(max_examples=200)
    def test_vested_amount_monotonic_and_bounded(self, total, duration, cliff_ratio, times):
        cliff = int(duration * cliff_ratio)
        schedule = VestingScheduleData("0x" + "b0" * 20, total, 10**8, duration, cliff)

        previous = 0
        for t in sorted(times):
            vested = schedule.vested_amount(t)
            assert 0 <= vested <= total
            assert vested >= previous
            if t < schedule.cliff_end:
                assert vested == 0
            if t >= schedule.end_time:
                assert vested == total
            previous = vested

    @given(
        total=st.integers(min_value=1, max_value=1_000),
        duration=st.integers(min_value=1, max_value=1_000),
        cliff=st.integers(min_value=0, max_value=1_000),
        release_times=st.lists(st.integers(min_value=0, max_value=2_500), max_size=15),
    )
    @settings(max_examples=150, deadline=None)
    def test_releases_never_exceed_vested(self, total, duration, cliff, release_times):
        assume(cliff <= duration)
        beneficiary = ACCOUNTS[1]
        token = _fresh_token()
        vesting = TokenVesting(deployer=OWNER, token=token, time_provider=lambda: 0)
        token.transfer(OWNER, vesting.address, total)
        vesting.create_schedule(OWNER, beneficiary, total, 500, duration, cliff)

        for t in sorted(release_times):
            try:
                receipt = vesting.release(beneficiary, beneficiary, t)
            except NothingToReleaseError:
                assert vesting.releasable_amount(beneficiary, t) == 0
                continue
            assert receipt.amount > 0

            schedule = vesting.get_schedule(beneficiary)
            assert schedule.released <= schedule.vested_amount(t) <= total
            assert token.balance_of(beneficiary) == schedule.released
            assert token.balance_of(vesting.address) == total - schedule.released
