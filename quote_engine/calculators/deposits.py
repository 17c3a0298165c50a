"""
Deposit Allocator

Splits the effective base total across the deposit schedule.
"""

from decimal import Decimal
from typing import Sequence

from ..models import Deposit, DepositAllocation, DepositPlan
from ..money import HUNDRED, round_up_to_ten, to_decimal


DEFAULT_LABELS = (
    "1. deposit - on order",
    "2. payment - before installation",
    "3. payment - after installation",
)


def default_deposits() -> list[Deposit]:
    """The standard 60/30/10 schedule."""
    return [
        Deposit(id=str(i), label=label, percent=percent)
        for i, (label, percent) in enumerate(zip(DEFAULT_LABELS, DepositAllocator.DEFAULT_SPLIT), start=1)
    ]


class DepositAllocator:
    """Computes the displayed amount of every deposit."""

    DEFAULT_SPLIT = (Decimal('60'), Decimal('30'), Decimal('10'))

    def allocate(self, base: Decimal, deposits: Sequence[Deposit]) -> DepositPlan:
        """
        Allocate base across deposits.

        A fixed amount always wins over the percentage. Deposits are
        independent of each other and need not sum to 100%.

        The untouched default 60/30/10 schedule is the only rounded case:
        the first two amounts are rounded up to a multiple of 10 and the
        last one takes the exact remainder, so the three add up to base.
        """
        base = to_decimal(base)

        if self.is_default_split(deposits):
            first = round_up_to_ten(base * self.DEFAULT_SPLIT[0] / HUNDRED)
            second = round_up_to_ten(base * self.DEFAULT_SPLIT[1] / HUNDRED)
            amounts = tuple(to_decimal(amount) for amount in (first, second, base - first - second))
            allocations = tuple(
                DepositAllocation(
                    deposit_id=deposit.id,
                    label=deposit.label,
                    percent=to_decimal(deposit.percent),
                    amount=amount,
                )
                for deposit, amount in zip(deposits, amounts)
            )
            return DepositPlan(base=base, allocations=allocations, rounded_default_split=True)

        return DepositPlan(
            base=base,
            allocations=tuple(self._allocate_one(base, deposit) for deposit in deposits),
        )

    def is_default_split(self, deposits: Sequence[Deposit]) -> bool:
        """True for exactly three 60/30/10 deposits with no fixed amounts."""
        if len(deposits) != len(self.DEFAULT_SPLIT):
            return False
        for deposit, percent in zip(deposits, self.DEFAULT_SPLIT):
            if deposit.fixed_amount is not None:
                return False
            if to_decimal(deposit.percent) != percent:
                return False
        return True

    def _allocate_one(self, base: Decimal, deposit: Deposit) -> DepositAllocation:
        percent = to_decimal(deposit.percent)
        if deposit.fixed_amount is not None:
            return DepositAllocation(
                deposit_id=deposit.id,
                label=deposit.label,
                percent=percent,
                amount=to_decimal(deposit.fixed_amount),
                is_fixed=True,
            )
        return DepositAllocation(
            deposit_id=deposit.id,
            label=deposit.label,
            percent=percent,
            amount=to_decimal(base * percent / HUNDRED),
        )
