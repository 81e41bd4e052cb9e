"""Balancer stable pool math for joins.

Invariant and BPT-out calculations for stable (StableSwap / Curve-style)
pools, used by the reference pool to price EXACT_TOKENS_IN joins. Balances
here exclude the BPT entry and are already scaled to 18 decimals.
"""

from zapper.math.fixed_point import AMP_PRECISION, ONE_18, Bfp

from .errors import StableInvariantDidNotConverge, ZeroBalanceError

_MAX_NEWTON_STEPS = 255


def calculate_invariant(amp: int, balances: list[Bfp]) -> Bfp:
    """StableSwap invariant D for scaled balances.

    Newton's method on Balancer's form of the invariant, in which the
    amplification enters as A*n and the n^n term is folded into
    D_P = D^(n+1) / (n^n * prod(x)). Stops once two iterates are within 1 wei.

    Args:
        amp: A * AMP_PRECISION
        balances: 18-decimal balances, BPT excluded

    Raises:
        ZeroBalanceError: If a balance is not positive
        StableInvariantDidNotConverge: After _MAX_NEWTON_STEPS iterations
    """
    xs = [b.value for b in balances]
    if not xs:
        return Bfp(0)
    if min(xs) <= 0:
        raise ZeroBalanceError(f"Balance at index {xs.index(min(xs))} must be positive")

    n = len(xs)
    total = sum(xs)
    ann = amp * n
    d = total
    for _ in range(_MAX_NEWTON_STEPS):
        d_p = d
        for x in xs:
            d_p = d_p * d // (n * x)
        previous = d
        numerator = (ann * total // AMP_PRECISION + d_p * n) * d
        denominator = (ann - AMP_PRECISION) * d // AMP_PRECISION + (n + 1) * d_p
        d = numerator // denominator
        if abs(d - previous) <= 1:
            return Bfp(d)

    raise StableInvariantDidNotConverge(
        f"Invariant still moving after {_MAX_NEWTON_STEPS} Newton steps"
    )


def calc_bpt_out_given_exact_tokens_in(
    amp: int,
    balances: list[Bfp],
    amounts_in: list[Bfp],
    bpt_total_supply: int,
    current_invariant: Bfp,
    swap_fee: Bfp,
) -> int:
    """BPT minted for an EXACT_TOKENS_IN join.

    The part of each amount that exceeds a proportional join is charged the
    swap fee before the new invariant is measured. A join that keeps the pool
    composition pays no fee.

    Args:
        amp: Amplification parameter (scaled by AMP_PRECISION)
        balances: Current scaled balances
        amounts_in: Scaled amounts joined, aligned with balances
        bpt_total_supply: Circulating BPT supply
        current_invariant: Invariant of `balances`
        swap_fee: Pool swap fee as Bfp

    Returns:
        BPT out (18 decimals)
    """
    if len(balances) != len(amounts_in):
        raise ValueError(f"{len(balances)} balances but {len(amounts_in)} amounts")

    sum_balances = sum(b.value for b in balances)
    if sum_balances == 0:
        raise ZeroBalanceError("Pool balances sum to zero")

    balance_ratios_with_fee: list[Bfp] = []
    invariant_ratio_with_fees = Bfp(0)
    for balance, amount in zip(balances, amounts_in, strict=True):
        weight = balance.div_down(Bfp(sum_balances))
        ratio = balance.add(amount).div_down(balance)
        balance_ratios_with_fee.append(ratio)
        invariant_ratio_with_fees = invariant_ratio_with_fees.add(ratio.mul_down(weight))

    one = Bfp(ONE_18)
    new_balances: list[Bfp] = []
    for balance, amount, ratio in zip(balances, amounts_in, balance_ratios_with_fee, strict=True):
        if ratio > invariant_ratio_with_fees:
            if invariant_ratio_with_fees > one:
                non_taxable = balance.mul_down(invariant_ratio_with_fees.sub(one))
            else:
                non_taxable = Bfp(0)
            taxable = amount.sub(non_taxable)
            amount_without_fee = non_taxable.add(taxable.mul_down(swap_fee.complement()))
        else:
            amount_without_fee = amount
        new_balances.append(balance.add(amount_without_fee))

    new_invariant = calculate_invariant(amp, new_balances)
    invariant_ratio = new_invariant.div_down(current_invariant)
    if invariant_ratio > one:
        return Bfp(bpt_total_supply).mul_down(invariant_ratio.sub(one)).value
    return 0
