"""
Helpers shared by the selection algorithms.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from loguru import logger

from utxoselect.cost import Candidate, ExcessPolicy, build_result, make_candidates
from utxoselect.errors import InsufficientFundsError, NoMatchFoundError
from utxoselect.models import Coin, SelectionOptions, SelectionResult


def prepare_candidates(
    coins: Sequence[Coin], options: SelectionOptions, algorithm: str
) -> tuple[list[Candidate], ExcessPolicy]:
    """
    Validate a request and keep only coins worth spending.

    Args:
        coins: Caller's coins, indexed by position
        options: Selection request
        algorithm: Name used in log lines and error messages

    Returns:
        (candidates with positive effective value in index order, excess policy)

    Raises:
        InvalidOptionsError: If options are invalid
        InsufficientFundsError: If all effective value together cannot cover the request
    """
    options.check()

    candidates = [c for c in make_candidates(coins, options) if c.effective_value > 0]
    available = sum(c.effective_value for c in candidates)
    required = options.required_value

    if available < required:
        raise InsufficientFundsError(
            f"{algorithm}: need {required} effective value, have {available}",
            required=required,
            available=available,
        )

    logger.debug(
        f"{algorithm}: {len(candidates)}/{len(coins)} coins with positive effective value, "
        f"required={required}, available={available}"
    )
    return candidates, ExcessPolicy.from_options(options)


def accumulate(
    algorithm: str,
    ordered: Iterable[Candidate],
    options: SelectionOptions,
    policy: ExcessPolicy,
) -> SelectionResult:
    """
    Take candidates in order until the running total is acceptable.

    Raises:
        NoMatchFoundError: If every prefix leaves an excess that can be neither
            dropped nor turned into change
    """
    required = options.required_value
    selected: list[Candidate] = []
    running = 0

    for candidate in ordered:
        selected.append(candidate)
        running += candidate.effective_value
        if policy.resolve(running - required) is not None:
            result = build_result(algorithm, selected, options, policy)
            if result is not None:
                return result

    raise NoMatchFoundError(
        f"{algorithm}: no prefix of {len(selected)} coins fits the change bounds "
        f"(excess {running - required})"
    )
