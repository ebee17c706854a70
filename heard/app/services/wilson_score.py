"""Wilson score ranking for up/down voted items.

Ranks items by the lower bound of the Wilson score confidence interval for
the proportion of positive votes. Small samples are discounted. At the same
90% ratio, 900 up / 100 down ranks above 9 up / 1 down because the larger
sample is more confidently positive.

Reference: https://www.evanmiller.org/how-not-to-sort-by-average-rating.html
"""

import math
from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Mapping, Tuple, TypeVar

T = TypeVar("T")

DEFAULT_CONFIDENCE = 0.95

# z-scores for common two-sided confidence levels, keyed by whole percent
_Z_SCORES = {
    80: 1.282,
    85: 1.44,
    90: 1.645,
    95: 1.96,
    99: 2.576,
}

# Acklam's rational approximation of the inverse standard normal CDF
_A = (
    -3.969683028665376e01,
    2.209460984245205e02,
    -2.759285104469687e02,
    1.383577518672690e02,
    -3.066479806614716e01,
    2.506628277459239e00,
)
_B = (
    -5.447609879822406e01,
    1.615858368580409e02,
    -1.556989798598866e02,
    6.680131188771972e01,
    -1.328068155288572e01,
)
_C = (
    -7.784894002430293e-03,
    -3.223964580411365e-01,
    -2.400758277161838e00,
    -2.549732539343734e00,
    4.374664141464968e00,
    2.938163982698783e00,
)
_D = (
    7.784695709041462e-03,
    3.224671290700398e-01,
    2.445134137142996e00,
    3.754408661907416e00,
)
_P_LOW = 0.02425
_P_HIGH = 1 - _P_LOW


@dataclass(frozen=True)
class WilsonInterval:
    """Wilson confidence interval; ``score`` is the ranking key (== lower)."""
    lower: float
    upper: float
    score: float


def _tail(q: float) -> float:
    c1, c2, c3, c4, c5, c6 = _C
    d1, d2, d3, d4 = _D
    return (((((c1 * q + c2) * q + c3) * q + c4) * q + c5) * q + c6) / (
        (((d1 * q + d2) * q + d3) * q + d4) * q + 1
    )


def inverse_normal_cdf(p: float) -> float:
    """Approximate the quantile function of the standard normal distribution.

    Piecewise rational approximation (Acklam): one branch per tail and one
    for the central region. Relative error is below 1.15e-9.
    """
    if not 0 < p < 1:
        raise ValueError(f"p must be in (0, 1), got {p!r}")

    if p < _P_LOW:
        return _tail(math.sqrt(-2 * math.log(p)))

    if p <= _P_HIGH:
        a1, a2, a3, a4, a5, a6 = _A
        b1, b2, b3, b4, b5 = _B
        q = p - 0.5
        r = q * q
        return (((((a1 * r + a2) * r + a3) * r + a4) * r + a5) * r + a6) * q / (
            ((((b1 * r + b2) * r + b3) * r + b4) * r + b5) * r + 1
        )

    return -_tail(math.sqrt(-2 * math.log(1 - p)))


def z_score(confidence: float = DEFAULT_CONFIDENCE) -> float:
    """Return the two-sided z-score for a confidence level.

    Common levels (0.80, 0.85, 0.90, 0.95, 0.99, after rounding to two
    decimals) use fixed constants; anything else goes through the inverse
    normal CDF.
    """
    _validate_confidence(confidence)
    percent = math.floor(confidence * 100 + 0.5)
    if percent in _Z_SCORES:
        return _Z_SCORES[percent]
    return inverse_normal_cdf((1 + confidence) / 2)


def _validate_confidence(confidence: float) -> None:
    if not math.isfinite(confidence) or not 0 < confidence < 1:
        raise ValueError(f"confidence must be in (0, 1), got {confidence!r}")


def _validate_counts(positive: int, negative: int) -> None:
    if positive < 0 or negative < 0:
        raise ValueError(
            f"vote counts must be non-negative, got ({positive}, {negative})"
        )


def _clamp(value: float) -> float:
    return min(1.0, max(0.0, value))


def interval(
    positive: int,
    negative: int,
    confidence: float = DEFAULT_CONFIDENCE,
) -> WilsonInterval:
    """Compute the Wilson score interval for ``positive`` out of ``positive + negative``.

    Args:
        positive: Number of positive outcomes (e.g. upvotes)
        negative: Number of negative outcomes (e.g. downvotes)
        confidence: Two-sided confidence level in (0, 1)

    Returns:
        WilsonInterval with both bounds clamped to [0, 1]. No votes at all
        yields an all-zero interval.

    Raises:
        ValueError: If a count is negative or confidence is out of range
    """
    _validate_counts(positive, negative)
    z = z_score(confidence)

    n = positive + negative
    if n == 0:
        return WilsonInterval(lower=0.0, upper=0.0, score=0.0)

    phat = positive / n
    z_squared_over_n = z * z / n
    spread = z * math.sqrt((phat * (1 - phat) + z_squared_over_n / 4) / n)
    center = phat + z_squared_over_n / 2
    denominator = 1 + z_squared_over_n

    lower = _clamp((center - spread) / denominator)
    upper = _clamp((center + spread) / denominator)
    return WilsonInterval(lower=lower, upper=upper, score=lower)


def lower_bound(
    positive: int,
    negative: int,
    confidence: float = DEFAULT_CONFIDENCE,
) -> float:
    """Lower bound of the Wilson score interval; the ranking score."""
    return interval(positive, negative, confidence).lower


def vote_counts(item: Any) -> Tuple[int, int]:
    """Default extractor: ``(upvote_count, downvote_count)`` from an object or mapping."""
    if isinstance(item, Mapping):
        return item["upvote_count"], item["downvote_count"]
    return item.upvote_count, item.downvote_count


def annotate(
    items: Iterable[T],
    confidence: float = DEFAULT_CONFIDENCE,
    key: Callable[[T], Tuple[int, int]] = vote_counts,
) -> List[Tuple[T, float]]:
    """Pair each item with its Wilson lower bound, keeping input order."""
    return [(item, lower_bound(*key(item), confidence)) for item in items]


def sort_descending(
    items: Iterable[T],
    confidence: float = DEFAULT_CONFIDENCE,
    key: Callable[[T], Tuple[int, int]] = vote_counts,
) -> List[T]:
    """Return a new list of ``items`` ordered by Wilson lower bound, best first.

    The sort is stable, so items with equal scores keep their relative
    input order. The input sequence is not modified.
    """
    scored = annotate(items, confidence, key)
    scored.sort(key=lambda pair: pair[1], reverse=True)
    return [item for item, _ in scored]
