"""
Statistical analysis of benchmark samples.

Estimates carry bias-corrected and accelerated (BCa) bootstrap confidence
intervals; outliers are classified with Tukey fences.
"""

import math
import random
from dataclasses import dataclass, field
from statistics import NormalDist
from typing import Callable, Dict, List, Any, Optional, Sequence

_NORMAL = NormalDist()


@dataclass
class Estimate:
    """A point estimate with its confidence interval."""
    point: float = 0.0
    lower_bound: float = 0.0
    upper_bound: float = 0.0
    confidence_interval: float = 0.95

    def to_dict(self) -> Dict[str, Any]:
        return {
            "point": self.point,
            "lower_bound": self.lower_bound,
            "upper_bound": self.upper_bound,
            "confidence_interval": self.confidence_interval,
        }


@dataclass
class OutlierClassification:
    """Counts of samples outside the Tukey fences."""
    samples_seen: int = 0
    low_severe: int = 0   # below q1 - 3 * iqr
    low_mild: int = 0     # below q1 - 1.5 * iqr
    high_mild: int = 0    # above q3 + 1.5 * iqr
    high_severe: int = 0  # above q3 + 3 * iqr

    def total(self) -> int:
        return self.low_severe + self.low_mild + self.high_mild + self.high_severe

    def to_dict(self) -> Dict[str, Any]:
        return {
            "samples_seen": self.samples_seen,
            "low_severe": self.low_severe,
            "low_mild": self.low_mild,
            "high_mild": self.high_mild,
            "high_severe": self.high_severe,
        }


@dataclass
class SampleAnalysis:
    """Summary statistics derived from one benchmark's samples."""
    samples: List[float] = field(default_factory=list)
    mean: Estimate = field(default_factory=Estimate)
    standard_deviation: Estimate = field(default_factory=Estimate)
    outliers: OutlierClassification = field(default_factory=OutlierClassification)
    outlier_variance: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "mean": self.mean.to_dict(),
            "standard_deviation": self.standard_deviation.to_dict(),
            "outliers": self.outliers.to_dict(),
            "outlier_variance": self.outlier_variance,
        }


def mean(data: Sequence[float]) -> float:
    if not data:
        return 0.0
    return sum(data) / len(data)


def standard_deviation(data: Sequence[float]) -> float:
    """Population standard deviation."""
    if not data:
        return 0.0
    m = mean(data)
    return math.sqrt(sum((x - m) ** 2 for x in data) / len(data))


def weighted_average_quantile(k: int, q: int, sorted_data: Sequence[float]) -> float:
    """k-th q-quantile, interpolating between neighbouring samples."""
    n = len(sorted_data)
    index = (n - 1) * k / q
    j = int(index)
    g = index - j
    if j + 1 >= n:
        return sorted_data[j]
    return sorted_data[j] + g * (sorted_data[j + 1] - sorted_data[j])


def classify_outliers(data: Sequence[float]) -> OutlierClassification:
    """
    Classify samples against Tukey fences on the quartiles.

    Args:
        data: Samples, in any order

    Returns:
        OutlierClassification with mild and severe counts on both sides
    """
    result = OutlierClassification(samples_seen=len(data))
    if not data:
        return result

    sorted_data = sorted(data)
    q1 = weighted_average_quantile(1, 4, sorted_data)
    q3 = weighted_average_quantile(3, 4, sorted_data)
    iqr = q3 - q1
    low_severe_fence = q1 - iqr * 3
    low_mild_fence = q1 - iqr * 1.5
    high_mild_fence = q3 + iqr * 1.5
    high_severe_fence = q3 + iqr * 3

    for t in data:
        if t < low_severe_fence:
            result.low_severe += 1
        elif t < low_mild_fence:
            result.low_mild += 1
        elif t > high_severe_fence:
            result.high_severe += 1
        elif t > high_mild_fence:
            result.high_mild += 1
    return result


def resample(
    rng: random.Random,
    resamples: int,
    data: Sequence[float],
    estimator: Callable[[Sequence[float]], float],
) -> List[float]:
    """Sorted estimator values over `resamples` bootstrap resamples."""
    n = len(data)
    return sorted(estimator(rng.choices(data, k=n)) for _ in range(resamples))


def jackknife(
    estimator: Callable[[Sequence[float]], float],
    data: Sequence[float],
) -> List[float]:
    """Estimator values with each sample left out in turn."""
    return [estimator(list(data[:i]) + list(data[i + 1:])) for i in range(len(data))]


def bootstrap(
    confidence_level: float,
    data: Sequence[float],
    resampled: Sequence[float],
    estimator: Callable[[Sequence[float]], float],
) -> Estimate:
    """
    BCa bootstrap confidence interval for an estimator.

    Args:
        confidence_level: e.g. 0.95
        data: Original samples
        resampled: Sorted estimator values over the bootstrap resamples
        estimator: Statistic being estimated

    Returns:
        Estimate with point value and interval bounds
    """
    point = estimator(data)
    degenerate = Estimate(point, point, point, confidence_level)
    if len(data) == 1 or not resampled:
        return degenerate

    jack = jackknife(estimator, data)
    jack_mean = mean(jack)
    sum_squares = 0.0
    sum_cubes = 0.0
    for x in jack:
        d = jack_mean - x
        sum_squares += d * d
        sum_cubes += d * d * d
    accel = sum_cubes / (6 * sum_squares ** 1.5) if sum_squares > 0 else 0.0

    n = len(resampled)
    prob_n = sum(1 for x in resampled if x < point) / n
    # Uniform samples leave no spread to build an interval from
    if prob_n == 0 or prob_n == 1:
        return degenerate

    bias = _NORMAL.inv_cdf(prob_n)
    z1 = _NORMAL.inv_cdf((1.0 - confidence_level) / 2.0)

    def cumn(x: float) -> int:
        return round(_NORMAL.cdf(x) * n)

    def a(b: float) -> float:
        return bias + b / (1.0 - accel * b)

    lo = max(cumn(a(bias + z1)), 0)
    hi = min(cumn(a(bias - z1)), n - 1)
    return Estimate(point, resampled[lo], resampled[hi], confidence_level)


def outlier_variance(mean_estimate: Estimate, stddev_estimate: Estimate, n: int) -> float:
    """
    Fraction of the sample variance explained by outliers.

    Returns:
        A value in [0, 1]; 0 when there is no variance at all
    """
    sb = stddev_estimate.point
    if sb <= 0 or n <= 0:
        return 0.0
    mn = mean_estimate.point / n
    mg_min = mn / 2.0
    sg = min(mg_min / 4.0, sb / math.sqrt(n))
    sg2 = sg * sg
    sb2 = sb * sb

    def c_max(x: float) -> int:
        k = mn - x
        d = k * k
        nd = n * d
        k0 = -n * nd
        k1 = sb2 - n * sg2 + nd
        det = k1 * k1 - 4 * sg2 * k0
        return int(-2.0 * k0 / (k1 + math.sqrt(det)))

    def var_out(c: int) -> float:
        nc = n - c
        return (nc / n) * (sb2 - nc * sg2)

    return min(var_out(1), var_out(min(c_max(0), c_max(mg_min)))) / sb2


def analyse_samples(
    cfg,
    env,
    samples: Sequence[float],
    rng: Optional[random.Random] = None,
) -> SampleAnalysis:
    """
    Turn raw samples into summary statistics.

    Args:
        cfg: Run configuration (resamples, confidence_interval)
        env: Calibrated environment (unused by the default analysis)
        samples: Per-iteration times in nanoseconds
        rng: Random source for resampling

    Returns:
        SampleAnalysis with mean, standard deviation and outlier data
    """
    data = list(samples)
    rng = rng or random.Random()

    mean_resamples = resample(rng, cfg.resamples, data, mean) if data else []
    stddev_resamples = resample(rng, cfg.resamples, data, standard_deviation) if data else []

    mean_estimate = bootstrap(cfg.confidence_interval, data, mean_resamples, mean)
    stddev_estimate = bootstrap(cfg.confidence_interval, data, stddev_resamples, standard_deviation)

    return SampleAnalysis(
        samples=data,
        mean=mean_estimate,
        standard_deviation=stddev_estimate,
        outliers=classify_outliers(data),
        outlier_variance=outlier_variance(mean_estimate, stddev_estimate, len(data)),
    )
