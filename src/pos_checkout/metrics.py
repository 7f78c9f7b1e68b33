"""In-process checkout metrics with Prometheus text export.

Counters and histograms are collected in module-level objects and can be
rendered in the Prometheus exposition format with
:func:`generate_metrics_text`.  Only the standard library is used.
"""

from collections import defaultdict
from threading import Lock
from typing import Dict, Iterable, List, Tuple


class Metric:
    """Base class for all metrics."""

    def __init__(self, name: str, description: str, label_names: Iterable[str]):
        self.name = name
        self.description = description
        self.label_names = list(label_names)
        self._lock = Lock()
        _METRIC_REGISTRY.append(self)

    def _label_tuple(self, labels: Dict[str, str]) -> Tuple[str, ...]:
        return tuple(str(labels.get(k, "")) for k in self.label_names)

    def _format_labels(self, label_values: Tuple[str, ...]) -> str:
        if not self.label_names:
            return ""
        pairs = [f'{name}="{value}"' for name, value in zip(self.label_names, label_values)]
        return "{" + ",".join(pairs) + "}"

    def to_prometheus(self) -> List[str]:
        """Return a list of strings in Prometheus exposition format."""
        raise NotImplementedError


class Counter(Metric):
    """Monotonic counter.  ``COUNTER.inc(type="empty_cart")`` adds one."""

    def __init__(self, name: str, description: str, label_names: Iterable[str]):
        super().__init__(name, description, label_names)
        self._values: Dict[Tuple[str, ...], float] = defaultdict(float)

    def inc(self, amount: float = 1.0, **labels: str) -> None:
        if amount < 0:
            raise ValueError("Counters can only increase")
        label_tuple = self._label_tuple(labels)
        with self._lock:
            self._values[label_tuple] += amount

    def get(self, **labels: str) -> float:
        with self._lock:
            return self._values.get(self._label_tuple(labels), 0.0)

    def to_prometheus(self) -> List[str]:
        lines = [f"# HELP {self.name} {self.description}", f"# TYPE {self.name} counter"]
        with self._lock:
            for label_values, value in self._values.items():
                lines.append(f"{self.name}{self._format_labels(label_values)} {value}")
        return lines


class Histogram(Metric):
    """Histogram with fixed ascending bucket upper bounds.

    Values above the largest bucket only show up in the ``+Inf`` bucket.
    """

    def __init__(self, name: str, description: str, label_names: Iterable[str], buckets: Iterable[float]):
        super().__init__(name, description, label_names)
        self.buckets = sorted(float(b) for b in buckets)
        # counts[label_tuple][i] = observations falling in (buckets[i-1], buckets[i]]
        self.counts: Dict[Tuple[str, ...], List[int]] = defaultdict(lambda: [0] * len(self.buckets))
        self.sums: Dict[Tuple[str, ...], float] = defaultdict(float)
        self.total_counts: Dict[Tuple[str, ...], int] = defaultdict(int)

    def observe(self, value: float, **labels: str) -> None:
        label_tuple = self._label_tuple(labels)
        with self._lock:
            for idx, upper in enumerate(self.buckets):
                if value <= upper:
                    self.counts[label_tuple][idx] += 1
                    break
            self.total_counts[label_tuple] += 1
            self.sums[label_tuple] += float(value)

    def count(self, **labels: str) -> int:
        with self._lock:
            return self.total_counts.get(self._label_tuple(labels), 0)

    def to_prometheus(self) -> List[str]:
        lines = [f"# HELP {self.name} {self.description}", f"# TYPE {self.name} histogram"]
        with self._lock:
            for label_values in self.total_counts.keys():
                label_str = self._format_labels(label_values)
                cumulative = 0
                for idx, upper in enumerate(self.buckets):
                    cumulative += self.counts[label_values][idx]
                    if label_str:
                        bucket_labels = label_str[:-1] + f',le="{upper}"' + "}"
                    else:
                        bucket_labels = '{le="' + str(upper) + '"}'
                    lines.append(f"{self.name}_bucket{bucket_labels} {cumulative}")
                total = self.total_counts[label_values]
                inf_labels = label_str[:-1] + ',le="+Inf"}' if label_str else '{le="+Inf"}'
                lines.append(f"{self.name}_bucket{inf_labels} {total}")
                lines.append(f"{self.name}_sum{label_str} {self.sums[label_values]}")
                lines.append(f"{self.name}_count{label_str} {total}")
        return lines


_METRIC_REGISTRY: List[Metric] = []


def generate_metrics_text() -> bytes:
    """Generate the text representation of all registered metrics."""
    lines: List[str] = []
    for metric in _METRIC_REGISTRY:
        lines.extend(metric.to_prometheus())
    return "\n".join(lines).encode("utf-8")


# -----------------------------------------------------------------------------
# Metrics recorded by the cart and checkout routine.
# -----------------------------------------------------------------------------

# Checkout duration in seconds, labelled by outcome ("success" or "error")
CHECKOUT_DURATION_SECONDS = Histogram(
    name="checkout_duration_seconds",
    description="Duration of checkout operations in seconds",
    label_names=["outcome"],
    buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0],
)

CHECKOUT_ERROR_TOTAL = Counter(
    name="checkout_error_total",
    description="Total number of checkout errors, labelled by type",
    label_names=["type"],
)

# Rejected cart additions, labelled by error type
CART_REJECTIONS_TOTAL = Counter(
    name="cart_rejections_total",
    description="Total number of rejected cart additions, labelled by type",
    label_names=["type"],
)

ITEMS_SOLD_TOTAL = Counter(
    name="items_sold_total",
    description="Units sold through successful checkouts, labelled by product kind",
    label_names=["kind"],
)
