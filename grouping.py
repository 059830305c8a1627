from typing import Dict, Iterable, List, Sequence

from models import FREQUENCY_ORDER, Frequency, Practice


def group_by_frequency(
    practices: Iterable[Practice],
    frequencies: Sequence[Frequency] = FREQUENCY_ORDER,
) -> Dict[Frequency, List[Practice]]:
    """
    Split practices into one bucket per frequency, in the given bucket order.

    Insertion order is kept inside each bucket. Empty buckets stay in the
    result; skipping them is up to whoever renders the list.
    """
    missing = [freq.value for freq in Frequency if freq not in frequencies]
    if missing:
        raise ValueError(f"Bucket order is missing frequencies: {', '.join(missing)}")

    buckets: Dict[Frequency, List[Practice]] = {freq: [] for freq in frequencies}
    for practice in practices:
        buckets[practice.frequency].append(practice)
    return buckets
