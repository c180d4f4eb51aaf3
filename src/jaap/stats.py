"""Aggregate statistics over logged recitations."""

import math
from collections import defaultdict
from dataclasses import dataclass

from .sync.models import Recitation


@dataclass
class MantraStats:
    """Totals and averages across all recitations."""

    total_recitations: int = 0
    total_count: int = 0
    total_duration: float = 0
    average_count: int = 0
    average_duration: int = 0
    most_recited_mantra: str = ""


@dataclass
class DailyStats:
    """Totals for one calendar day (YYYY-MM-DD)."""

    date: str
    count: int = 0
    duration: float = 0
    recitations: int = 0


def mantra_distribution(recitations: list[Recitation]) -> dict[str, int]:
    """Sum of counts per mantra name, in first-seen order."""
    distribution: dict[str, int] = {}
    for recitation in recitations:
        distribution[recitation.mantra_name] = (
            distribution.get(recitation.mantra_name, 0) + recitation.count
        )
    return distribution


def compute_stats(recitations: list[Recitation]) -> MantraStats:
    """Compute totals, rounded averages and the most recited mantra.

    The most recited mantra is the one with the highest summed count; ties
    go to the mantra seen first.
    """
    if not recitations:
        return MantraStats()

    total = len(recitations)
    total_count = sum(r.count for r in recitations)
    total_duration = sum(r.duration_minutes for r in recitations)

    most_recited, best = "", 0
    for name, count in mantra_distribution(recitations).items():
        if count > best:
            most_recited, best = name, count

    return MantraStats(
        total_recitations=total,
        total_count=total_count,
        total_duration=total_duration,
        average_count=math.floor(total_count / total + 0.5),
        average_duration=math.floor(total_duration / total + 0.5),
        most_recited_mantra=most_recited,
    )


def daily_stats(recitations: list[Recitation]) -> list[DailyStats]:
    """Per-day totals sorted by date. Recitations without a timestamp are skipped."""
    days: dict[str, DailyStats] = defaultdict(lambda: DailyStats(date=""))
    for recitation in recitations:
        if recitation.timestamp is None:
            continue
        date = recitation.timestamp.strftime("%Y-%m-%d")
        day = days[date]
        day.date = date
        day.count += recitation.count
        day.duration += recitation.duration_minutes
        day.recitations += 1
    return sorted(days.values(), key=lambda day: day.date)
