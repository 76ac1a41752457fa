"""Salary rounding, clamping, dead cap, and contract validation helpers."""

from __future__ import annotations

import math
from typing import Optional

from ..config import LeagueConfig, league_config


def round_half_up(value: float) -> int:
    """Round to the nearest whole dollar, .5 going up (2.5 -> 3, -2.5 -> -2)."""
    return math.floor(value + 0.5)


def clamp(value: int, low: int, high: int) -> int:
    return max(low, min(value, high))


def calculate_dead_cap(
    salary: int,
    years_remaining: int,
    config: LeagueConfig = league_config,
) -> list[dict]:
    """Dead cap schedule for releasing a contract.

    Returns ``[{year, percentage, amount}]``. $1 contracts keep 100% dead cap.
    Amounts round up to the whole dollar.
    """
    if salary <= 1:
        return [{"year": 1, "percentage": 1.0, "amount": 1}]

    percentages = config.dead_cap_percentages.get(years_remaining, [0.5])
    return [
        {"year": i + 1, "percentage": pct, "amount": math.ceil(salary * pct)}
        for i, pct in enumerate(percentages)
    ]


def total_dead_cap(salary: int, years_remaining: int, config: LeagueConfig = league_config) -> int:
    return sum(row["amount"] for row in calculate_dead_cap(salary, years_remaining, config))


def calculate_cap_savings(salary: int, years_remaining: int, config: LeagueConfig = league_config) -> int:
    """Cap freed this season by releasing: salary minus year-one dead cap."""
    schedule = calculate_dead_cap(salary, years_remaining, config)
    first_year = schedule[0]["amount"] if schedule else 0
    return salary - first_year


def get_min_salary(years: int, config: LeagueConfig = league_config) -> int:
    return config.min_salaries.get(years, 1)


def validate_salary(
    position: str,
    salary: int,
    years: int,
    config: LeagueConfig = league_config,
) -> tuple[bool, Optional[str]]:
    """Check a salary against the contract-length minimum and position max."""
    profile = config.positions.get(position)
    if profile is None:
        return True, None

    minimum = get_min_salary(years, config)
    if salary < minimum:
        return False, f"Minimum salary for {years}-year contract is ${minimum}"
    if salary > profile.max_salary:
        return False, f"Maximum {position} salary is ${profile.max_salary}"
    return True, None
