"""Dagster sensors for vacancy matching."""

from vacancy_matching.sensors.vacancy_sensor import vacancy_change_sensor

__all__ = [
    "vacancy_change_sensor",
]
