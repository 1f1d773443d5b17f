"""Parameterized statements used by the reading store."""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass, field
from typing import Dict

from models.records import BoundaryPolicy, Metric
from storage.errors import StoreInitializationError
from storage.schema import TABLE_NAME

INSERT_READING_SQL = (
    f"INSERT INTO {TABLE_NAME}(latitude, longitude, temperature, humidity, airQuality, noise) "
    "VALUES (?, ?, ?, ?, ?, ?)"
)

INSERT_READING_AT_SQL = (
    f"INSERT INTO {TABLE_NAME}(latitude, longitude, timestamp, temperature, humidity, airQuality, noise) "
    "VALUES (?, ?, ?, ?, ?, ?, ?)"
)

_SELECT_METRIC_TEMPLATE = (
    "SELECT latitude, longitude, timestamp, {column} FROM " + TABLE_NAME + " WHERE {predicate} ORDER BY id"
)

_RANGE_PREDICATES = {
    BoundaryPolicy.inclusive: "timestamp BETWEEN ? AND ?",
    BoundaryPolicy.half_open: "timestamp >= ? AND timestamp < ?",
}


def render_select(metric: Metric, policy: BoundaryPolicy) -> str:
    return _SELECT_METRIC_TEMPLATE.format(
        column=metric.column,
        predicate=_RANGE_PREDICATES[policy],
    )


@dataclass(frozen=True)
class StatementRegistry:
    """Holds the write statements and one range read per metric."""

    policy: BoundaryPolicy = BoundaryPolicy.inclusive
    insert_reading: str = INSERT_READING_SQL
    insert_reading_at: str = INSERT_READING_AT_SQL
    select_metric: Dict[Metric, str] = field(default_factory=dict)

    @classmethod
    def prepare(
        cls,
        connection: sqlite3.Connection,
        policy: BoundaryPolicy = BoundaryPolicy.inclusive,
    ) -> "StatementRegistry":
        """Render every statement and have SQLite compile it once.

        ``EXPLAIN`` compiles the statement without running it, so a missing
        column or table fails here instead of on the first request.
        """
        registry = cls(
            policy=policy,
            select_metric={metric: render_select(metric, policy) for metric in Metric},
        )
        for name, sql in registry.named_statements().items():
            placeholders = (None,) * sql.count("?")
            try:
                connection.execute(f"EXPLAIN {sql}", placeholders).fetchall()
            except sqlite3.Error as exc:
                raise StoreInitializationError(f"Could not prepare {name}: {exc}") from exc
        return registry

    def named_statements(self) -> Dict[str, str]:
        statements = {
            "insert_reading": self.insert_reading,
            "insert_reading_at": self.insert_reading_at,
        }
        for metric, sql in self.select_metric.items():
            statements[f"select_{metric.column}"] = sql
        return statements

    def select_for(self, metric: Metric) -> str:
        return self.select_metric[metric]
