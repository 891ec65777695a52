"""
db/binding.py
-------------
Positional, type-directed parameter binding.

Values are collected into a Statement by 1-based position, the same way
placeholders are counted in the SQL text. A missing value is never sent as an
untyped ``None``: it is bound as a NULL cast to the column's declared type, so
PostgreSQL never has to guess the type of a bare NULL.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import Enum
from typing import Any

from psycopg2.extensions import AsIs

TWO_PLACES = Decimal("0.01")


class SqlType(Enum):
    """Declared type of a bound parameter, valued by its PostgreSQL name."""
    TEXT = "text"
    DECIMAL = "numeric"
    INTEGER = "integer"


def to_decimal(value: Any) -> Decimal:
    """
    Coerce a number to a finite Decimal with exactly two fractional digits.

    Raises:
        TypeError: For booleans and non-numeric types.
        ValueError: For malformed strings, NaN and infinities.
    """
    if isinstance(value, bool) or not isinstance(value, (Decimal, int, float, str)):
        raise TypeError(f"Expected a decimal number, got {type(value).__name__}: {value!r}")
    if isinstance(value, float):
        value = repr(value)
    try:
        number = Decimal(value)
    except InvalidOperation as e:
        raise ValueError(f"Not a decimal number: {value!r}") from e
    if not number.is_finite():
        raise ValueError(f"Not a finite decimal number: {value!r}")
    try:
        return number.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)
    except InvalidOperation as e:
        raise ValueError(f"Decimal number too large: {value!r}") from e


def _coerce(value: Any, sql_type: SqlType) -> Any:
    if sql_type is SqlType.TEXT:
        if not isinstance(value, str):
            raise TypeError(f"Expected text, got {type(value).__name__}: {value!r}")
        return value
    if sql_type is SqlType.DECIMAL:
        return to_decimal(value)
    if sql_type is SqlType.INTEGER:
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"Expected an integer, got {type(value).__name__}: {value!r}")
        return value
    raise TypeError(f"Unsupported SQL type: {sql_type!r}")


class Statement:
    """
    SQL text plus the parameters bound to its ``%s`` placeholders.

    Attributes:
        sql: The statement text.
    """

    def __init__(self, sql: str):
        self.sql = sql
        self._values: dict[int, Any] = {}

    @property
    def params(self) -> tuple:
        """
        Bound values in placeholder order.

        Raises:
            ValueError: If a position between 1 and the highest bound one is missing.
        """
        count = max(self._values, default=0)
        missing = [p for p in range(1, count + 1) if p not in self._values]
        if missing:
            raise ValueError(f"No value bound at position(s) {missing}")
        return tuple(self._values[p] for p in range(1, count + 1))

    def execute(self, cur) -> None:
        """Run the statement on a cursor with its bound parameters."""
        cur.execute(self.sql, self.params)


def bind(statement: Statement, position: int, value: Any, sql_type: SqlType) -> None:
    """
    Bind a value at a 1-based placeholder position.

    Args:
        statement: The statement being prepared.
        position: Placeholder index, starting at 1.
        value: The value, or None for SQL NULL.
        sql_type: The declared column type, used to coerce the value and to
            type the NULL when value is None.

    Raises:
        ValueError: If position is below 1 or a decimal value is malformed.
        TypeError: If the value does not fit sql_type.
    """
    if position < 1:
        raise ValueError(f"Parameter positions start at 1, got {position}")
    if value is None:
        statement._values[position] = AsIs(f"NULL::{sql_type.value}")
    else:
        statement._values[position] = _coerce(value, sql_type)
