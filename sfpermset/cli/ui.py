"""Format and display CLI output."""
from typing import Any, Mapping

from rich import box
from rich.table import Table


def result_table(result: Mapping[str, Any], title: str = None) -> Table:
    """Two-column Field/Value table of an action result"""
    table = Table("Field", "Value", title=title, box=box.SIMPLE)
    for key, value in result.items():
        table.add_row(str(key), "" if value is None else str(value))
    return table
