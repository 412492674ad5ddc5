"""I/O utilities: filesystem operations and snapshot loading."""

from infrastructure.io.datasets import read_table
from infrastructure.io.fs import ensure_exists, write_json

__all__ = [
    "ensure_exists",
    "write_json",
    "read_table",
]
