# shop/database.py
"""
File-backed table store using CSV (preferred) or Excel (xlsx) files.
Every read-modify-write cycle holds a per-table file lock so concurrent
requests cannot corrupt a file.

Usage:
    from shop.database import db
    db.list_records("items")
    db.get_record("enchantments", "id", "3")
    db.find_records("enchantment_items", "item_id", item_id)
    db.create_record("items", {"name": "Diamond sword", "type": "item"})
"""

from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional
import pandas as pd
import uuid
from filelock import FileLock
from shop.config import settings

DATA_DIR = Path(settings.DATA_DIR)
if not DATA_DIR.exists():
    DATA_DIR.mkdir(parents=True, exist_ok=True)


def _clean_row(row: Dict[str, Any]) -> Dict[str, Any]:
    return {k: (None if pd.isna(v) else v) for k, v in row.items()}


class FileBackedDB:
    """
    Manages CSV / Excel files inside data_dir.
    Table name corresponds to a file name in settings (or you may pass full filename).
    """

    def __init__(self, data_dir: Path = DATA_DIR):
        self.data_dir = Path(data_dir)

    def _file_path(self, table: str) -> Path:
        # explicit filenames are used as-is, relative to data_dir
        if table.endswith(".csv") or table.endswith(".xlsx"):
            return self.data_dir / Path(table)

        mapping = {
            "users": settings.USERS_FILE,
            "activations": settings.ACTIVATIONS_FILE,
            "items": settings.ITEMS_FILE,
            "enchantments": settings.ENCHANTMENTS_FILE,
            "enchantment_items": settings.ENCHANTMENT_ITEMS_FILE,
        }
        filename = mapping.get(table, f"{table}.csv")
        return self.data_dir / Path(filename)

    def _lock_for(self, path: Path) -> FileLock:
        return FileLock(str(path) + ".lock")

    def _read_df(self, table: str) -> pd.DataFrame:
        path = self._file_path(table)
        if not path.exists():
            return pd.DataFrame()
        if path.suffix.lower() in (".xls", ".xlsx"):
            return pd.read_excel(path, dtype=str, keep_default_na=False, na_filter=False)
        return pd.read_csv(path, dtype=str, keep_default_na=False, na_filter=False)

    def _write_df_nolock(self, table: str, df: pd.DataFrame) -> None:
        """
        Write DataFrame for `table` WITHOUT acquiring the file lock.
        Only call this while already holding the lock.
        """
        path = self._file_path(table)
        path.parent.mkdir(parents=True, exist_ok=True)
        if path.suffix.lower() in (".xls", ".xlsx"):
            df.to_excel(path, index=False)
        else:
            df.to_csv(path, index=False)

    # --- high-level primitives ---

    def list_records(self, table: str) -> List[Dict[str, Any]]:
        df = self._read_df(table)
        if df.empty:
            return []
        return [_clean_row(r) for r in df.to_dict(orient="records")]

    def get_record(self, table: str, key: str, value: Any) -> Optional[Dict[str, Any]]:
        df = self._read_df(table)
        if df.empty or key not in df.columns:
            return None
        # everything is compared as string, the files are string-typed
        mask = df[key].astype(str) == str(value)
        if not mask.any():
            return None
        return _clean_row(df[mask].iloc[0].to_dict())

    def find_records(self, table: str, key: str, value: Any) -> List[Dict[str, Any]]:
        """Return every row where df[key] == value, in file order."""
        df = self._read_df(table)
        if df.empty or key not in df.columns:
            return []
        mask = df[key].astype(str) == str(value)
        return [_clean_row(r) for r in df[mask].to_dict(orient="records")]

    def create_record(self, table: str, data: Dict[str, Any], id_field: str = "id") -> Dict[str, Any]:
        """
        Create a new record. If id_field is missing from `data`, a uuid4 hex id is generated.
        Returns the saved record (with id).
        """
        return self.create_records(table, [data], id_field=id_field)[0]

    def create_records(self, table: str, rows: Iterable[Dict[str, Any]], id_field: str = "id") -> List[Dict[str, Any]]:
        """
        Append several rows in a single locked write. Returns the saved rows.
        """
        rows = list(rows)
        if not rows:
            return []
        for data in rows:
            if id_field not in data or not data.get(id_field):
                data[id_field] = uuid.uuid4().hex
        new_df = pd.DataFrame([{k: ("" if v is None else v) for k, v in data.items()} for data in rows])

        path = self._file_path(table)
        path.parent.mkdir(parents=True, exist_ok=True)
        with self._lock_for(path):
            df = self._read_df(table)
            if df.empty and len(df.columns) == 0:
                df = new_df
            else:
                df = pd.concat([df, new_df], ignore_index=True, sort=False)
            self._write_df_nolock(table, df)
        return rows

    def delete_records(self, table: str, key: str, value: Any) -> int:
        """
        Delete all records where df[key] == value. Returns the number of removed rows.
        """
        path = self._file_path(table)
        if not path.exists():
            return 0
        with self._lock_for(path):
            df = self._read_df(table)
            if df.empty or key not in df.columns:
                return 0
            keep = df[key].astype(str) != str(value)
            removed = int((~keep).sum())
            if removed:
                self._write_df_nolock(table, df[keep])
            return removed


# module-level singleton for convenience
db = FileBackedDB()
