"""Shared reading logic for CSV and Excel exports."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Optional
import logging

import pandas as pd

from ..config import FileInputConfig
from .values import is_missing

logger = logging.getLogger(__name__)

EXCEL_SUFFIXES = {".xlsx", ".xlsm", ".xls"}


class TabularParser(ABC):
    """
    Base class for parsers that read one row per entity.

    Subclasses implement ``_normalize_row`` and set ``error_class``.
    """

    error_class: type[Exception] = Exception
    entity_name = "row"

    def __init__(self, input_config: FileInputConfig):
        """
        Initialize the parser.

        Args:
            input_config: File settings and column mappings
        """
        self.input_config = input_config
        self.column_mappings = dict(input_config.column_mappings)

    def read_frame(self, file_path: Path) -> pd.DataFrame:
        """
        Read a CSV or Excel file into a DataFrame.

        CSV cells are read as strings so amounts keep their exact
        formatting until parse time.

        Raises:
            error_class: If the file cannot be read
        """
        try:
            if file_path.suffix.lower() in EXCEL_SUFFIXES:
                return pd.read_excel(
                    file_path,
                    sheet_name=self.input_config.sheet_name or 0,
                    dtype=object,
                )
            return pd.read_csv(
                file_path,
                encoding=self.input_config.encoding,
                delimiter=self.input_config.delimiter,
                dtype=str,
            )
        except Exception as e:
            logger.error(f"Failed to read {file_path}: {e}")
            raise self.error_class(f"Failed to read {file_path}: {e}") from e

    def parse_file(self, file_path: Path) -> list:
        """
        Parse a file and return one entity per valid row.

        Invalid rows are logged and skipped.
        """
        logger.info(f"Parsing {self.entity_name} file: {file_path}")
        df = self.read_frame(file_path)
        items = self.parse_frame(df)
        logger.info(f"Extracted {len(items)} {self.entity_name}s from {file_path.name}")
        return items

    def parse_frame(self, df: pd.DataFrame) -> list:
        items = []
        for idx, row in df.iterrows():
            try:
                item = self._normalize_row(row, int(idx))
            except (ValueError, TypeError, KeyError) as e:
                logger.warning(f"Failed to process row {idx}: {e}")
                continue
            if item is not None:
                items.append(item)
        return items

    @abstractmethod
    def _normalize_row(self, row: pd.Series, idx: int) -> Optional[Any]:
        """Build one entity from a row, or None to skip it."""
        pass

    def _cell(self, row: pd.Series, field: str) -> Any:
        """Value of the column mapped to ``field``, or None."""
        column = self.column_mappings.get(field, field)
        if column not in row.index:
            return None
        value = row[column]
        return None if is_missing(value) else value

    @staticmethod
    def _identifier(value: Any) -> Optional[str]:
        """Stringify an id cell; whole floats from Excel lose their '.0'."""
        if value is None:
            return None
        if isinstance(value, float) and value.is_integer():
            value = int(value)
        text = str(value).strip()
        return text or None
