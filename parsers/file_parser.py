import pandas as pd
from abc import ABC, abstractmethod


def dataframe_to_records(df):
    """Convert a DataFrame to a list of dicts holding plain Python scalars, nulls as None"""
    df = df.astype(object).where(pd.notna(df), None)
    records = df.to_dict(orient='records')
    return [{str(key): _native(value) for key, value in row.items()} for row in records]


def _native(value):
    if isinstance(value, pd.Timestamp):
        return value.isoformat()
    if hasattr(value, 'item'):  # numpy scalars
        return value.item()
    if hasattr(value, 'isoformat'):  # datetime, date, time
        return value.isoformat()
    return value


class BaseParser(ABC):
    """Abstract base class for upload parsers"""

    @abstractmethod
    def parse(self, file_path):
        """Parse file and return a list of records"""
        pass


class FileParserFactory:
    """Factory class to get appropriate parser for file type"""

    def __init__(self):
        from .csv_parser import CSVParser
        from .excel_parser import ExcelParser

        self.parsers = {
            'csv': CSVParser(),
            'xls': ExcelParser(),
            'xlsx': ExcelParser()
        }

    def get_parser(self, file_type):
        """Get parser for specific file type"""
        parser = self.parsers.get(file_type.lower())
        if not parser:
            raise ValueError('Unsupported file format. Please upload CSV or Excel files.')
        return parser
