import pandas as pd
import logging
from .file_parser import BaseParser, dataframe_to_records


class CSVParser(BaseParser):
    """Parser for CSV files with a header row"""

    def parse(self, file_path):
        """Parse CSV file and return its rows as records"""
        try:
            df = pd.read_csv(file_path, skip_blank_lines=True)
        except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
            logging.error(f"Error parsing CSV file {file_path}: {str(e)}")
            raise ValueError(f"CSV parsing error: {str(e)}")

        df = df.dropna(how='all')
        logging.info(f"Parsed CSV {file_path}: {len(df)} rows, {len(df.columns)} columns")
        return dataframe_to_records(df)
