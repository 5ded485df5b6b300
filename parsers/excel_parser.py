import pandas as pd
import logging
from .file_parser import BaseParser, dataframe_to_records


class ExcelParser(BaseParser):
    """Parser for Excel files (.xls and .xlsx); reads the first worksheet"""

    def parse(self, file_path):
        """Parse the first sheet, using its first row as headers"""
        try:
            df = pd.read_excel(file_path, sheet_name=0)
        except Exception as e:
            logging.error(f"Error parsing Excel file {file_path}: {str(e)}")
            raise ValueError(f"Failed to process Excel file: {str(e)}")

        if df.empty:
            raise ValueError('Excel file must have at least 2 rows (header + data)')

        # Rows whose cells are all blank carry no data
        df = df.replace('', pd.NA).dropna(how='all')

        # Handle unnamed columns (blank header cells)
        df.columns = [f'Column_{i}' if str(col).startswith('Unnamed:') else str(col)
                      for i, col in enumerate(df.columns)]

        logging.info(f"Using first sheet of {file_path} with {len(df)} rows")
        return dataframe_to_records(df)
