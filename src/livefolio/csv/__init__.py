"""CSV import of brokerage exports."""

from livefolio.csv.importer import PositionCsvImporter, RowImport

__all__ = [
    "PositionCsvImporter",
    "RowImport",
]
