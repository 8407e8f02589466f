"""
Use case: Export the bulk market data set to a file.

Input: ExportMarketDataCommand (output path, optional filters)
Output: ExportMarketDataResult
Side effects: Writes one CSV or Parquet file, creating parent directories.
Failure cases: OSError if the destination cannot be written.
"""

import logging

from app.application.market.dtos import ExportMarketDataCommand, ExportMarketDataResult
from app.application.market.get_market_intelligence import (
    filter_markets,
    snapshots_to_frame,
)
from app.application.market.query_facade import MarketQueryFacade

logger = logging.getLogger(__name__)


class ExportMarketDataUseCase:
    """Writes the current market snapshots as a flat table."""

    def __init__(self, facade: MarketQueryFacade) -> None:
        self._facade = facade

    def execute(self, command: ExportMarketDataCommand) -> ExportMarketDataResult:
        frame = filter_markets(
            snapshots_to_frame(self._facade.get_all_market_data()),
            command.region,
            command.product,
        )
        path = command.output_path
        path.parent.mkdir(parents=True, exist_ok=True)

        if path.suffix.lower() == ".parquet":
            frame.to_parquet(path, index=False)
            file_format = "parquet"
        else:
            frame.to_csv(path, index=False)
            file_format = "csv"

        logger.info("Exported %d market rows to %s (%s).", len(frame), path, file_format)
        return ExportMarketDataResult(path=path, rows=len(frame), file_format=file_format)
