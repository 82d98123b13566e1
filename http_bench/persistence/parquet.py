"""
Parquet persistence for benchmark reports.
"""

import os
import logging
from typing import List, Optional
from datetime import datetime

import pandas as pd

from http_bench.configuration import DEFAULT_RESULTS_PREFIX
from http_bench.persistence.report import BenchmarkReport

logger = logging.getLogger(__name__)


class ParquetPersistence:
    """Collects the reports of one invocation and saves them to a Parquet file.

    Attributes:
        output_dir: Directory where Parquet files will be saved
        reports: Reports accumulated across the URLs of the invocation
    """

    def __init__(self, output_dir: str):
        """Initialize Parquet persistence.

        Args:
            output_dir: Directory for saving Parquet files
        """
        self.output_dir: str = output_dir
        self.reports: List[BenchmarkReport] = []

        os.makedirs(output_dir, exist_ok=True)

    def store_report(self, report: BenchmarkReport) -> None:
        """Store a report in memory.

        Args:
            report: Completed run report
        """
        self.reports.append(report)

    def to_dataframe(self) -> pd.DataFrame:
        return pd.DataFrame([report.to_dict() for report in self.reports])

    def save_to_file(self, filename_prefix: str = DEFAULT_RESULTS_PREFIX) -> Optional[str]:
        """Save all reports to a Parquet file.

        Args:
            filename_prefix: Prefix for the generated filename

        Returns:
            Path to the saved file, or None if there are no reports to save
        """
        if not self.reports:
            return None

        logger.info(f"Saving {len(self.reports)} reports to {self.output_dir}")
        df = self.to_dataframe()

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        filename = f"{filename_prefix}_{timestamp}.parquet"
        filepath = os.path.join(self.output_dir, filename)

        df.to_parquet(filepath, index=False)

        return filepath
