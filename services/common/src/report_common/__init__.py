from report_common.config import DatabaseConfig, MinioConfig
from report_common.db_models import Report
from report_common.logging import setup_logging

__all__ = [
    "setup_logging",
    "DatabaseConfig",
    "MinioConfig",
    "Report",
]
