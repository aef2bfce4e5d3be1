"""Repository for report persistence."""

from report_common.db_models import Report
from report_common.logging import setup_logging
from sqlalchemy.exc import SQLAlchemyError

from exceptions import ReportPersistenceError

logger = setup_logging()


class ReportRepository:
    """
    Handles database writes for reports.

    Rows are insert-only here; a duplicate id or any other constraint
    violation surfaces as an error instead of updating an existing row.
    """

    def __init__(self, session_factory):
        """
        Initializes the repository.

        Args:
            session_factory: Callable that returns a SQLModel Session context manager.
        """
        self._session_factory = session_factory

    def insert(self, report: Report) -> None:
        """
        Inserts a single report row.

        Raises:
            ReportPersistenceError: If the insert or commit fails.
        """
        report_id = report.id
        user_id = report.user_id

        try:
            with self._session_factory() as db_session:
                db_session.add(report)
                db_session.commit()
        except SQLAlchemyError as e:
            logger.exception(
                "Failed to persist report",
                extra={"report_id": report_id, "user_id": user_id},
            )
            raise ReportPersistenceError(report_id, cause=e) from e

        logger.info(
            "Report persisted",
            extra={"report_id": report_id, "user_id": user_id},
        )
