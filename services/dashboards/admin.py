from __future__ import annotations

import logging
from collections.abc import Callable

from domain.models import AdminStats, LoanRecord, LoanStatus, RecentUser
from services.api import endpoints
from services.api.client import ApiClient
from services.api.errors import ApiError, describe_error
from services.dashboards.notices import NoticeBoard

logger = logging.getLogger(__name__)


class AdminDashboardView:
    """
    Stats, all loans and recent users for the admin dashboard.

    The three collections are fetched independently; each failure only empties
    its own collection. Mutations patch the local list after the server
    confirms, then refetch stats.
    """

    def __init__(self, client: ApiClient, notices: NoticeBoard | None = None):
        self.client = client
        self.notices = notices or NoticeBoard()
        self.stats = AdminStats()
        self.loans: list[LoanRecord] = []
        self.recent_users: list[RecentUser] = []
        self.errors: dict[str, str] = {}
        self.loading = False
        self.is_updating = False

    def load(self) -> None:
        self.loading = True
        self.errors = {}
        try:
            self._fetch("stats", lambda: setattr(self, "stats", endpoints.get_admin_stats(self.client)))
            self._fetch("loans", lambda: setattr(self, "loans", endpoints.get_all_loans(self.client)))
            self._fetch(
                "users", lambda: setattr(self, "recent_users", endpoints.get_recent_users(self.client))
            )
        finally:
            self.loading = False

    def _fetch(self, name: str, fetch: Callable[[], None]) -> None:
        try:
            fetch()
        except ApiError as e:
            logger.error("admin dashboard: failed to load %s: %s", name, e.message)
            self.errors[name] = describe_error(e, f"Failed to load {name}")
            if name == "loans":
                self.loans = []
            elif name == "users":
                self.recent_users = []

    def refresh_stats(self) -> None:
        try:
            self.stats = endpoints.get_admin_stats(self.client)
        except ApiError as e:
            # stale stats are acceptable; the mutation itself already succeeded
            logger.error("failed to refresh stats: %s", e.message)

    def find(self, loan_id: str) -> LoanRecord | None:
        return next((ln for ln in self.loans if ln.loanId == loan_id), None)

    def update_status(self, loan_id: str, status: LoanStatus) -> bool:
        status = LoanStatus(status)
        self.is_updating = True
        try:
            endpoints.update_loan_status(self.client, loan_id, status)
        except ApiError as e:
            logger.error("status update failed for loan %s: %s", loan_id, e.message)
            self.notices.error(f"Error updating loan status: {describe_error(e, 'Unknown error')}")
            return False
        finally:
            self.is_updating = False

        self.loans = [
            ln.model_copy(update={"status": status}) if ln.loanId == loan_id else ln for ln in self.loans
        ]
        logger.info("loan %s -> %s", loan_id, status.value)
        self.notices.success(f"Loan #{loan_id} has been {status.value.lower()} successfully.")
        self.refresh_stats()
        return True

    def delete_loan(self, loan_id: str, confirm: Callable[[], bool]) -> bool:
        """`confirm` must return True or nothing is sent."""
        if not confirm():
            return False
        self.is_updating = True
        try:
            endpoints.delete_loan(self.client, loan_id)
        except ApiError as e:
            logger.error("delete failed for loan %s: %s", loan_id, e.message)
            self.notices.error(f"Error deleting loan application: {describe_error(e, 'Unknown error')}")
            return False
        finally:
            self.is_updating = False

        self.loans = [ln for ln in self.loans if ln.loanId != loan_id]
        logger.info("loan %s deleted", loan_id)
        self.notices.success(f"Loan application #{loan_id} has been deleted successfully.")
        self.refresh_stats()
        return True
