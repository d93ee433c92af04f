from __future__ import annotations

import logging

from domain.models import LoanRecord, LoanStatus
from services.api import endpoints
from services.api.client import ApiClient
from services.api.errors import ApiError, describe_error
from services.dashboards.notices import NoticeBoard

logger = logging.getLogger(__name__)


class LoanDetailView:
    def __init__(self, client: ApiClient, loan_id: str, notices: NoticeBoard | None = None):
        self.client = client
        self.loan_id = loan_id
        self.notices = notices or NoticeBoard()
        self.loan: LoanRecord | None = None
        self.error: str | None = None
        self.forbidden = False
        self.loading = False
        self.is_updating = False

    def load(self) -> None:
        self.loading = True
        self.error = None
        self.forbidden = False
        try:
            self.loan = endpoints.get_loan(self.client, self.loan_id)
        except ApiError as e:
            logger.error("failed to load loan %s: %s", self.loan_id, e.message)
            self.loan = None
            if e.status_code == 404:
                self.error = "Loan application not found"
            elif e.status_code == 403:
                self.forbidden = True
                self.error = "You do not have permission to view this loan"
            else:
                self.error = "Error loading loan details"
        finally:
            self.loading = False

    def can_set(self, status: LoanStatus) -> bool:
        return self.loan is not None and not self.is_updating and self.loan.status != LoanStatus(status)

    def update_status(self, status: LoanStatus) -> bool:
        if self.loan is None:
            return False
        status = LoanStatus(status)
        self.is_updating = True
        try:
            endpoints.update_loan_status(self.client, self.loan.loanId, status)
        except ApiError as e:
            logger.error("status update failed for loan %s: %s", self.loan.loanId, e.message)
            self.notices.error(f"Failed to update loan status. {describe_error(e, 'Unknown error')}")
            return False
        finally:
            self.is_updating = False
        self.loan = self.loan.model_copy(update={"status": status})
        self.notices.success(f"Loan application status updated to {status.value} successfully!")
        return True

    def documents(self) -> dict[str, str]:
        """Document kind -> absolute URL, for the kinds that have an uploaded file."""
        if self.loan is None or self.loan.documents is None:
            return {}
        found = {}
        for kind in endpoints.DOCUMENT_TYPES:
            ref = getattr(self.loan.documents, kind)
            if ref is not None and ref.filename:
                found[kind] = self.client.url_for(endpoints.document_path(self.loan.loanId, kind))
        return found

    def fetch_document(self, kind: str) -> tuple[bytes, str] | None:
        if self.loan is None:
            return None
        try:
            return endpoints.get_document(self.client, self.loan.loanId, kind)
        except ApiError as e:
            self.notices.error(describe_error(e, "Document not available"))
            return None
