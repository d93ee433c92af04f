from __future__ import annotations

import logging

from domain.models import LoanRecord, UserLoanStats
from services.api import endpoints
from services.api.client import ApiClient
from services.api.errors import ApiError

logger = logging.getLogger(__name__)


class ProfileView:
    def __init__(self, client: ApiClient):
        self.client = client
        self.loans: list[LoanRecord] = []
        self.stats = UserLoanStats()
        self.error: str | None = None
        self.loading = False

    def load(self) -> None:
        self.loading = True
        self.error = None
        try:
            self.loans = endpoints.get_my_loans(self.client)
        except ApiError as e:
            logger.error("failed to load user loans: %s", e.message)
            self.error = "Failed to load your loan applications"
            self.loans = []
        finally:
            self.loading = False
        self.stats = UserLoanStats.from_loans(self.loans)

    refresh = load
