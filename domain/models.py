from datetime import datetime
from enum import Enum
from typing import Optional, List

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class Role(str, Enum):
    USER = "user"
    ADMIN = "admin"


class LoanStatus(str, Enum):
    PENDING = "Pending"
    UNDER_REVIEW = "Under Review"
    APPROVED = "Approved"
    REJECTED = "Rejected"


class SessionState(str, Enum):
    UNKNOWN = "unknown"
    AUTHENTICATED = "authenticated"
    ANONYMOUS = "anonymous"


class User(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str = Field(default="", validation_alias=AliasChoices("id", "_id", "userId"))
    name: str = ""
    email: str = ""
    role: Role = Role.USER
    phone: Optional[str] = None
    address: Optional[str] = None


class Session(BaseModel):
    user: User
    auth_token: str


class LoanType(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: int
    name: str
    interest_rate: float = Field(validation_alias=AliasChoices("interest_rate", "interestRate"))
    max_amount: int = Field(default=0, validation_alias=AliasChoices("max_amount", "maxAmount"))
    tenure: str = ""
    processing_fee: str = Field(
        default="0", validation_alias=AliasChoices("processing_fee", "processingFee")
    )
    description: str = ""

    @field_validator("processing_fee", mode="before")
    @classmethod
    def _fee_as_text(cls, v):
        return str(v)

    @property
    def processing_fee_pct(self) -> float:
        # "1-2%" -> 1.0 (lower bound of the quoted range)
        head = self.processing_fee.replace("%", "").split("-")[0]
        return float(head)


LOAN_TYPES: List[LoanType] = [
    LoanType(id=1, name="Personal Loan", interest_rate=10.5, max_amount=1_000_000,
             tenure="12-60 months", processing_fee="1-2%",
             description="For personal expenses like travel, wedding, etc."),
    LoanType(id=2, name="Home Loan", interest_rate=8.5, max_amount=10_000_000,
             tenure="60-360 months", processing_fee="0.5-1%",
             description="For purchasing or renovating residential property"),
    LoanType(id=3, name="Education Loan", interest_rate=9.0, max_amount=2_000_000,
             tenure="12-84 months", processing_fee="0.5-1%",
             description="For higher education expenses in India or abroad"),
    LoanType(id=4, name="Vehicle Loan", interest_rate=9.5, max_amount=3_000_000,
             tenure="12-84 months", processing_fee="1-2%",
             description="For purchasing new or used vehicles"),
    LoanType(id=5, name="Business Loan", interest_rate=12.0, max_amount=5_000_000,
             tenure="12-60 months", processing_fee="1-3%",
             description="For business expansion, working capital or equipment"),
    LoanType(id=6, name="Gold Loan", interest_rate=7.5, max_amount=2_000_000,
             tenure="6-36 months", processing_fee="0.5-1%",
             description="Loan against gold jewelry or coins"),
    LoanType(id=7, name="Loan Against Property", interest_rate=9.0, max_amount=20_000_000,
             tenure="60-180 months", processing_fee="0.5-1%",
             description="Loan against residential or commercial property"),
]


def loan_type_by_id(loan_type_id) -> LoanType:
    """Unknown or malformed ids fall back to the first product."""
    try:
        wanted = int(loan_type_id)
    except (TypeError, ValueError):
        return LOAN_TYPES[0]
    return next((t for t in LOAN_TYPES if t.id == wanted), LOAN_TYPES[0])


class StatusChange(BaseModel):
    model_config = ConfigDict(extra="allow")

    status: str
    date: Optional[datetime] = None
    comment: Optional[str] = None


class DocumentRef(BaseModel):
    model_config = ConfigDict(extra="allow")

    filename: Optional[str] = None


class LoanDocuments(BaseModel):
    model_config = ConfigDict(extra="allow")

    identityProof: Optional[DocumentRef] = None
    addressProof: Optional[DocumentRef] = None
    incomeProof: Optional[DocumentRef] = None
    bankStatements: Optional[DocumentRef] = None
    additionalDocuments: List[DocumentRef] = []


class LoanRecord(BaseModel):
    """Server-owned loan as returned by the loan endpoints. Read-only here."""

    model_config = ConfigDict(extra="allow")

    loanId: str = Field(validation_alias=AliasChoices("loanId", "id", "_id"))
    loanType: str = "Unknown"
    loanAmount: float = 0.0
    loanTerm: Optional[int] = None
    loanTenure: Optional[int] = None
    interestRate: Optional[float] = None
    purpose: Optional[str] = None
    loanPurpose: Optional[str] = None
    status: LoanStatus = LoanStatus.PENDING
    applicationDate: Optional[datetime] = None
    approvalDate: Optional[datetime] = None
    userId: Optional[str] = None
    userName: Optional[str] = None
    userEmail: Optional[str] = None
    monthlyIncome: Optional[float] = None
    annualIncome: Optional[float] = None
    creditScore: Optional[int] = None
    repaymentCapacity: Optional[float] = None
    employmentType: Optional[str] = None
    residentialStatus: Optional[str] = None
    existingLoans: Optional[str] = None
    coApplicant: bool = False
    statusHistory: List[StatusChange] = []
    documents: Optional[LoanDocuments] = None

    @property
    def term_months(self) -> int:
        return self.loanTerm or self.loanTenure or 0

    def estimated_emi(self) -> Optional[int]:
        """Rough monthly instalment shown to reviewers; not an amortisation."""
        if not self.term_months:
            return None
        return round((self.loanAmount / self.term_months) * (1 + 0.1 / 12))


class AdminStats(BaseModel):
    model_config = ConfigDict(extra="allow")

    totalLoans: int = 0
    pendingLoans: int = 0
    approvedLoans: int = 0
    rejectedLoans: int = 0
    totalAmount: float = 0.0


class RecentUser(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str = Field(default="", validation_alias=AliasChoices("id", "_id", "userId"))
    name: str = ""
    email: str = ""
    role: Role = Role.USER
    createdAt: Optional[datetime] = None


class UserLoanStats(BaseModel):
    total_loans: int = 0
    approved_loans: int = 0
    pending_loans: int = 0
    approved_amount: float = 0.0

    @classmethod
    def from_loans(cls, loans: List[LoanRecord]) -> "UserLoanStats":
        approved = [ln for ln in loans if ln.status == LoanStatus.APPROVED]
        return cls(
            total_loans=len(loans),
            approved_loans=len(approved),
            pending_loans=sum(1 for ln in loans if ln.status == LoanStatus.PENDING),
            approved_amount=sum(ln.loanAmount for ln in approved),
        )
