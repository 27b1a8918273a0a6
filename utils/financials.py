"""
Placement fee, tax and finance summary computation.

All arithmetic is done on ``Decimal`` values built from the decimal text of
the inputs, and every rounding is half-up to whole rupees, so results do not
depend on binary float representation. Missing or non-numeric money values
count as 0.
"""

import calendar
from datetime import datetime, timedelta, tzinfo
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from typing import Any, Dict, List, Optional, Sequence, Union

from models.status import PayoutOption
from schemas.records import Client, Expense, Invoice, InvoiceLine, Payment
from utils.amount_words import amount_in_words
from utils.temporal_filter import parse_timestamp

DEFAULT_HOME_STATE = "Karnataka"

CGST_RATE = Decimal("0.09")
SGST_RATE = Decimal("0.09")
IGST_RATE = Decimal("0.18")

PAYOUT_ALIASES = {
    "percentage": PayoutOption.PERCENTAGE,
    "agreement percentage": PayoutOption.PERCENTAGE,
    "flat": PayoutOption.FLAT,
    "flat pay": PayoutOption.FLAT,
    "both": PayoutOption.BOTH,
}

PERIODS = ("weekly", "monthly", "yearly", "all")

# Largest decimal exponent a money input may carry; beyond it the value is 0
MAX_MONEY_EXPONENT = 15
MONEY_PRECISION = 60

Number = Union[int, float]


def to_decimal(value: Any) -> Decimal:
    """
    Coerce a raw money value to Decimal.

    Accepts numbers and numeric strings (thousands separators allowed).
    Anything else, including NaN, infinities and magnitudes of 10**16 or
    more, is 0.
    """
    if value is None or isinstance(value, bool):
        return Decimal(0)
    if isinstance(value, Decimal):
        number = value
    elif isinstance(value, (int, float)):
        number = Decimal(str(value))
    else:
        text = str(value).replace(",", "").strip()
        if not text:
            return Decimal(0)
        try:
            number = Decimal(text)
        except InvalidOperation:
            return Decimal(0)
    if not number.is_finite() or (number and number.adjusted() > MAX_MONEY_EXPONENT):
        return Decimal(0)
    return number


def round_half_up(value: Decimal) -> int:
    with localcontext() as ctx:
        ctx.prec = max(MONEY_PRECISION, value.adjusted() + 2)
        return int(value.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def plain_number(value: Decimal) -> Number:
    """Decimal to int when integral, else float, for JSON output."""
    if value == value.to_integral_value():
        return int(value)
    return float(value)


def normalize_payout_option(raw: Any) -> PayoutOption:
    """Map a payout option spelling onto PayoutOption; unknown is Percentage."""
    if isinstance(raw, PayoutOption):
        return raw
    if raw is None:
        return PayoutOption.PERCENTAGE
    return PAYOUT_ALIASES.get(str(raw).strip().lower(), PayoutOption.PERCENTAGE)


def compute_line_amount(
    ctc: Any,
    agreement_percentage: Any = None,
    flat_pay_amount: Any = None,
    payout_option: Any = None,
) -> int:
    """
    Compute the placement fee for one candidate.

    - Percentage: round(ctc * percentage / 100)
    - Flat: round(flat_pay_amount)
    - Both: the two amounts rounded separately, then summed

    Examples:
        >>> compute_line_amount(1200000, 8.33, 0, "Percentage")
        99960
        >>> compute_line_amount(1000000, 5, 50000, "Both")
        100000
    """
    option = normalize_payout_option(payout_option)
    percentage_part = round_half_up(to_decimal(ctc) * to_decimal(agreement_percentage) / 100)
    flat_part = round_half_up(to_decimal(flat_pay_amount))

    if option == PayoutOption.FLAT:
        return flat_part
    if option == PayoutOption.BOTH:
        return percentage_part + flat_part
    return percentage_part


class TaxBreakdown:
    """GST components of one subtotal."""

    def __init__(self, subtotal: Decimal, cgst: int, sgst: int, igst: int, intra_state: bool):
        self.subtotal = subtotal
        self.cgst = cgst
        self.sgst = sgst
        self.igst = igst
        self.intra_state = intra_state

    @property
    def total_tax(self) -> int:
        return self.cgst + self.sgst + self.igst

    @property
    def grand_total(self) -> Decimal:
        return self.subtotal + self.total_tax

    def to_dict(self) -> Dict[str, Any]:
        return {
            "subtotal": plain_number(self.subtotal),
            "cgst": self.cgst,
            "sgst": self.sgst,
            "igst": self.igst,
            "total_tax": self.total_tax,
            "grand_total": plain_number(self.grand_total),
            "intra_state": self.intra_state,
        }

    def __repr__(self) -> str:
        return (
            f"TaxBreakdown(cgst={self.cgst}, sgst={self.sgst}, igst={self.igst}, "
            f"grand_total={self.grand_total})"
        )


def is_home_state(billing_state: Optional[str], home_state: str = DEFAULT_HOME_STATE) -> bool:
    if not billing_state:
        return False
    return billing_state.strip().lower() == home_state.strip().lower()


def compute_tax(subtotal: Any, billing_state: Optional[str], home_state: str = DEFAULT_HOME_STATE) -> TaxBreakdown:
    """
    Split GST on a subtotal by jurisdiction.

    Intra-state (billing state equals the home state): CGST and SGST of
    round(subtotal * 9%) each. Inter-state: one IGST of round(subtotal * 18%).
    A missing billing state is inter-state.

    Examples:
        >>> compute_tax(100000, "Karnataka").to_dict()["grand_total"]
        118000
        >>> compute_tax(100000, "Delhi").igst
        18000
    """
    amount = to_decimal(subtotal)
    if is_home_state(billing_state, home_state):
        half = round_half_up(amount * CGST_RATE)
        return TaxBreakdown(amount, cgst=half, sgst=half, igst=0, intra_state=True)
    igst = round_half_up(amount * IGST_RATE)
    return TaxBreakdown(amount, cgst=0, sgst=0, igst=igst, intra_state=False)


class InvoiceSummary:
    """Recomputed amounts of one invoice."""

    def __init__(
        self,
        lines: List[Dict[str, Any]],
        payout_option: PayoutOption,
        tax: TaxBreakdown,
        billing_state: Optional[str],
    ):
        self.lines = lines
        self.payout_option = payout_option
        self.tax = tax
        self.billing_state = billing_state

    @property
    def subtotal(self) -> Decimal:
        return self.tax.subtotal

    @property
    def grand_total(self) -> Decimal:
        return self.tax.grand_total

    @property
    def words(self) -> str:
        return amount_in_words(round_half_up(self.grand_total))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "lines": [dict(line) for line in self.lines],
            "payout_option": self.payout_option.value,
            "billing_state": self.billing_state,
            "subtotal": plain_number(self.subtotal),
            "tax": self.tax.to_dict(),
            "grand_total": plain_number(self.grand_total),
            "amount_in_words": self.words,
        }


def _first_present(*values: Any) -> Any:
    for value in values:
        if value is not None:
            return value
    return None


def _client_state(client: Optional[Client]) -> Optional[str]:
    if client is None:
        return None
    if client.state:
        return client.state
    for site in client.billing_details:
        if site.state:
            return site.state
    return None


def summarize_lines(
    lines: Sequence[InvoiceLine],
    payout_option: Any,
    agreement_percentage: Any,
    flat_pay_amount: Any,
    billing_state: Optional[str],
    home_state: str = DEFAULT_HOME_STATE,
) -> InvoiceSummary:
    """Compute line fees, subtotal and tax for free-standing invoice lines."""
    option = normalize_payout_option(payout_option)
    computed: List[Dict[str, Any]] = []
    subtotal = Decimal(0)
    for line in lines:
        amount = compute_line_amount(line.ctc, agreement_percentage, flat_pay_amount, option)
        subtotal += amount
        computed.append(
            {
                "candidate_id": line.candidate_id,
                "designation": line.designation,
                "ctc": plain_number(to_decimal(line.ctc)),
                "amount": amount,
            }
        )
    tax = compute_tax(subtotal, billing_state, home_state)
    return InvoiceSummary(computed, option, tax, billing_state)


def summarize_invoice(
    invoice: Invoice,
    client: Optional[Client] = None,
    home_state: str = DEFAULT_HOME_STATE,
) -> InvoiceSummary:
    """
    Recompute an invoice from its lines.

    Stored line amounts are ignored. Fee terms and billing state come from
    the invoice, falling back to the client's defaults.

    Args:
        invoice: The invoice to recompute
        client: The invoice's client, for default terms
        home_state: State whose invoices are split into CGST + SGST

    Returns:
        InvoiceSummary
    """
    payout_option = _first_present(invoice.payout_option, client.payout_option if client else None)
    percentage = _first_present(
        invoice.agreement_percentage, client.agreement_percentage if client else None
    )
    flat = _first_present(invoice.flat_pay_amount, client.flat_pay_amount if client else None)
    billing_state = invoice.billing_state or _client_state(client)
    return summarize_lines(invoice.lines, payout_option, percentage, flat, billing_state, home_state)


def _months_back(moment: datetime, months: int) -> datetime:
    """Same day-of-month ``months`` earlier, clamped to the month's last day."""
    month_index = moment.year * 12 + moment.month - 1 - months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def period_start(period: str, now: datetime) -> Optional[datetime]:
    """
    First instant of a finance summary period.

    Returns:
        ``now`` minus 7 days / 1 month / 1 year, or None for ``all`` and
        unknown periods
    """
    if period == "weekly":
        return now - timedelta(days=7)
    if period == "monthly":
        return _months_back(now, 1)
    if period == "yearly":
        return _months_back(now, 12)
    return None


class FinancialSummary:
    """Income, expenses and profit over a period."""

    def __init__(self, period: str, since: Optional[datetime], total_income: Decimal, total_expenses: Decimal):
        self.period = period
        self.since = since
        self.total_income = total_income
        self.total_expenses = total_expenses

    @property
    def net_profit(self) -> Decimal:
        return self.total_income - self.total_expenses

    @property
    def profit_margin(self) -> float:
        """Net profit as % of income, 2 decimals; 0 without income."""
        if self.total_income <= 0:
            return 0.0
        margin = self.net_profit / self.total_income * 100
        with localcontext() as ctx:
            ctx.prec = max(MONEY_PRECISION, margin.adjusted() + 4)
            return float(margin.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "period": self.period,
            "since": self.since.isoformat() if self.since else None,
            "total_income": plain_number(self.total_income),
            "total_expenses": plain_number(self.total_expenses),
            "net_profit": plain_number(self.net_profit),
            "profit_margin": self.profit_margin,
        }


def financial_summary(
    payments: Sequence[Payment],
    expenses: Sequence[Expense],
    period: str = "all",
    now: Optional[datetime] = None,
    tz: Optional[tzinfo] = None,
) -> FinancialSummary:
    """
    Summarize income and expenses received since the period start.

    Records dated before the start are excluded, as are undated records
    when the period is bounded.

    Args:
        payments: Payments received
        expenses: Operating expenses
        period: weekly, monthly, yearly or all
        now: Reference instant (defaults to the current time)
        tz: Report timezone
    """
    reference = parse_timestamp(now if now is not None else datetime.now(tz), tz)
    since = period_start(period, reference)

    def counted(value: Any) -> bool:
        if since is None:
            return True
        moment = parse_timestamp(value, tz)
        return moment is not None and moment >= since

    income = sum(
        (to_decimal(p.amount_received) for p in payments if counted(p.received_date)),
        Decimal(0),
    )
    spent = sum((to_decimal(e.amount) for e in expenses if counted(e.date)), Decimal(0))
    return FinancialSummary(period if period in PERIODS else "all", since, income, spent)
