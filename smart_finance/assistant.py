"""Question answering over the current ledger snapshot.

Questions go to a hosted language model first.  The caller always passes
the transactions to reason about; nothing is cached between calls.  When
the hosted service is unreachable, misconfigured or errors out, the answer
is computed locally by a small set of keyword rules instead, so the user
always gets a textual reply.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from openai import OpenAI, OpenAIError

from . import config
from .analytics import category_breakdown, compute_totals, top_categories
from .errors import QueryServiceError
from .formatting import format_currency
from .logging_setup import get_logger
from .models import EXPENSE, INCOME, SAVINGS, Transaction

logger = get_logger(__name__)

REFUSAL_MESSAGE = (
    "I'm a financial assistant focused on helping you understand your spending and income "
    "patterns. Please ask questions related to your transactions, expenses, income, or "
    "financial habits."
)
EMPTY_SNAPSHOT_MESSAGE = (
    "I don't have any transaction data to analyze yet. Please upload your CSV file or add "
    "some transactions first."
)

FINANCE_KEYWORDS = (
    'spend', 'spent', 'expense', 'income', 'money', 'budget', 'cost', 'paid', 'earn', 'earned',
    'transaction', 'purchase', 'buy', 'bought', 'sale', 'financial', 'finance', 'cash', 'amount',
    'category', 'food', 'transport', 'shopping', 'bill', 'entertainment', 'health', 'medical',
)

SYSTEM_PROMPT = (
    "You are a financial advisor AI assistant. Analyze the user's transaction data and "
    "provide helpful insights. Answer only from the summary provided; do not use outside "
    "data. Keep responses concise and specific."
)


def is_finance_question(question: str) -> bool:
    lowered = question.lower()
    return any(keyword in lowered for keyword in FINANCE_KEYWORDS)


def build_request(
    question: str,
    transactions: Iterable[Transaction],
    as_of: Optional[datetime] = None,
) -> Dict[str, Any]:
    """Request payload sent to the answering service."""
    return {
        'question': question,
        'transactions': [t.to_dict() for t in transactions],
        'asOfDate': (as_of or datetime.now()).isoformat(),
    }


def build_financial_context(transactions: Sequence[Transaction], as_of: Optional[str] = None) -> str:
    totals = compute_totals(transactions)
    savings = sum(t.amount for t in transactions if t.type == SAVINGS)
    top = top_categories(category_breakdown(transactions))
    top_text = ', '.join(f"{item['category']} ({format_currency(item['total'])})" for item in top)
    lines = [
        'Financial Summary:',
        f"- Total Income: {format_currency(totals['income'])}",
        f"- Total Expenses: {format_currency(totals['expenses'])}",
        f"- Total Savings: {format_currency(savings)}",
        f"- Net Balance: {format_currency(totals['balance'])}",
        f"- Top Spending Categories: {top_text or 'none'}",
        f"- Total Transactions: {len(transactions)}",
    ]
    if as_of:
        lines.append(f"- Current Date: {as_of[:10]}")
    return '\n'.join(lines)


def _records_from_snapshot(rows: Iterable[Mapping[str, Any]]) -> List[Transaction]:
    return [
        Transaction(
            id=int(row['id']),
            date=str(row['date']),
            description=str(row['description']),
            amount=float(row['amount']),
            category=str(row['category']),
            type=str(row['type']),
        )
        for row in rows
    ]


class HostedAssistant:
    """Answering service backed by an OpenAI-compatible chat completions API."""

    def __init__(
        self,
        client: Optional[Any] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ):
        self._client = client
        self.model = model or config.LLM_MODEL
        self.timeout = timeout or config.LLM_TIMEOUT
        self.max_tokens = max_tokens or config.LLM_MAX_TOKENS

    def _get_client(self):
        if self._client is None:
            api_key = config.get_llm_api_key()
            if not api_key:
                raise QueryServiceError("OPENAI_API_KEY environment variable is not set")
            self._client = OpenAI(api_key=api_key, base_url=config.LLM_BASE_URL)
        return self._client

    def answer(self, request: Mapping[str, Any]) -> str:
        question = request.get('question')
        rows = request.get('transactions')
        if not question or not isinstance(rows, list):
            raise QueryServiceError("Missing question or transactions data")

        if not is_finance_question(question):
            return REFUSAL_MESSAGE
        if not rows:
            return EMPTY_SNAPSHOT_MESSAGE

        context = build_financial_context(_records_from_snapshot(rows), request.get('asOfDate'))
        try:
            response = self._get_client().chat.completions.create(
                model=self.model,
                messages=[
                    {'role': 'system', 'content': SYSTEM_PROMPT},
                    {'role': 'user', 'content': f"{context}\n\nQuestion: {question}"},
                ],
                max_tokens=self.max_tokens,
                temperature=0.7,
                timeout=self.timeout,
            )
        except OpenAIError as exc:
            raise QueryServiceError(f"Failed to get AI response: {exc}") from exc

        choices = getattr(response, 'choices', None) or []
        content = choices[0].message.content if choices else None
        if not content or not content.strip():
            raise QueryServiceError("No response generated")
        return content.strip()


# ---------------------------------------------------------------------------
# Local fallback
# ---------------------------------------------------------------------------


def local_answer(question: str, transactions: Sequence[Transaction]) -> str:
    """Rule-based answer used when the hosted service is unavailable."""
    q = question.lower()
    expenses = [t for t in transactions if t.type == EXPENSE]
    income = [t for t in transactions if t.type == INCOME]
    savings = [t for t in transactions if t.type == SAVINGS]
    total_expenses = sum(t.amount for t in expenses)
    total_income = sum(t.amount for t in income)
    total_savings = sum(t.amount for t in savings)
    net = total_income - total_expenses

    if 'total' in q or 'how much' in q:
        if 'income' in q:
            return f"Your total income is {format_currency(total_income)}"
        if 'expense' in q or 'spend' in q:
            return f"Your total expenses are {format_currency(total_expenses)}"
        if 'saving' in q:
            return f"Your total savings are {format_currency(total_savings)}"
        return (
            f"Your total income is {format_currency(total_income)}, total expenses are "
            f"{format_currency(total_expenses)}, and total savings are {format_currency(total_savings)}. "
            f"Your net balance is {format_currency(net)}"
        )

    if 'most' in q or 'highest' in q or 'largest' in q:
        if not expenses:
            return "You don't have any expense transactions yet."
        biggest = max(expenses, key=lambda t: t.amount)
        return (
            f"Your most expensive transaction was {format_currency(biggest.amount)} for "
            f"\"{biggest.description}\" in the {biggest.category} category on {biggest.date}"
        )

    if 'category' in q or 'categories' in q:
        top = top_categories(category_breakdown(transactions))
        if not top:
            return "You don't have any expense categories yet."
        listing = ', '.join(f"{item['category']}: {format_currency(item['total'])}" for item in top)
        return (
            f"Your top spending categories are: {listing}. Your highest spending category is "
            f"{top[0]['category']} with {format_currency(top[0]['total'])}"
        )

    if 'average' in q or 'mean' in q:
        if not expenses:
            return "You don't have any expense transactions to calculate an average."
        return f"Your average expense per transaction is {format_currency(total_expenses / len(expenses))}"

    return (
        f"Here's a summary of your finances: You have {len(transactions)} total transactions "
        f"({len(income)} income, {len(expenses)} expenses, {len(savings)} savings). "
        f"Total income: {format_currency(total_income)}, Total expenses: {format_currency(total_expenses)}, "
        f"Total savings: {format_currency(total_savings)}, Net balance: {format_currency(net)}"
    )


def ask_question(
    question: str,
    transactions: Iterable[Transaction],
    service: Optional[HostedAssistant] = None,
    as_of: Optional[datetime] = None,
) -> Optional[Dict[str, str]]:
    """Answer ``question`` about ``transactions``.

    Returns ``None`` for a blank question.  Any failure of the hosted
    service is logged and answered locally instead.
    """
    if not question or not question.strip():
        return None

    snapshot = list(transactions)
    service = service or HostedAssistant()
    try:
        answer = service.answer(build_request(question, snapshot, as_of))
    except Exception:
        logger.warning("Answering service failed; using local analysis", exc_info=True)
        return {'answer': local_answer(question, snapshot)}
    return {'answer': answer}
