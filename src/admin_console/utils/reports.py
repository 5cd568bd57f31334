"""
Tabular reports built with pandas.

These back the reports screen and the CSV export of the batch runner:
the transaction ledger, revenue per month split by payment status, and a
payout overview per instructor.
"""

import logging
from pathlib import Path
from typing import Dict

import pandas as pd

from ..models.entities import DATE_FORMAT, PaymentStatus
from ..models.state import AdminState
from .file_utils import save_csv


logger = logging.getLogger(__name__)

TRANSACTION_COLUMNS = [
    "id", "instructor_id", "instructor_name", "amount",
    "date", "status", "method", "description",
]
REVENUE_COLUMNS = ["month", "paid", "pending", "total"]
PAYOUT_COLUMNS = [
    "instructor_id", "name", "account_status", "stripe_connection_status",
    "earnings_total", "pending_payment", "paid_total", "transfers",
]


def transactions_frame(state: AdminState) -> pd.DataFrame:
    """
    Transactions as a DataFrame, one row per record in state order.

    ``date`` is parsed to datetime64; ``amount`` is float.
    """
    df = pd.DataFrame(
        [t.to_dict() for t in state.transactions],
        columns=TRANSACTION_COLUMNS,
    )
    df["date"] = pd.to_datetime(df["date"], format=DATE_FORMAT)
    df["amount"] = df["amount"].astype(float)
    return df


def revenue_by_month(state: AdminState) -> pd.DataFrame:
    """
    Transaction amounts per calendar month.

    Returns:
        DataFrame with columns month (YYYY-MM), paid, pending, total,
        sorted by month
    """
    df = transactions_frame(state)
    if df.empty:
        return pd.DataFrame(columns=REVENUE_COLUMNS)

    df["month"] = df["date"].dt.strftime("%Y-%m")
    table = df.pivot_table(
        index="month",
        columns="status",
        values="amount",
        aggfunc="sum",
        fill_value=0.0,
    )
    for status in PaymentStatus:
        if status.value not in table.columns:
            table[status.value] = 0.0

    table = table[[PaymentStatus.PAID.value, PaymentStatus.PENDING.value]].copy()
    table["total"] = table[PaymentStatus.PAID.value] + table[PaymentStatus.PENDING.value]
    table.columns.name = None

    return table.round(2).reset_index().sort_values("month").reset_index(drop=True)


def instructor_payouts(state: AdminState) -> pd.DataFrame:
    """
    Payout overview per instructor.

    Returns:
        DataFrame in instructor order with the current balances and the
        sum and count of paid transactions
    """
    df = transactions_frame(state)
    paid = (
        df[df["status"] == PaymentStatus.PAID.value]
        .groupby("instructor_id")["amount"]
        .agg(["sum", "count"])
    )

    rows = []
    for instructor in state.instructors:
        has_paid = instructor.id in paid.index
        rows.append({
            "instructor_id": instructor.id,
            "name": instructor.name,
            "account_status": instructor.account_status.value,
            "stripe_connection_status": instructor.stripe_connection_status.value,
            "earnings_total": instructor.earnings_total,
            "pending_payment": instructor.pending_payment,
            "paid_total": round(float(paid.loc[instructor.id, "sum"]), 2) if has_paid else 0.0,
            "transfers": int(paid.loc[instructor.id, "count"]) if has_paid else 0,
        })

    return pd.DataFrame(rows, columns=PAYOUT_COLUMNS)


def export_reports(state: AdminState, directory: Path) -> Dict[str, Path]:
    """
    Write every report as CSV.

    Args:
        state: State to report on
        directory: Target directory (created if missing)

    Returns:
        Mapping of report name to written file; reports that failed to
        save are left out
    """
    reports = {
        "transactions": transactions_frame(state),
        "revenue_by_month": revenue_by_month(state),
        "instructor_payouts": instructor_payouts(state),
    }

    written = {}
    for name, frame in reports.items():
        path = directory / f"{name}.csv"
        if save_csv(frame, path):
            written[name] = path

    logger.info(f"Exported {len(written)}/{len(reports)} reports to {directory}")
    return written
