"""
Streamlit Frontend for Finance Tracker

DESIGN PRINCIPLES:
1. Pages only render - all data work goes through the flows
2. Every write shows one flash message on the next render, then it's gone
3. Storage errors are shown in the page instead of crashing the app
"""

import asyncio
from datetime import date
from typing import Optional

import streamlit as st
from pydantic import ValidationError

from finance_tracker.config import get_settings, validate_all_settings
from finance_tracker.flash import consume_flash, set_flash
from finance_tracker.logger import get_logger
from finance_tracker.models import FlashType, Transaction, TransactionType
from finance_tracker.orchestrator import (
    ReportFlow,
    SettingsFlow,
    TransactionFlow,
    create_app_components,
    health_status,
)
from finance_tracker.reports import InvalidMonthDesignator, current_month
from finance_tracker.services.storage import NotFoundError, StorageError


logger = get_logger(__name__)

PAGE_DASHBOARD = "🏠 Dashboard"
PAGE_REPORT = "📈 Report"
PAGE_NEW = "➕ New Transaction"
PAGE_TRANSACTIONS = "📒 Transactions"
PAGE_SETTINGS = "⚙️ Settings"
PAGES = [PAGE_DASHBOARD, PAGE_REPORT, PAGE_NEW, PAGE_TRANSACTIONS, PAGE_SETTINGS]


# Page configuration
st.set_page_config(
    page_title="Finance Tracker",
    page_icon="💰",
    layout="wide",
    initial_sidebar_state="expanded",
)


def run_async(coro):
    """Helper to run async functions in Streamlit."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


@st.cache_resource
def get_components():
    """
    Get or create application components (cached).

    Returns (components, storage_error). When the configured backend fails,
    the app still starts in memory and storage_error carries the reason.
    """
    try:
        return create_app_components(use_storage=True), None
    except StorageError as e:
        logger.error("storage_init_failed", error=str(e))
        return create_app_components(use_storage=False), str(e)


def money(amount: float, currency: str) -> str:
    return f"{currency} {amount:,.0f}"


def go_to(page: str) -> None:
    """Switch page on the next rerun (the radio widget can't be set after it renders)."""
    st.session_state["next_page"] = page


def show_error(e: Exception, context: str) -> None:
    logger.error("page_error", context=context, error=str(e), error_type=type(e).__name__)
    st.error(f"{context}: {e}")
    if get_settings().app.debug_mode:
        st.exception(e)


def main():
    """Main application entry point."""
    (transaction_flow, settings_flow, report_flow), storage_error = get_components()

    if "next_page" in st.session_state:
        st.session_state["page"] = st.session_state.pop("next_page")

    st.sidebar.title("💰 Finance Tracker")
    st.sidebar.markdown("---")
    page = st.sidebar.radio("Navigate to:", PAGES, key="page")

    if storage_error:
        st.sidebar.error("Storage unavailable")
        st.warning(
            f"⚠️ Storage could not be started: {storage_error}. "
            "Changes are kept in memory only and will be lost on restart."
        )

    flash = consume_flash(st.session_state)
    if flash:
        if flash.type == FlashType.SUCCESS:
            st.success(flash.msg)
        else:
            st.error(flash.msg)

    if page == PAGE_DASHBOARD:
        render_dashboard_page(report_flow)
    elif page == PAGE_REPORT:
        render_report_page(report_flow)
    elif page == PAGE_NEW:
        render_new_transaction_page(transaction_flow)
    elif page == PAGE_TRANSACTIONS:
        render_transactions_page(transaction_flow)
    elif page == PAGE_SETTINGS:
        render_settings_page(settings_flow, storage_error)


def render_dashboard_page(report_flow: ReportFlow):
    """Current month at a glance."""
    try:
        view = run_async(report_flow.dashboard())
    except StorageError as e:
        show_error(e, "Could not load dashboard")
        return

    cur = view.settings.currency
    st.title(f"🏠 Dashboard - {view.year_month}")

    col1, col2, col3 = st.columns(3)
    col1.metric("Income", money(view.summary.income, cur))
    col2.metric("Expense", money(view.summary.expense, cur))
    col3.metric("Balance", money(view.summary.balance, cur))

    col1, col2, col3 = st.columns(3)
    col1.metric(
        "Budget left this month",
        money(view.expense_left, cur),
        help=f"Target: {money(view.settings.monthly_expense_target, cur)}",
    )
    col2.metric("Suggested spend per day", money(view.suggest_daily_expense, cur))
    col3.metric(
        "Income vs daily target",
        money(view.daily_target_delta, cur),
        delta="ahead" if view.daily_target_delta >= 0 else "behind",
        delta_color="normal" if view.daily_target_delta >= 0 else "inverse",
    )

    st.markdown("### Recent transactions")
    if not view.recent_transactions:
        st.info("No transactions this month yet. Use 'New Transaction' to add one.")
        return
    st.dataframe(
        [transaction_row(t, cur) for t in view.recent_transactions],
        use_container_width=True,
        hide_index=True,
    )


def render_report_page(report_flow: ReportFlow):
    """Monthly report: totals, categories and every day of the month."""
    st.title("📈 Monthly Report")

    year_month = st.text_input(
        "Month (YYYY-MM)",
        value=st.session_state.get("report_month") or current_month(date.today()),
    )

    try:
        report = run_async(report_flow.month_report(year_month))
    except InvalidMonthDesignator as e:
        st.error(str(e))
        return
    except StorageError as e:
        show_error(e, "Could not load report")
        return

    st.session_state["report_month"] = report.year_month
    cur = report.settings.currency

    col1, col2, col3 = st.columns(3)
    col1.metric("Income", money(report.summary.income, cur))
    col2.metric("Expense", money(report.summary.expense, cur))
    col3.metric("Balance", money(report.summary.balance, cur))

    st.markdown("### By category")
    if report.categories:
        st.dataframe(
            [
                {"Type": row.type.value, "Category": row.category, "Total": money(row.total, cur)}
                for row in report.categories
            ],
            use_container_width=True,
            hide_index=True,
        )
    else:
        st.info("No transactions in this month.")

    st.markdown("### By day")
    days = [d.model_dump() for d in report.days]
    st.bar_chart(days, x="date", y=["income", "expense"])
    st.dataframe(days, use_container_width=True, hide_index=True)


def transaction_form(key: str, existing: Optional[Transaction] = None) -> Optional[dict]:
    """Render the add/edit form. Returns the submitted fields, or None."""
    types = list(TransactionType)
    with st.form(key):
        tx_date = st.date_input("Date", value=existing.date if existing else date.today())
        tx_type = st.selectbox(
            "Type",
            options=types,
            index=types.index(existing.type) if existing else 1,
            format_func=lambda t: t.value.title(),
        )
        amount = st.number_input(
            "Amount",
            value=float(existing.amount) if existing else 0.0,
            step=1000.0,
        )
        category = st.text_input("Category", value=existing.category if existing else "")
        note = st.text_input("Note", value=existing.note if existing else "")
        submitted = st.form_submit_button("💾 Save", type="primary")

    if not submitted:
        return None
    return {
        "date": tx_date,
        "type": tx_type,
        "amount": amount,
        "category": category,
        "note": note,
    }


def render_new_transaction_page(transaction_flow: TransactionFlow):
    st.title("➕ New Transaction")

    values = transaction_form("new_transaction")
    if values is None:
        return

    try:
        _, flash = run_async(transaction_flow.create_transaction(**values))
    except ValidationError as e:
        st.error(f"Invalid transaction: {e}")
        return
    except StorageError as e:
        show_error(e, "Failed to save")
        return

    set_flash(st.session_state, flash)
    go_to(PAGE_DASHBOARD)
    st.rerun()


def render_transactions_page(transaction_flow: TransactionFlow):
    """Pick a transaction to edit or delete."""
    st.title("📒 Transactions")

    try:
        transactions = run_async(transaction_flow.list_transactions())
    except StorageError as e:
        show_error(e, "Could not load transactions")
        return

    if not transactions:
        st.info("No transactions yet.")
        return

    by_id = {t.id: t for t in transactions}
    selected_id = st.selectbox(
        "Transaction",
        options=list(by_id),
        format_func=lambda tx_id: (
            f"{by_id[tx_id].date.isoformat()} · {by_id[tx_id].type.value} · "
            f"{by_id[tx_id].category} · {by_id[tx_id].amount:,.0f}"
        ),
    )

    try:
        selected = run_async(transaction_flow.get_transaction(selected_id))
    except NotFoundError:
        st.warning("That transaction no longer exists.")
        return

    values = transaction_form(f"edit_{selected.id}", existing=selected)
    if values is not None:
        try:
            _, flash, year_month = run_async(
                transaction_flow.update_transaction(selected.id, **values)
            )
        except ValidationError as e:
            st.error(f"Invalid transaction: {e}")
            return
        except StorageError as e:
            show_error(e, "Failed to update")
            return

        set_flash(st.session_state, flash)
        st.session_state["report_month"] = year_month
        go_to(PAGE_REPORT)
        st.rerun()

    if st.button("🗑️ Delete this transaction"):
        try:
            flash = run_async(transaction_flow.delete_transaction(selected.id))
        except StorageError as e:
            show_error(e, "Failed to delete")
            return
        set_flash(st.session_state, flash)
        st.rerun()


def render_settings_page(settings_flow: SettingsFlow, storage_error: Optional[str] = None):
    """Render the settings page."""
    st.title("⚙️ Settings")

    try:
        current = run_async(settings_flow.get_settings())
    except StorageError as e:
        show_error(e, "Could not load settings")
        return

    weekdays = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]
    with st.form("settings"):
        currency = st.text_input("Currency", value=current.currency)
        monthly = st.text_input("Monthly expense target", value=f"{current.monthly_expense_target:g}")
        daily = st.text_input("Daily income target", value=f"{current.daily_income_target:g}")
        start_week_on = st.selectbox(
            "Week starts on",
            options=list(range(7)),
            index=current.start_week_on,
            format_func=lambda i: weekdays[i],
        )
        submitted = st.form_submit_button("💾 Save", type="primary")

    if submitted:
        try:
            _, flash = run_async(settings_flow.update_settings({
                "currency": currency,
                "monthlyExpenseTarget": monthly,
                "dailyIncomeTarget": daily,
                "startWeekOn": start_week_on,
            }))
        except StorageError as e:
            show_error(e, "Failed to save settings")
            return
        set_flash(st.session_state, flash)
        st.rerun()

    st.markdown("---")
    st.markdown("### Connection Status")

    status = validate_all_settings()
    health = health_status(storage_error=storage_error)
    st.json(health)

    if health["env"] == "memory":
        st.error(f"❌ In memory only - {health['error']}")
    elif health["env"] == "remote":
        if status.get("google_sheets", False):
            st.success("✅ Google Sheets (Storage) - Configured")
        else:
            st.error(f"❌ Google Sheets (Storage) - {status.get('google_sheets_error', 'Not configured')}")
    else:
        st.success(f"✅ Local files - {get_settings().local_storage.data_dir}")


def transaction_row(transaction: Transaction, currency: str) -> dict:
    return {
        "Date": transaction.date.isoformat(),
        "Type": transaction.type.value,
        "Category": transaction.category,
        "Note": transaction.note,
        "Amount": money(transaction.amount, currency),
    }


if __name__ == "__main__":
    main()
