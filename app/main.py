"""
Streamlit Frontend for MoneyPath

Three tabs:
1. Personal - log an expense, see this month's total and category breakdown
2. Shared   - log a shared expense, see who owes whom
3. History  - archived months with their summaries

DESIGN PRINCIPLES:
1. The UI only renders; every figure comes from the FinanceTracker
2. Forms clear only when the entry was accepted
3. Declined input shows no error, the form just keeps its values

Run with: streamlit run app/main.py
"""

import streamlit as st

from moneypath.accounting import format_month
from moneypath.config import get_settings
from moneypath.models.ledger import HistoryEntry, SettlementStatus
from moneypath.orchestrator import FinanceTracker, create_app_components


st.set_page_config(
    page_title="MoneyPath",
    page_icon="💸",
    layout="centered",
)

st.markdown("""
<style>
    .stButton>button {
        width: 100%;
    }
    .gets-back { color: #16a34a; font-weight: 600; }
    .owes { color: #dc2626; font-weight: 600; }
    .settled { color: #6b7280; font-weight: 600; }
    .to-settle { color: #2563eb; font-size: 0.85em; }
</style>
""", unsafe_allow_html=True)


@st.cache_resource
def get_tracker() -> FinanceTracker:
    """Create the tracker and run the startup flow once per process."""
    tracker = create_app_components()
    tracker.start()
    return tracker


def money(amount: float) -> str:
    return f"{get_settings().ledger.currency_symbol}{amount:.2f}"


# =============================================================================
# FORM CALLBACKS
# =============================================================================

def submit_transaction(tracker: FinanceTracker) -> None:
    state = st.session_state
    result = tracker.store.add_transaction(
        amount=state.tx_amount,
        description=state.tx_description,
        category=state.tx_category,
        new_category=state.tx_new_category,
    )
    if result.accepted:
        state.tx_amount = ""
        state.tx_description = ""
        state.tx_category = None
        state.tx_new_category = ""


def submit_shared_expense(tracker: FinanceTracker) -> None:
    state = st.session_state
    result = tracker.store.add_shared_expense(
        amount=state.shared_amount,
        description=state.shared_description,
        paid_by=state.shared_paid_by,
    )
    if result.accepted:
        state.shared_amount = ""
        state.shared_description = ""


def submit_roommate(tracker: FinanceTracker) -> None:
    result = tracker.store.add_roommate(st.session_state.roommate_name)
    if result.accepted:
        st.session_state.roommate_name = ""


# =============================================================================
# TABS
# =============================================================================

def render_personal_tab(tracker: FinanceTracker):
    """Add-expense form plus the month's category breakdown."""
    state = tracker.state

    with st.form("add_transaction", clear_on_submit=False):
        st.subheader("Add Personal Expense")
        st.text_input("Amount", key="tx_amount", placeholder="Amount")
        st.text_input("Description", key="tx_description", placeholder="Description")
        st.selectbox(
            "Category",
            options=state.categories,
            index=None,
            key="tx_category",
            placeholder="Select Category",
        )
        st.text_input("Or new category", key="tx_new_category", placeholder="Or new category")
        st.form_submit_button(
            "Add Transaction",
            type="primary",
            on_click=submit_transaction,
            args=(tracker,),
        )

    summary = tracker.current_summary()
    st.subheader("Current Month Summary")
    st.markdown(f"**Total Spent: {money(summary.personal_total)}**")

    for category, total in summary.category_totals.items():
        with st.expander(f"{category} · {money(total)}"):
            for transaction in tracker.category_transactions(category):
                col1, col2, col3 = st.columns([6, 2, 1])
                col1.markdown(f"{transaction.description}  \n:gray[{transaction.date}]")
                col2.markdown(f"`{money(transaction.amount)}`")
                col3.button(
                    "✕",
                    key=f"delete-tx-{transaction.id}",
                    on_click=tracker.store.delete_transaction,
                    args=(transaction.id,),
                )


def render_settlement_line(status: SettlementStatus, balance: float, archived: bool = False) -> str:
    if status == SettlementStatus.GETS_BACK:
        label = "Got back" if archived else "Gets back"
        return f'<span class="gets-back">{label}: {money(balance)}</span>'
    if status == SettlementStatus.OWES:
        label = "Owed" if archived else "Owes"
        return f'<span class="owes">{label}: {money(abs(balance))}</span>'
    return '<span class="settled">Settled</span>'


def render_shared_tab(tracker: FinanceTracker):
    """Add-shared-expense form plus the month's settlement."""
    state = tracker.state

    header, button = st.columns([3, 1])
    header.subheader("Add Shared Expense")
    with button.popover("Add Roommate"):
        st.text_input("Enter roommate name:", key="roommate_name")
        st.button("Add", on_click=submit_roommate, args=(tracker,))

    with st.form("add_shared_expense", clear_on_submit=False):
        st.text_input("Amount", key="shared_amount", placeholder="Amount")
        st.text_input("Description", key="shared_description", placeholder="Description")
        st.selectbox("Paid by", options=state.roommates, key="shared_paid_by")
        st.form_submit_button(
            "Add Shared Expense",
            type="primary",
            on_click=submit_shared_expense,
            args=(tracker,),
        )

    summary = tracker.current_summary()
    st.subheader("Current Month Settlement")
    st.markdown(f"Total Shared: **{money(summary.total_shared)}**")
    st.caption(f"Per Person: {money(summary.per_person_share)}")

    for person in summary.settlements:
        with st.expander(f"{person.name} · Paid {money(person.paid)}"):
            st.markdown(
                render_settlement_line(person.status, person.balance),
                unsafe_allow_html=True,
            )
            to_settle = summary.amount_to_settle(person)
            if to_settle > 0:
                st.markdown(
                    f'<span class="to-settle">Needs to spend {money(to_settle)} to settle</span>',
                    unsafe_allow_html=True,
                )
            for expense in tracker.roommate_expenses(person.name):
                col1, col2, col3 = st.columns([6, 2, 1])
                col1.markdown(f"{expense.description}  \n:gray[{expense.date}]")
                col2.markdown(f"`{money(expense.amount)}`")
                col3.button(
                    "✕",
                    key=f"delete-shared-{expense.id}",
                    on_click=tracker.store.delete_shared_expense,
                    args=(expense.id,),
                )


def render_history_entry(tracker: FinanceTracker, entry: HistoryEntry):
    summary = tracker.history_summary(entry)
    st.markdown(f"### {format_month(entry.month)}")

    st.markdown("#### Personal Summary")
    st.markdown(f"**Total Spent: {money(summary.personal_total)}**")
    for category, total in summary.category_totals.items():
        with st.expander(f"{category} · {money(total)}"):
            for transaction in tracker.archived_category_transactions(entry, category):
                st.markdown(f"{transaction.description} · `{money(transaction.amount)}`")

    st.markdown("#### Shared Summary")
    st.markdown(f"Total Shared: **{money(summary.total_shared)}**")
    for person in summary.settlements:
        with st.expander(f"{person.name} · Paid {money(person.paid)}"):
            st.markdown(
                render_settlement_line(person.status, person.balance, archived=True),
                unsafe_allow_html=True,
            )
            for expense in tracker.archived_roommate_expenses(entry, person.name):
                st.markdown(f"{expense.description} · `{money(expense.amount)}`")


def render_history_tab(tracker: FinanceTracker):
    """Archived months, most recent first."""
    st.subheader("Expense History")

    entries = tracker.history()
    if not entries:
        st.info(
            "You have no archived months yet. "
            "Your first summary will appear here after the current month ends."
        )
        return

    for entry in entries:
        with st.container(border=True):
            render_history_entry(tracker, entry)


def main():
    """Main application entry point."""
    tracker = get_tracker()

    st.title("MoneyPath")
    st.caption(f"Expenses for {tracker.current_month_label()}")

    personal, shared, history = st.tabs(["Personal", "Shared", "History"])
    with personal:
        render_personal_tab(tracker)
    with shared:
        render_shared_tab(tracker)
    with history:
        render_history_tab(tracker)


if __name__ == "__main__":
    main()
