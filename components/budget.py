import streamlit as st

from formatting import format_currency

STATUS_ICONS = {"over": "🔴", "warning": "🟡", "ok": "🟢"}


def render_budget_progress(rows, currency, empty_message="No category budgets for this month."):
    """Render one progress bar per category budget."""
    if not rows:
        st.info(empty_message)
        return

    for row in rows:
        budgeted = float(row.get("budgetedAmount") or 0)
        spent = float(row.get("currentSpending") or 0)
        status = STATUS_ICONS[row["level"]] if budgeted > 0 else "⚪"

        col_name, col_bar, col_nums = st.columns([2, 4, 3])
        with col_name:
            st.write(f"{status} {row.get('categoryName', '')}")
        with col_bar:
            st.progress(row["percentage"] / 100)
            st.caption(f"{row['percentage']:.1f}% used")
        with col_nums:
            st.write(f"{format_currency(spent, currency)} / {format_currency(budgeted, currency)}")
            if row["remaining"] >= 0:
                st.caption(f"{format_currency(row['remaining'], currency)} remaining")
            else:
                st.caption(f"{format_currency(abs(row['remaining']), currency)} over budget")
