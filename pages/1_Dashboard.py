from datetime import date

import pandas as pd
import plotly.express as px
import streamlit as st

from auth import run_page
from components import render_budget_progress
from components.actions import month_year_selector
from data import load_dashboard, submit
from formatting import format_currency, get_month_name


def render_monthly_budget(session, user, stats, month, year):
    currency = user.currency
    budget = stats["budget"]
    if budget and budget.get("amount"):
        amount = float(budget["amount"])
        spent = stats["expense"]
        st.progress(min(spent / amount, 1.0) if amount > 0 else 0.0)
        st.caption(
            f"{format_currency(spent, currency)} of {format_currency(amount, currency)} spent · "
            f"{format_currency(max(amount - spent, 0), currency)} left"
        )
        return

    st.info(f"No budget set for {get_month_name(month)} {year}.")
    with st.form("monthly_budget_form"):
        amount = st.number_input("Budget amount", min_value=0.0, step=50.0)
        submitted = st.form_submit_button("Create Budget", type="primary")
    if submitted:
        if not amount:
            st.error("Please enter a budget amount")
            return
        submit(
            session, lambda: session.client.create_budget(user.id, amount, month, year),
            "Budget created successfully", "Failed to create budget",
        )
        st.rerun()


def render(session, user):
    st.title("Dashboard")
    if user.id is None:
        st.warning("User data is incomplete. Please log in again.")
        return

    month, year = month_year_selector("dashboard", date.today())
    with st.spinner("Loading dashboard..."):
        stats = load_dashboard(session, user, month, year)

    currency = user.currency
    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Income", format_currency(stats["income"], currency))
    col2.metric("Expenses", format_currency(stats["expense"], currency))
    col3.metric("Cash in Hand", format_currency(stats["cash_in_hand"], currency))
    col4.metric("Transactions", stats["count"])

    st.divider()
    st.subheader("Monthly Budget")
    render_monthly_budget(session, user, stats, month, year)

    st.divider()
    st.subheader("Budget Progress")
    render_budget_progress(stats["progress"], currency)

    summary = stats["summary"]
    if summary:
        st.divider()
        st.subheader("Accounts")
        st.metric("Consolidated Balance", format_currency(summary.get("consolidatedBalance"), currency))
        accounts = summary.get("accountSummaries") or []
        if accounts:
            df = pd.DataFrame(accounts)[["accountName", "accountType", "balance"]]
            df.columns = ["Account", "Type", "Balance"]
            st.dataframe(df, hide_index=True, use_container_width=True)

    st.divider()
    st.subheader("Expenses by Category")
    if stats["category_totals"]:
        fig = px.pie(pd.DataFrame(stats["category_totals"]), names="name", values="value", hole=0.4)
        st.plotly_chart(fig, use_container_width=True)
    else:
        st.info("No expenses recorded for this month")


run_page(render)
