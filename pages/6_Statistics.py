from datetime import date

import pandas as pd
import plotly.express as px
import streamlit as st

from auth import run_page
from components.actions import month_year_selector
from data import breakdown_rows, load_list, monthly_chart_rows
from formatting import format_currency, get_month_name


def render_trend(session, user):
    st.subheader("Income vs Expenses")
    summaries = load_list(session, lambda: session.client.get_monthly_summary(user.email),
                          "Failed to load statistics")
    rows = monthly_chart_rows(summaries)
    if not rows:
        st.info("No data available yet. Add some transactions to see statistics.")
        return

    df = pd.DataFrame(rows)
    # Oldest month on the left
    chart_df = df.iloc[::-1]
    fig = px.line(chart_df, x="month", y=["income", "expense"], markers=True,
                  labels={"value": "Amount", "month": "Month", "variable": ""})
    st.plotly_chart(fig, use_container_width=True)

    currency = user.currency
    col1, col2, col3 = st.columns(3)
    col1.metric("Avg Monthly Income", format_currency(df["income"].mean(), currency))
    col2.metric("Avg Monthly Expenses", format_currency(df["expense"].mean(), currency))
    col3.metric("Avg Monthly Savings", format_currency((df["income"] - df["expense"]).mean(), currency))


def render_breakdown(session, user):
    st.subheader("Expense Breakdown")
    month, year = month_year_selector("statistics", date.today())
    breakdown = load_list(
        session, lambda: session.client.get_category_expense_breakdown(user.email, month, year),
        "Failed to load expense breakdown",
    )
    rows = breakdown_rows(breakdown)
    if not rows:
        st.info(f"No expenses recorded for {get_month_name(month)} {year}")
        return

    df = pd.DataFrame(rows)
    fig = px.pie(df, names="name", values="value", hole=0.4)
    st.plotly_chart(fig, use_container_width=True)

    table = df.rename(columns={"name": "Category", "value": "Amount"})
    table["Amount"] = table["Amount"].apply(lambda v: format_currency(v, user.currency))
    st.dataframe(table, hide_index=True, use_container_width=True)


def render(session, user):
    st.title("Statistics")
    render_trend(session, user)
    st.divider()
    render_breakdown(session, user)


run_page(render)
