"""Prompts for the QueryAgent: system prompt, tool description and follow-up templates."""

DEFAULT_QUESTION = "Where do I spend most of my money?  Give me the top 10 places in October"

SYSTEM_PROMPT = """
You are a financial advisor and a SQL expert with access to a transaction history database
via tools, and you can query it for more robust data and analysis.
Use database results to make informed responses that help the user.
"""

TRANSACTIONS_TOOL_NAME = "TransactionsTool"

TRANSACTIONS_TOOL_DESCRIPTION = """
Given the user's question, construct a single SQLite query to retrieve a dataset to make an
informed response.

The table schema is:
create table transactions
(
    id          integer primary key,
    date        datetime,
    description text,
    type        text,
    amount      real,
    net_amount  real,
    settle_date datetime
);

Dates are stored as text in the form 'YYYY-MM-DD HH:MM:SS.ffffff' (time is always midnight),
so compare them with date(date) or strftime().

Categories (the type column) are:
Transfer
Purchase
Direct Debit
Fee
ATM Withdrawal
Deposit
Round Up

Sample rows:
8,2024-07-19 00:00:00.000000,Islandadv.Whalewatch,Purchase,-274.18,-274.18,2024-07-20 00:00:00.000000
9,2024-07-19 00:00:00.000000,Transfer from Chime Savings Account,Transfer,275,275,2024-07-19 00:00:00.000000
10,2024-07-19 00:00:00.000000,"Supermaven, Inc.",Purchase,-10,-10,2024-07-20 00:00:00.000000
11,2024-07-19 00:00:00.000000,"Notion Labs, Inc.",Purchase,-11.03,-11.03,2024-07-20 00:00:00.000000

Notes:
Descriptions can vary despite being the same merchant. When constructing queries, consider
using flexible matching (LIKE with wildcards, lower()) rather than exact equality.
"""

SQL_FIELD_DESCRIPTION = "A complete SQLite SELECT statement against the transactions table."

RESULTS_HEADER = "Here is relevant financial information you requested:\n\n"

FOLLOW_UP_PROMPT = (
    "If you need more data to answer the question, call the tool again with a new query. "
    "Otherwise, answer the original question using the data above."
)

FINAL_ANSWER_PROMPT = "Answer the original question using the data above. No more queries can be run."
