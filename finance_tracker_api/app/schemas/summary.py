"""
Pydantic models for the financial summary.

Amounts are milliunits.  ``expenses_amount`` is the (non-positive) sum of
negative transactions, whereas category values and daily ``expenses``
are absolute, positive numbers.
"""

from typing import List

from pydantic import BaseModel


class CategorySpend(BaseModel):
    name: str
    value: int


class DaySummary(BaseModel):
    date: str
    income: int
    expenses: int


class Summary(BaseModel):
    remaining_amount: int
    remaining_change: int
    income_amount: int
    income_change: int
    expenses_amount: int
    expenses_change: int
    categories: List[CategorySpend]
    days: List[DaySummary]
