"""
Who-owes-whom for a trip's shared expenses.

Each expense credits its payer with the full amount and debits every person
it is split with by an equal share. The resulting net balances are settled
greedily: the largest debtor pays the largest creditor until one of them is
square, which yields at most n-1 transfers.
"""
from typing import Dict, Iterable, List, Tuple

EPSILON = 0.01


def compute_balances(expenses: Iterable[dict], members: List[str]) -> Dict[str, float]:
    balances: Dict[str, float] = {m: 0.0 for m in members}
    for expense in expenses:
        amount = float(expense.get("amount") or 0)
        payer = expense.get("payer")
        split_with = expense.get("split_with") or expense.get("splitWith") or members
        if not split_with:
            continue

        balances[payer] = balances.get(payer, 0.0) + amount
        share = amount / len(split_with)
        for person in split_with:
            balances[person] = balances.get(person, 0.0) - share
    return balances


def settle(balances: Dict[str, float]) -> List[Tuple[str, str, float]]:
    """Greedy transfer list as (from, to, amount) tuples."""
    debtors = []
    creditors = []
    for name, amount in balances.items():
        rounded = round(amount, 2)
        if rounded < -EPSILON:
            debtors.append([name, rounded])
        elif rounded > EPSILON:
            creditors.append([name, rounded])

    debtors.sort(key=lambda d: d[1])
    creditors.sort(key=lambda c: c[1], reverse=True)

    transactions = []
    i = j = 0
    while i < len(debtors) and j < len(creditors):
        debtor, creditor = debtors[i], creditors[j]
        amount = min(abs(debtor[1]), creditor[1])
        transactions.append((debtor[0], creditor[0], round(amount, 2)))

        debtor[1] += amount
        creditor[1] -= amount
        if abs(debtor[1]) < EPSILON:
            i += 1
        if abs(creditor[1]) < EPSILON:
            j += 1
    return transactions


def compute_settlement(expenses: Iterable[dict], members: List[str]) -> dict:
    balances = compute_balances(expenses, members)
    return {
        "balances": {name: round(amount, 2) for name, amount in balances.items()},
        "transactions": [
            {"from": debtor, "to": creditor, "amount": amount}
            for debtor, creditor, amount in settle(balances)
        ],
    }
