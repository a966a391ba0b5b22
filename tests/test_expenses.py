import pytest

from services.settlement import compute_balances, compute_settlement, settle


def _expense(payer, amount, split_with):
    return {"payer": payer, "amount": amount, "splitWith": split_with}


def test_balances_credit_payer_and_debit_shares():
    balances = compute_balances([_expense("Me", 90, ["Me", "Ana", "Luis"])], ["Me", "Ana", "Luis"])
    assert balances["Me"] == pytest.approx(60)
    assert balances["Ana"] == pytest.approx(-30)
    assert balances["Luis"] == pytest.approx(-30)


def test_settle_largest_debtor_pays_largest_creditor():
    transactions = settle({"Me": 70.0, "Ana": -50.0, "Luis": -20.0, "Eva": 0.0})
    assert transactions == [("Ana", "Me", 50.0), ("Luis", "Me", 20.0)]


def test_settle_ignores_sub_cent_noise():
    assert settle({"Me": 0.004, "Ana": -0.004}) == []


def test_settlement_uneven_split_rounds_to_cents():
    result = compute_settlement(
        [_expense("Me", 100, ["Me", "Ana", "Luis"]), _expense("Ana", 30, ["Ana", "Luis"])],
        ["Me", "Ana", "Luis"],
    )
    assert result["balances"] == {"Me": 66.67, "Ana": -18.33, "Luis": -48.33}
    assert result["transactions"] == [
        {"from": "Luis", "to": "Me", "amount": 48.33},
        {"from": "Ana", "to": "Me", "amount": 18.33},
    ]


def test_create_and_list_expenses(client, alice, trip):
    client.put(f"/trips/{trip['id']}/members", json={"members": ["Me", "Ana"]}, headers=alice)
    base = f"/trips/{trip['id']}/expenses"

    res = client.post(
        base + "/",
        json={"description": "Dinner", "amount": 80, "date": "2025-07-02", "category": "Food",
              "payer": "Me", "splitWith": ["Me", "Ana"]},
        headers=alice,
    )
    assert res.status_code == 201
    assert res.json()["splitWith"] == ["Me", "Ana"]

    client.post(
        base + "/",
        json={"description": "Museum", "amount": 20, "date": "2025-07-03", "category": "Activities",
              "payer": "Ana", "splitWith": ["Ana"]},
        headers=alice,
    )
    assert [e["description"] for e in client.get(base + "/", headers=alice).json()] == ["Museum", "Dinner"]

    settlement = client.get(base + "/settlement", headers=alice).json()
    assert settlement["balances"] == {"Me": 40.0, "Ana": -40.0}
    assert settlement["transactions"] == [{"from": "Ana", "to": "Me", "amount": 40.0}]


@pytest.mark.parametrize("override, status", [
    ({"amount": 0}, 400),
    ({"description": "   "}, 400),
    ({"category": " "}, 400),
    ({"splitWith": []}, 400),
    ({"date": "not-a-date"}, 400),
    ({"payer": "Stranger"}, 400),
])
def test_expense_validation(client, alice, trip, override, status):
    payload = {"description": "Taxi", "amount": 15, "date": "2025-07-02", "category": "Transport",
               "payer": "Me", "splitWith": ["Me"]}
    payload.update(override)
    res = client.post(f"/trips/{trip['id']}/expenses/", json=payload, headers=alice)
    assert res.status_code == status


def test_payer_must_be_member(client, alice, trip):
    res = client.post(
        f"/trips/{trip['id']}/expenses/",
        json={"description": "Taxi", "amount": 15, "date": "2025-07-02", "category": "Transport",
              "payer": "Stranger", "splitWith": ["Me"]},
        headers=alice,
    )
    assert res.json()["detail"] == "Payer must be a trip member"
