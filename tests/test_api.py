"""
End-to-end tests for the HTTP surface, against a throwaway SQLite database.
"""
import pytest

from shareit.models.expense import Expense
from shareit.schemas.expense import MAX_AMOUNT
from tests.conftest import PASSWORD, add_expense, add_family


class TestSystem:
    def test_ping(self, client):
        res = client.get("/api/ping")
        assert res.status_code == 200
        body = res.json()
        assert body["status"] == "ok"
        assert "timestamp" in body

    def test_head_ping(self, client):
        assert client.head("/api/ping").status_code == 200

    def test_config(self, client, settings):
        assert client.get("/api/config").json() == {
            "apiUrl": settings.API_URL,
            "remoteApiUrl": settings.REMOTE_API_URL,
            "localApiUrl": settings.LOCAL_API_URL,
        }

    def test_db_health(self, client):
        assert client.get("/api/health/db").json()["db"] is True


class TestGroups:
    def test_create_requires_password(self, client):
        res = client.post("/api/groups", json={"name": "Trip", "password": "wrong"})
        assert res.status_code == 403

    def test_create_requires_name(self, client):
        res = client.post("/api/groups", json={"name": "   ", "password": PASSWORD})
        assert res.status_code == 400

    def test_create_and_fetch(self, client, group):
        assert group["name"] == "Goa Trip"
        assert group["status"] == "active"

        res = client.get(f"/api/groups/{group['id']}")
        assert res.status_code == 200
        assert res.json()["metrics"] == {"totalExpenses": 0, "expenseCount": 0, "familyCount": 0}

    def test_duplicate_name_is_case_insensitive(self, client, group):
        res = client.post("/api/groups", json={"name": "goa trip", "password": PASSWORD})
        assert res.status_code == 409

    def test_unknown_group(self, client):
        assert client.get("/api/groups/999").status_code == 404

    def test_list_with_metrics(self, client, group):
        add_family(client, group["id"], "Alpha", 2)
        add_expense(client, group["id"], "Alpha", 40)
        add_expense(client, group["id"], "Alpha", 2.5)

        res = client.get("/api/groups")
        assert res.status_code == 200
        [listed] = res.json()
        assert listed["metrics"] == {"totalExpenses": 42.5, "expenseCount": 2, "familyCount": 1}

    def test_rename_and_describe(self, client, group):
        res = client.patch(
            f"/api/groups/{group['id']}",
            json={"name": " Goa 2026 ", "description": "  beach  "},
        )
        assert res.status_code == 200
        assert res.json()["name"] == "Goa 2026"
        assert res.json()["description"] == "beach"

    def test_rename_to_taken_name(self, client, group):
        client.post("/api/groups", json={"name": "Other", "password": PASSWORD})
        res = client.patch(f"/api/groups/{group['id']}", json={"name": "OTHER"})
        assert res.status_code == 409

    def test_no_changes(self, client, group):
        assert client.patch(f"/api/groups/{group['id']}", json={}).status_code == 400

    def test_invalid_status(self, client, group):
        res = client.patch(f"/api/groups/{group['id']}", json={"status": "archived"})
        assert res.status_code == 400

    def test_close_and_reopen_need_password(self, client, group):
        url = f"/api/groups/{group['id']}"

        assert client.patch(url, json={"status": "closed"}).status_code == 403
        res = client.patch(url, json={"status": "closed", "password": PASSWORD})
        assert res.json()["status"] == "closed"

        assert client.patch(url, json={"status": "active", "password": "nope"}).status_code == 403
        res = client.patch(url, json={"status": "active", "password": PASSWORD})
        assert res.json()["status"] == "active"


class TestFamilies:
    def test_group_id_required(self, client):
        res = client.post("/api/families", json={"name": "Alpha", "members": 2, "password": PASSWORD})
        assert res.status_code == 400

    def test_group_id_in_query(self, client, group):
        res = client.post(
            f"/api/families?groupId={group['id']}",
            json={"name": "Alpha", "members": 2, "password": PASSWORD},
        )
        assert res.status_code == 201
        assert res.json()["groupId"] == group["id"]

    def test_unknown_group(self, client):
        assert client.get("/api/families?groupId=12345").status_code == 404

    def test_wrong_password(self, client, group):
        res = client.post(
            "/api/families",
            json={"groupId": group["id"], "name": "Alpha", "members": 2, "password": "x"},
        )
        assert res.status_code == 403

    def test_members_out_of_range(self, client, group):
        res = client.post(
            "/api/families",
            json={"groupId": group["id"], "name": "Alpha", "members": 11, "password": PASSWORD},
        )
        assert res.status_code == 422

    def test_name_trimmed_and_unique_per_group(self, client, group):
        family = add_family(client, group["id"], "  Alpha ", 2)
        assert family["name"] == "Alpha"

        res = client.post(
            "/api/families",
            json={"groupId": group["id"], "name": "ALPHA", "members": 1, "password": PASSWORD},
        )
        assert res.status_code == 409

        other = client.post("/api/groups", json={"name": "Other", "password": PASSWORD}).json()
        add_family(client, other["id"], "Alpha", 1)

    def test_list_sorted_with_usage(self, client, group):
        add_family(client, group["id"], "Beta", 1)
        add_family(client, group["id"], "Alpha", 2)
        add_expense(client, group["id"], "Beta", 10)

        res = client.get(f"/api/families?groupId={group['id']}")
        assert [(f["name"], f["hasExpenses"]) for f in res.json()] == [
            ("Alpha", False),
            ("Beta", True),
        ]

    def test_update_members(self, client, group):
        family = add_family(client, group["id"], "Alpha", 2)

        res = client.patch(f"/api/families/{family['id']}", json={"members": 5})
        assert res.status_code == 200
        assert res.json()["members"] == 5

        assert client.patch("/api/families/999", json={"members": 5}).status_code == 404

    def test_delete(self, client, group):
        family = add_family(client, group["id"], "Alpha", 2)
        url = f"/api/families/{family['id']}"

        assert client.request("DELETE", url, json={"password": "x"}).status_code == 403
        assert client.request("DELETE", url, json={"password": PASSWORD}).status_code == 200
        assert client.get(f"/api/families?groupId={group['id']}").json() == []

    def test_delete_with_expenses_refused(self, client, group):
        family = add_family(client, group["id"], "Alpha", 2)
        add_expense(client, group["id"], "Alpha", 10)

        res = client.request("DELETE", f"/api/families/{family['id']}", json={"password": PASSWORD})
        assert res.status_code == 400

    def test_closed_group_is_read_only(self, client, group):
        family = add_family(client, group["id"], "Alpha", 2)
        client.patch(f"/api/groups/{group['id']}", json={"status": "closed", "password": PASSWORD})

        res = client.post(
            "/api/families",
            json={"groupId": group["id"], "name": "Beta", "members": 1, "password": PASSWORD},
        )
        assert res.status_code == 400
        assert client.patch(f"/api/families/{family['id']}", json={"members": 3}).status_code == 400


class TestExpenses:
    def test_family_must_exist(self, client, group):
        add_family(client, group["id"], "Alpha", 2)

        res = client.post(
            "/api/expenses",
            json={"groupId": group["id"], "familyName": "alpha", "amount": 10},
        )
        assert res.status_code == 400

    def test_negative_amount(self, client, group):
        add_family(client, group["id"], "Alpha", 2)
        res = client.post(
            "/api/expenses",
            json={"groupId": group["id"], "familyName": "Alpha", "amount": -1},
        )
        assert res.status_code == 422

    def test_list_newest_first(self, client, group):
        add_family(client, group["id"], "Alpha", 2)
        first = add_expense(client, group["id"], "Alpha", 10, "fuel")
        second = add_expense(client, group["id"], "Alpha", 20, "dinner")

        res = client.get(f"/api/expenses?groupId={group['id']}")
        assert [e["id"] for e in res.json()] == [second["id"], first["id"]]
        assert res.json()[0]["familyName"] == "Alpha"

    def test_update(self, client, group):
        add_family(client, group["id"], "Alpha", 2)
        add_family(client, group["id"], "Beta", 2)
        expense = add_expense(client, group["id"], "Alpha", 10)
        url = f"/api/expenses/{expense['id']}"

        assert client.patch(url, json={}).status_code == 400
        assert client.patch(url, json={"familyName": "Ghost"}).status_code == 400

        res = client.patch(url, json={"amount": 15, "familyName": "Beta"})
        assert res.status_code == 200
        assert (res.json()["amount"], res.json()["familyName"]) == (15, "Beta")

    def test_delete(self, client, group):
        add_family(client, group["id"], "Alpha", 2)
        expense = add_expense(client, group["id"], "Alpha", 10)

        assert client.delete(f"/api/expenses/{expense['id']}").status_code == 200
        assert client.delete(f"/api/expenses/{expense['id']}").status_code == 404

    def test_closed_group_rejects_expenses(self, client, group):
        add_family(client, group["id"], "Alpha", 2)
        expense = add_expense(client, group["id"], "Alpha", 10)
        client.patch(f"/api/groups/{group['id']}", json={"status": "closed", "password": PASSWORD})

        res = client.post(
            "/api/expenses",
            json={"groupId": group["id"], "familyName": "Alpha", "amount": 5},
        )
        assert res.status_code == 400
        assert client.delete(f"/api/expenses/{expense['id']}").status_code == 400


class TestExpenseAmounts:
    def post_raw(self, client, body):
        # the JSON encoder refuses non-finite floats, so send the text as is
        return client.post(
            "/api/expenses",
            content=body,
            headers={"Content-Type": "application/json"},
        )

    @pytest.mark.parametrize("literal", ["Infinity", "-Infinity", "NaN"])
    def test_non_finite_amount_rejected(self, client, group, literal):
        add_family(client, group["id"], "Alpha", 2)

        res = self.post_raw(
            client, f'{{"groupId": {group["id"]}, "familyName": "Alpha", "amount": {literal}}}'
        )
        assert res.status_code == 422
        assert client.get(f"/api/expenses?groupId={group['id']}").json() == []

    def test_amount_above_cap_rejected(self, client, group):
        add_family(client, group["id"], "Alpha", 2)

        res = client.post(
            "/api/expenses",
            json={"groupId": group["id"], "familyName": "Alpha", "amount": 1e308},
        )
        assert res.status_code == 422

        res = client.post(
            "/api/expenses",
            json={"groupId": group["id"], "familyName": "Alpha", "amount": MAX_AMOUNT},
        )
        assert res.status_code == 201

    def test_update_rejects_non_finite_amount(self, client, group):
        add_family(client, group["id"], "Alpha", 2)
        expense = add_expense(client, group["id"], "Alpha", 10)

        res = client.patch(
            f"/api/expenses/{expense['id']}",
            content='{"amount": Infinity}',
            headers={"Content-Type": "application/json"},
        )
        assert res.status_code == 422
        assert client.patch(f"/api/expenses/{expense['id']}", json={"amount": 2e9}).status_code == 422

    def test_overflowing_stored_amounts_reported_as_conflict(self, client, group):
        add_family(client, group["id"], "Alpha", 1)
        add_family(client, group["id"], "Beta", 1)

        async def insert_huge_expenses():
            async with client.app.state.sessionmaker() as db:
                db.add_all([
                    Expense(amount=1e308, family_name="Alpha", group_id=group["id"]),
                    Expense(amount=1e308, family_name="Beta", group_id=group["id"]),
                ])
                await db.commit()

        client.portal.call(insert_huge_expenses)

        res = client.get(f"/api/expenses/settlements?groupId={group['id']}")
        assert res.status_code == 409


class TestSettlements:
    def test_group_id_required(self, client):
        assert client.get("/api/expenses/settlements").status_code == 400

    def test_wire_format(self, client, group):
        add_family(client, group["id"], "Alpha", 2)
        add_family(client, group["id"], "Beta", 2)
        add_expense(client, group["id"], "Alpha", 100)

        res = client.get(f"/api/expenses/settlements?groupId={group['id']}")
        assert res.status_code == 200
        assert res.json() == {
            "totalExpenses": 100,
            "totalMembers": 4,
            "perPersonShare": 25,
            "familyBalances": [
                {"family": "Alpha", "members": 2, "share": 50, "paid": 100, "balance": 50},
                {"family": "Beta", "members": 2, "share": 50, "paid": 0, "balance": -50},
            ],
            "settlements": [{"from": "Beta", "to": "Alpha", "amount": "50.00"}],
        }

    def test_closed_group_still_settles(self, client, group):
        add_family(client, group["id"], "A", 1)
        add_family(client, group["id"], "B", 1)
        add_expense(client, group["id"], "A", 30)
        client.patch(f"/api/groups/{group['id']}", json={"status": "closed", "password": PASSWORD})

        res = client.get(f"/api/expenses/settlements?groupId={group['id']}")
        assert res.json()["settlements"] == [{"from": "B", "to": "A", "amount": "15.00"}]

    def test_sub_cent_transfers_are_omitted(self, client, group):
        add_family(client, group["id"], "A", 1)
        add_family(client, group["id"], "B", 1)
        add_expense(client, group["id"], "A", 0.004)

        res = client.get(f"/api/expenses/settlements?groupId={group['id']}")
        assert res.status_code == 200
        assert res.json()["settlements"] == []

        add_expense(client, group["id"], "A", 0.016)
        res = client.get(f"/api/expenses/settlements?groupId={group['id']}")
        assert res.json()["settlements"] == [{"from": "B", "to": "A", "amount": "0.01"}]

    def test_empty_group(self, client, group):
        res = client.get(f"/api/expenses/settlements?groupId={group['id']}")
        body = res.json()
        assert (body["totalMembers"], body["perPersonShare"], body["settlements"]) == (0, 0, [])
