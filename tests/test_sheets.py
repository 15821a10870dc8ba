import json

import pytest
from conftest import BrokenSession, auth_header, line_payload, sheet_payload
from fastapi import HTTPException

from custody.core import messages
from custody.db.session import SessionLocal
from custody.models.expense_line import ExpenseLine
from custody.models.sheet import Sheet
from custody.services import sheet_service


def _count_lines(sheet_id):
    session = SessionLocal()
    try:
        return session.query(ExpenseLine).filter(ExpenseLine.sheet_id == sheet_id).count()
    finally:
        session.close()


def _sheets_by_id(client, user):
    response = client.get("/api/sheets", headers=auth_header(user))
    assert response.status_code == 200
    return {sheet["id"]: sheet for sheet in response.json()}


class TestSaveSheet:
    def test_save_echoes_submitted_sheet(self, client, employee):
        payload = sheet_payload(
            "CUST-1", employee.id, lines=[line_payload("l1", 200, 10), line_payload("l2", 300)]
        )
        response = client.post("/api/sheets", json=payload, headers=auth_header(employee))
        assert response.status_code == 200
        body = response.json()
        assert body["id"] == "CUST-1"
        assert [line["id"] for line in body["lines"]] == ["l1", "l2"]
        assert all(line["sheet_id"] == "CUST-1" for line in body["lines"])

    def test_round_trip_types(self, client, employee):
        payload = sheet_payload(
            "CUST-1",
            employee.id,
            amount=1000.5,
            notes="first week",
            lines=[
                line_payload(
                    "l1",
                    200.25,
                    10,
                    date="2024-05-03T00:00:00.000Z",
                    tax_number="300-1",
                    invoice_number="INV-9",
                    buyer_name="Ali",
                    notes="urgent",
                ),
                line_payload("l2", 300, reason="FOOD"),
            ],
        )
        client.post("/api/sheets", json=payload, headers=auth_header(employee))

        sheet = _sheets_by_id(client, employee)["CUST-1"]
        assert sheet["custody_amount"] == 1000.5
        assert sheet["notes"] == "first week"
        assert sheet["status"] == "OPEN"
        assert len(sheet["lines"]) == 2

        first, second = sheet["lines"]
        assert first["amount"] == 200.25
        assert isinstance(first["amount"], float)
        assert first["bank_fees"] == 10
        assert first["date"] == "2024-05-03"
        assert first["tax_number"] == "300-1"
        assert first["invoice_number"] == "INV-9"
        assert first["buyer_name"] == "Ali"
        assert first["reason"] == "PROJECTS"
        assert second["bank_fees"] is None
        assert second["reason"] == "FOOD"
        assert second["date"] == "2024-05-02"

    def test_save_replaces_whole_line_set(self, client, employee):
        headers = auth_header(employee)
        client.post(
            "/api/sheets",
            json=sheet_payload("CUST-1", employee.id, lines=[line_payload("l1", 1), line_payload("l2", 2)]),
            headers=headers,
        )
        client.post(
            "/api/sheets",
            json=sheet_payload("CUST-1", employee.id, custody_number="renamed", lines=[line_payload("l3", 3)]),
            headers=headers,
        )

        sheet = _sheets_by_id(client, employee)["CUST-1"]
        assert sheet["custody_number"] == "renamed"
        assert [line["id"] for line in sheet["lines"]] == ["l3"]
        assert _count_lines("CUST-1") == 1

    def test_save_is_idempotent(self, client, employee):
        headers = auth_header(employee)
        payload = sheet_payload("CUST-1", employee.id, lines=[line_payload("l1", 200, 10)])

        client.post("/api/sheets", json=payload, headers=headers)
        first = _sheets_by_id(client, employee)["CUST-1"]
        client.post("/api/sheets", json=payload, headers=headers)
        second = _sheets_by_id(client, employee)["CUST-1"]

        assert first == second

    def test_created_at_kept_on_resave(self, client, employee):
        headers = auth_header(employee)
        client.post("/api/sheets", json=sheet_payload("CUST-1", employee.id), headers=headers)
        client.post(
            "/api/sheets",
            json=sheet_payload(
                "CUST-1",
                employee.id,
                created_at="2030-01-01T00:00:00Z",
                last_modified="2024-06-01T00:00:00Z",
            ),
            headers=headers,
        )

        sheet = _sheets_by_id(client, employee)["CUST-1"]
        assert sheet["created_at"].startswith("2024-05-01")
        assert sheet["last_modified"].startswith("2024-06-01")

    def test_failed_save_keeps_previous_state(self, client, employee):
        headers = auth_header(employee)
        client.post(
            "/api/sheets",
            json=sheet_payload("CUST-A", employee.id, lines=[line_payload("shared", 5)]),
            headers=headers,
        )
        client.post(
            "/api/sheets",
            json=sheet_payload("CUST-B", employee.id, lines=[line_payload("b1", 7), line_payload("b2", 8)]),
            headers=headers,
        )

        # line id already owned by CUST-A: the insert fails after the delete
        response = client.post(
            "/api/sheets",
            json=sheet_payload(
                "CUST-B",
                employee.id,
                custody_number="changed",
                lines=[line_payload("shared", 99)],
            ),
            headers=headers,
        )
        assert response.status_code == 500
        assert response.json()["error"] == messages.SHEET_SAVE_FAILED

        sheet = _sheets_by_id(client, employee)["CUST-B"]
        assert sheet["custody_number"] == "C-CUST-B"
        assert [line["id"] for line in sheet["lines"]] == ["b1", "b2"]

    def test_negative_custody_amount_rejected(self, client, employee):
        response = client.post(
            "/api/sheets",
            json=sheet_payload("CUST-1", employee.id, amount=-1),
            headers=auth_header(employee),
        )
        assert response.status_code == 400

    def test_unknown_reason_rejected(self, client, employee):
        response = client.post(
            "/api/sheets",
            json=sheet_payload("CUST-1", employee.id, lines=[line_payload("l1", 5, reason="BRIBES")]),
            headers=auth_header(employee),
        )
        assert response.status_code == 400

    def test_display_label_accepted_as_reason(self, client, employee):
        client.post(
            "/api/sheets",
            json=sheet_payload("CUST-1", employee.id, lines=[line_payload("l1", 5, reason="مصاريف السكن")]),
            headers=auth_header(employee),
        )
        sheet = _sheets_by_id(client, employee)["CUST-1"]
        assert sheet["lines"][0]["reason"] == "ACCOMMODATION"

    def test_employee_cannot_save_for_someone_else(self, client, employee, other_employee):
        response = client.post(
            "/api/sheets",
            json=sheet_payload("CUST-1", other_employee.id),
            headers=auth_header(employee),
        )
        assert response.status_code == 403

    def test_employee_cannot_take_over_existing_sheet(self, client, employee, other_employee):
        client.post(
            "/api/sheets",
            json=sheet_payload("CUST-1", other_employee.id),
            headers=auth_header(other_employee),
        )
        response = client.post(
            "/api/sheets",
            json=sheet_payload("CUST-1", employee.id),
            headers=auth_header(employee),
        )
        assert response.status_code == 403
        assert _sheets_by_id(client, other_employee)["CUST-1"]["employee_id"] == other_employee.id

    def test_admin_can_save_for_employee(self, client, admin, employee):
        response = client.post(
            "/api/sheets",
            json=sheet_payload("CUST-1", employee.id),
            headers=auth_header(admin),
        )
        assert response.status_code == 200
        assert "CUST-1" in _sheets_by_id(client, employee)


class TestListSheets:
    def _seed(self, client, employee, other_employee):
        client.post(
            "/api/sheets",
            json=sheet_payload("E1", employee.id, last_modified="2024-05-01T00:00:00Z"),
            headers=auth_header(employee),
        )
        client.post(
            "/api/sheets",
            json=sheet_payload("E2", employee.id, last_modified="2024-05-03T00:00:00Z"),
            headers=auth_header(employee),
        )
        client.post(
            "/api/sheets",
            json=sheet_payload("O1", other_employee.id, last_modified="2024-05-02T00:00:00Z"),
            headers=auth_header(other_employee),
        )

    def test_employee_sees_only_own_sheets(self, client, employee, other_employee):
        self._seed(client, employee, other_employee)
        sheets = client.get("/api/sheets", headers=auth_header(employee)).json()
        assert [sheet["id"] for sheet in sheets] == ["E2", "E1"]
        assert all(sheet["employee_id"] == employee.id for sheet in sheets)

    def test_managers_see_all_sheets_newest_first(self, client, admin, team_lead, employee, other_employee):
        self._seed(client, employee, other_employee)
        for user in (admin, team_lead):
            sheets = client.get("/api/sheets", headers=auth_header(user)).json()
            assert [sheet["id"] for sheet in sheets] == ["E2", "O1", "E1"]

    def test_lines_keep_submitted_order(self, client, employee):
        lines = [line_payload(f"l{i}", i) for i in (3, 1, 2)]
        client.post(
            "/api/sheets",
            json=sheet_payload("CUST-1", employee.id, lines=lines),
            headers=auth_header(employee),
        )
        sheet = _sheets_by_id(client, employee)["CUST-1"]
        assert [line["id"] for line in sheet["lines"]] == ["l3", "l1", "l2"]


class TestDeleteSheet:
    def test_delete_cascades_to_lines(self, client, admin, employee):
        client.post(
            "/api/sheets",
            json=sheet_payload("CUST-1", employee.id, lines=[line_payload("l1", 1), line_payload("l2", 2)]),
            headers=auth_header(employee),
        )
        assert _count_lines("CUST-1") == 2

        response = client.delete("/api/sheets/CUST-1", headers=auth_header(admin))
        assert response.status_code == 200
        assert response.json()["message"] == messages.SHEET_DELETED

        assert _sheets_by_id(client, admin) == {}
        assert _count_lines("CUST-1") == 0

    def test_delete_unknown_sheet(self, client, team_lead):
        response = client.delete("/api/sheets/missing", headers=auth_header(team_lead))
        assert response.status_code == 404

    def test_employee_cannot_delete(self, client, employee):
        client.post(
            "/api/sheets",
            json=sheet_payload("CUST-1", employee.id),
            headers=auth_header(employee),
        )
        response = client.delete("/api/sheets/CUST-1", headers=auth_header(employee))
        assert response.status_code == 403
        session = SessionLocal()
        try:
            assert session.get(Sheet, "CUST-1") is not None
        finally:
            session.close()


class TestNonFiniteAmounts:
    def _post_raw(self, client, user, payload):
        # json.dumps writes Infinity / NaN literals, which the JSON parser accepts
        return client.post(
            "/api/sheets",
            content=json.dumps(payload),
            headers={**auth_header(user), "Content-Type": "application/json"},
        )

    @pytest.mark.parametrize("value", [float("inf"), float("nan")])
    def test_custody_amount_rejected(self, client, employee, admin, value):
        response = self._post_raw(client, employee, sheet_payload("INF-1", employee.id, amount=value))
        assert response.status_code == 400
        assert _sheets_by_id(client, admin) == {}

    @pytest.mark.parametrize("field", ["amount", "bank_fees"])
    @pytest.mark.parametrize("value", [float("inf"), float("nan")])
    def test_line_amounts_rejected(self, client, employee, field, value):
        line = line_payload("l1", 10, bank_fees=1)
        line[field] = value
        response = self._post_raw(client, employee, sheet_payload("INF-1", employee.id, lines=[line]))
        assert response.status_code == 400
        assert _count_lines("INF-1") == 0


class TestListFailure:
    def test_database_error_is_localized(self, employee):
        with pytest.raises(HTTPException) as excinfo:
            sheet_service.list_sheets(BrokenSession(), employee)
        assert excinfo.value.status_code == 500
        assert excinfo.value.detail == messages.SHEETS_FETCH_FAILED
