import pytest
from fastapi.testclient import TestClient

from webreg_ics.server import app

PAGE = """<html><body><table id="list-id-table"><tbody>
<tr><td>Subject Course</td><td>Title</td><td>Section Code</td><td>Type</td><td>Instructor</td>
<td>Grade Option</td><td>Units</td><td>Days</td><td>Time</td><td>BLDG</td><td>Room</td></tr>
<tr><td>CSE 100</td><td>Advanced Data Structures</td><td>A00</td><td>LE</td>
<td><a href="#">Smith, Jane</a></td><td>L</td><td>4.00</td><td>MWF</td><td>9:00a-9:50a</td>
<td><a href="#">WLH</a></td><td><a href="#">2001</a></td></tr>
<tr><td></td><td></td><td></td><td>FI</td><td></td><td></td><td></td>
<td>Sa 03/16/2024</td><td>11:30a-2:29p</td><td>TBA</td><td>TBA</td></tr>
</tbody></table></body></html>
"""


@pytest.fixture
def client():
    return TestClient(app)


def _post(client, html, start="2024-01-08", end="2024-03-16"):
    return client.post(
        "/",
        data={"startDate": start, "endDate": end},
        files={"file": ("webregMain.html", html.encode("utf-8"), "text/html")},
    )


def test_index_serves_form(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert 'name="startDate"' in resp.text
    assert 'name="endDate"' in resp.text
    assert 'type="file"' in resp.text


def test_upload_returns_calendar(client):
    resp = _post(client, PAGE)
    assert resp.status_code == 200
    assert resp.headers["content-disposition"] == "attachment; filename=courses.ics"
    body = resp.text
    assert body.count("BEGIN:VEVENT") == 2
    assert "BYDAY=MO,WE,FR" in body
    assert "UNTIL=20240316" in body
    assert "SUMMARY:CSE 100 Final" in body


def test_parse_error_is_400(client):
    broken = PAGE.replace("<td>4.00</td>", "<td></td>")
    resp = _post(client, broken)
    assert resp.status_code == 400
    assert resp.json()["detail"] == "course has no units"


def test_missing_table_is_400(client):
    resp = _post(client, "<html><body></body></html>")
    assert resp.status_code == 400


def test_bad_date_rejected(client):
    resp = _post(client, PAGE, start="not-a-date")
    assert resp.status_code == 422
