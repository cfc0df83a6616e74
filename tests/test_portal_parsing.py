from __future__ import annotations

from app.causelist import courts
from app.causelist.models import UNKNOWN
from app.causelist.normalizer import normalize_rows
from app.causelist.portal_aphc import AphcAdapter
from app.causelist.portal_tshc import TshcAdapter

APHC_RESULTS_HTML = """
<html><body>
<table id="clisttable">
  <tr><th>S.No</th><th>Case Det</th><th>Party</th><th>Pet Adv</th><th>Res Adv</th><th>District</th></tr>
  <tr><td colspan="6">COURT NO. 1 - HON'BLE SRI JUSTICE A</td></tr>
  <tr>
    <td data-label="S.No">1</td>
    <td data-label="Case Det"><b><a href="#">WP/1234/2024</a><br><font color="red">IA 1/2024</font></b></td>
    <td data-label="Party">RAMA RAO<br>Vs<br>STATE OF AP</td>
    <td data-label="Pet Adv">K SRINIVAS<br>P LAKSHMI</td>
    <td data-label="Res Adv">GP FOR REVENUE</td>
    <td data-label="District">GUNTUR</td>
  </tr>
  <tr>
    <td data-label="S.No">2</td>
    <td data-label="Case Det">CRP/55/2023<br>FOR ADMISSION</td>
    <td data-label="Party">SOLE PETITIONER</td>
    <td data-label="Pet Adv"></td>
    <td data-label="Res Adv"></td>
    <td data-label="District">KRISHNA</td>
  </tr>
  <tr>
    <td data-label="S.No">3</td>
    <td data-label="Case Det">TRUNCATED</td>
  </tr>
</table>
</body></html>
"""

TSHC_RESULTS_HTML = """
<html><body>
<table id="dataTable">
  <thead><tr><th>S.No</th><th>Case</th><th>Party Details</th><th>Pet Adv</th><th>Res Adv</th><th>District</th></tr></thead>
  <tbody>
    <tr><td colspan="6">COURT HALL NO. 2</td></tr>
    <tr>
      <td> 1 </td>
      <td><a href="/case/1">WP 100/2024</a> <span>(FRESH)</span></td>
      <td>M/S ABC LTD
          vs
          UNION OF INDIA</td>
      <td>SRI A KUMAR</td>
      <td>ASST SOLICITOR GENERAL</td>
      <td>HYDERABAD</td>
    </tr>
    <tr>
      <td>S.No</td><td>Case</td><td>Party</td><td>Pet</td><td>Res</td><td>Dist</td>
    </tr>
  </tbody>
</table>
<table id="dataTable">
  <tbody>
    <tr>
      <td>2</td>
      <td>CRLP 7/2024 BAIL</td>
      <td>SOLE PETITIONER</td>
      <td>SMT B RANI</td>
      <td></td>
      <td>WARANGAL</td>
    </tr>
  </tbody>
</table>
<table id="other"><tbody><tr><td>9</td><td>a</td><td>b</td><td>c</td><td>d</td><td>e</td></tr></tbody></table>
</body></html>
"""


def test_aphc_parses_labelled_rows_only() -> None:
    rows = AphcAdapter().parse_results_html(APHC_RESULTS_HTML)

    assert [row.serial_no for row in rows] == ["1", "2"]
    first = rows[0]
    assert first.case_anchor == "WP/1234/2024"
    assert first.case_details_lines == ["WP/1234/2024", "IA 1/2024"]
    assert first.party_lines == ["RAMA RAO", "Vs", "STATE OF AP"]
    assert first.petitioner_advocate_lines == ["K SRINIVAS", "P LAKSHMI"]
    assert rows[1].case_anchor is None


def test_aphc_rows_normalise_to_canonical_records() -> None:
    adapter = AphcAdapter()
    records = normalize_rows(adapter.parse_results_html(APHC_RESULTS_HTML), adapter.court)

    first, second = records
    assert first.case_number == "WP/1234/2024"
    assert first.case_details == "WP/1234/2024 IA 1/2024"
    assert first.case_details_raw == "WP/1234/2024\nIA 1/2024"
    assert first.petitioner == "RAMA RAO"
    assert first.respondent == "STATE OF AP"
    assert first.petitioner_advocate == "K SRINIVAS, P LAKSHMI"
    assert first.district == "GUNTUR"

    assert second.case_number == "CRP/55/2023"
    assert second.petitioner == "SOLE PETITIONER"
    assert second.respondent == UNKNOWN
    assert second.petitioner_advocate == UNKNOWN


def test_tshc_reads_every_data_table_with_six_numeric_rows() -> None:
    adapter = TshcAdapter()
    rows = adapter.parse_results_html(TSHC_RESULTS_HTML)

    assert [row.serial_no for row in rows] == ["1", "2"]

    records = normalize_rows(rows, courts.TELANGANA)
    first, second = records
    assert first.case_number == "WP 100/2024"
    assert first.case_details == "WP 100/2024 (FRESH)"
    assert first.party == "M/S ABC LTD Vs UNION OF INDIA"
    assert first.petitioner == "M/S ABC LTD"
    assert first.respondent == "UNION OF INDIA"
    assert first.petitioner_advocate == "SRI A KUMAR"
    assert first.district == "HYDERABAD"

    assert second.case_number == "CRLP"
    assert second.respondent == UNKNOWN
    assert second.respondent_advocate == UNKNOWN


def test_parsers_return_nothing_for_pages_without_tables() -> None:
    assert AphcAdapter().parse_results_html("<html><body>No records</body></html>") == []
    assert TshcAdapter().parse_results_html("") == []
