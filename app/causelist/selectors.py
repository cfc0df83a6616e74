from __future__ import annotations

"""Locators for the supported court portals.

XPath locators are prefixed with ``xpath=`` so they can be passed straight
to ``page.locator``. Button labels are matched with ``contains(., ...)``
because both portals wrap labels in nested markup.
"""

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class AphcSelectors:
    """Selector hints for the Andhra Pradesh High Court case search.

    The portal renders a menu of buttons; "Daily Cause List" and then
    "ADVOCATE CODE WISE" must both be clicked before the ``#advcd`` input
    exists. Results land in ``#clisttable`` where data rows carry
    ``data-label`` attributes on every cell.
    """

    daily_cause_list_button: str = "xpath=//button[contains(., 'Daily Cause List')]"
    advocate_code_wise_button: str = "xpath=//button[contains(., 'ADVOCATE CODE WISE')]"
    advocate_input: str = "#advcd"
    submit_button: str = ".btn_submit"
    results_table: str = "#clisttable"
    row_selector: str = "#clisttable tr"
    serial_cell: str = 'td[data-label="S.No"]'
    case_details_cell: str = 'td[data-label="Case Det"]'
    party_cell: str = 'td[data-label="Party"]'
    petitioner_advocate_cell: str = 'td[data-label="Pet Adv"]'
    respondent_advocate_cell: str = 'td[data-label="Res Adv"]'
    district_cell: str = 'td[data-label="District"]'
    min_cells: int = 6


@dataclass(frozen=True)
class TshcSelectors:
    """Selector hints for the Telangana High Court causelist portal.

    The portal reuses ``id="dataTable"`` for several tables on one page, so
    the attribute selector is used to collect all of them. A data row has
    exactly six cells: S.No, Case, Party Details, Pet Adv, Res Adv,
    District/Remarks.
    """

    daily_list_button: str = (
        "xpath=//a[contains(., 'Daily List')] | //div[contains(text(), 'Daily List')]"
        " | //span[contains(text(), 'Daily List')]"
    )
    advocate_wise_button: str = (
        "xpath=//a[contains(., 'Advocate Wise')] | //button[contains(., 'Advocate Wise')]"
    )
    advocate_input: str = 'input[type="text"], input[type="search"]'
    submit_button: str = (
        "xpath=//button[contains(., 'Search')] | //button[contains(., 'Submit')]"
        " | //input[@type='submit'] | //button[@type='submit']"
    )
    results_table: str = 'table[id="dataTable"]'
    row_selector: str = "tbody tr"
    column_count: int = 6
    column_order: Tuple[str, ...] = (
        "serial_no",
        "case_details",
        "party",
        "petitioner_advocate",
        "respondent_advocate",
        "district",
    )


APHC_SELECTORS = AphcSelectors()
TSHC_SELECTORS = TshcSelectors()

__all__ = [
    "AphcSelectors",
    "TshcSelectors",
    "APHC_SELECTORS",
    "TSHC_SELECTORS",
]
