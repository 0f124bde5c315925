"""
Kanban board view model for the candidates page.
"""

from typing import Dict, List

from app.crud.candidate import CandidateRow
from app.models.candidate import CandidateStatus


def build_board(rows: List[CandidateRow]) -> Dict[str, List[CandidateRow]]:
    """
    Group candidate rows into one column per pipeline stage.

    Every stage gets a column, even when empty; rows keep their incoming order.
    """
    columns: Dict[str, List[CandidateRow]] = {status.value: [] for status in CandidateStatus}
    for row in rows:
        columns[row.candidate.status.value].append(row)
    return columns


def column_counts(columns: Dict[str, List[CandidateRow]]) -> Dict[str, int]:
    return {status: len(items) for status, items in columns.items()}


def navigation_links(is_admin: bool) -> List[Dict[str, str]]:
    """Links shown on the dashboard; the admin entry only for admins."""
    links = [
        {"label": "Jobs", "href": "/jobs"},
        {"label": "Candidates", "href": "/candidates"},
    ]
    if is_admin:
        links.append({"label": "Admin", "href": "/admin"})
    return links
