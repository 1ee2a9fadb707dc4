"""
CSV export of extracted contract terms.
"""

import csv
import io
import logging
from typing import Iterable

from core.contract_extractor import ExtractedContractTerms

logger = logging.getLogger(__name__)

CSV_HEADERS = [
    "source",
    "extractedAt",
    "effectiveDate",
    "expirationDate",
    "amount",
    "parties",
    "paymentTerms",
    "terminationClause",
    "automaticRenewal",
    "governingLaw",
    "disputeResolution",
    "confidentiality",
]

PARTY_SEPARATOR = "; "


def terms_to_csv(
    terms: ExtractedContractTerms | Iterable[ExtractedContractTerms],
) -> str:
    """
    Serialize one or more term sets to CSV.

    Parties are joined with "; " into a single column. Missing values are
    empty cells. An empty input yields just the header row.
    """
    if isinstance(terms, ExtractedContractTerms):
        terms = [terms]

    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=CSV_HEADERS, lineterminator="\n")
    writer.writeheader()

    count = 0
    for item in terms:
        writer.writerow(_to_row(item))
        count += 1

    logger.debug(f"Exported {count} term sets to CSV")
    return buffer.getvalue()


def _to_row(terms: ExtractedContractTerms) -> dict[str, str]:
    data = terms.to_dict()
    row = {}
    for header in CSV_HEADERS:
        value = data.get(header)
        if header == "parties" and value:
            value = PARTY_SEPARATOR.join(value)
        row[header] = "" if value is None else str(value)
    return row


def parse_parties(cell: str) -> list[str]:
    """Split a parties cell back into party names."""
    if not cell:
        return []
    return [party for party in cell.split(PARTY_SEPARATOR) if party]


def read_terms_csv(content: str) -> list[dict[str, str | list[str]]]:
    """Parse exported CSV into rows, with the parties column split back out."""
    rows = []
    for row in csv.DictReader(io.StringIO(content)):
        parsed: dict[str, str | list[str]] = dict(row)
        parsed["parties"] = parse_parties(row.get("parties") or "")
        rows.append(parsed)
    return rows
