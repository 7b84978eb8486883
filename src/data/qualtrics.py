import io
import logging
import re
from dataclasses import dataclass, field
from typing import Dict, List

import pandas as pd

try:
    from ..tabulation.models import ElectionConfig
except ImportError:
    from tabulation.models import ElectionConfig

logger = logging.getLogger(__name__)

# "Please Rank the candidates for the Vice President. - VP 1"
RANKING_HEADER = re.compile(r"Please.*?(?:for|of)\s+(?:the\s+)?(.+?)\.\s*-\s*(.+)$")

LEADING_INTEGER = re.compile(r"\s*([+-]?\d+)")

HEADER_ROW = 1
FIRST_RESPONSE_ROW = 3


class CSVFormatError(ValueError):
    """The export does not have the expected Qualtrics layout."""


@dataclass
class ElectionPosition:
    """Candidates and ballots for one ranked question in the export."""

    title: str
    candidates: List[str]
    ballots: List[List[str]] = field(default_factory=list)

    def to_config(self, method: str, seats: int = 1) -> ElectionConfig:
        return ElectionConfig(
            candidates=list(self.candidates),
            ballots=[list(b) for b in self.ballots],
            method=method,
            seats=seats,
            title=self.title,
        )

    def to_dict(self) -> Dict:
        return {
            "title": self.title,
            "candidates": list(self.candidates),
            "ballots": [list(b) for b in self.ballots],
        }


def _read_rows(content: str) -> pd.DataFrame:
    lines = [line for line in content.splitlines() if line.strip()]
    if len(lines) < FIRST_RESPONSE_ROW + 1:
        raise CSVFormatError("CSV file is too short. Expected at least 4 rows.")

    try:
        frame = pd.read_csv(
            io.StringIO("\n".join(lines)),
            header=None,
            dtype=str,
            keep_default_na=False,
        )
    except (pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        raise CSVFormatError(f"CSV parsing error: {e}") from e

    return frame.fillna("")


def _find_position_columns(headers: pd.Series) -> Dict[str, List[tuple]]:
    """Map position title to its (candidate, column) pairs, in column order."""
    positions: Dict[str, List[tuple]] = {}
    for column, header in headers.items():
        # Metadata columns (StartDate, EndDate, ...) never ask to rank
        if "Please" not in header:
            continue
        match = RANKING_HEADER.search(header)
        if not match:
            continue
        title, candidate = match.group(1).strip(), match.group(2).strip()
        positions.setdefault(title, []).append((candidate, column))
    return positions


def _parse_rank(value: str):
    """Leading integer of a rank cell ("1", " 2", "1.0"), or None."""
    match = LEADING_INTEGER.match(value)
    if not match:
        return None
    return int(match.group(1))


def parse_qualtrics_csv(content: str) -> List[ElectionPosition]:
    """
    Parse a Qualtrics survey export into one election per ranked question.

    Row 2 of the export holds the question text used to find the ranking
    columns; responses start at row 4.

    Args:
        content: Raw CSV text

    Returns:
        List of ElectionPosition, in the order the questions appear
    """
    frame = _read_rows(content)

    position_columns = _find_position_columns(frame.iloc[HEADER_ROW])
    if not position_columns:
        raise CSVFormatError("No valid position columns found in CSV.")

    responses = frame.iloc[FIRST_RESPONSE_ROW:]
    if responses.empty:
        raise CSVFormatError("No ballot data found in CSV.")

    positions = []
    for title, columns in position_columns.items():
        candidates = [candidate for candidate, _ in columns]
        ballots = []

        for _, row in responses.iterrows():
            rankings = {}
            for candidate, column in columns:
                rank = _parse_rank(row[column])
                if rank is not None:
                    rankings[candidate] = rank

            ballot = [c for c, _ in sorted(rankings.items(), key=lambda item: item[1])]
            if ballot:
                ballots.append(ballot)

        logger.info(
            f"Position '{title}': {len(candidates)} candidates, {len(ballots)} ballots"
        )
        positions.append(ElectionPosition(title=title, candidates=candidates, ballots=ballots))

    return positions
