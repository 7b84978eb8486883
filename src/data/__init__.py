"""Ballot ingestion adapters that turn survey exports into elections."""

from .qualtrics import CSVFormatError, ElectionPosition, parse_qualtrics_csv

__all__ = ["CSVFormatError", "ElectionPosition", "parse_qualtrics_csv"]
