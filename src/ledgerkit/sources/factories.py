"""Ledger source factory functions."""

import json
import os
from pathlib import Path
from typing import Optional

from ledgerkit.domain.errors import NotFoundError, ValidationError
from ledgerkit.sources.json_document import JsonLedgerSource

DATA_PATH_ENV = "LEDGERKIT_DATA_PATH"


def default_data_path(data_path: Optional[str] = None) -> Path:
    """Resolve the ledger document path.

    Args:
        data_path: Explicit path. If None, checks the LEDGERKIT_DATA_PATH
            environment variable, then defaults to ~/.ledgerkit/ledger.json

    Returns:
        Path to the ledger document
    """
    if data_path is None:
        data_path = os.environ.get(DATA_PATH_ENV)

    if data_path is None:
        return Path.home() / ".ledgerkit" / "ledger.json"

    return Path(data_path)


def load_json_source(data_path: Optional[str] = None) -> JsonLedgerSource:
    """Load a JSON ledger document into a source.

    Raises:
        NotFoundError: If the document does not exist
        ValidationError: If the document is not valid JSON or is malformed
    """
    path = default_data_path(data_path)
    if not path.exists():
        raise NotFoundError(f"Ledger file '{path}' not found")

    try:
        with path.open(encoding="utf-8") as f:
            document = json.load(f)
    except json.JSONDecodeError as e:
        raise ValidationError(f"Ledger file '{path}' is not valid JSON: {e}")

    return JsonLedgerSource(document)
