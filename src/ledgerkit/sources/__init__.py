"""Input providers for ledgerkit."""

from ledgerkit.sources.base import LedgerSource
from ledgerkit.sources.factories import load_json_source
from ledgerkit.sources.json_document import JsonLedgerSource

__all__ = ["LedgerSource", "JsonLedgerSource", "load_json_source"]
