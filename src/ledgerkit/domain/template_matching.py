"""Template matching domain service.

Turns free text (a scanned receipt, a QR payload, a pasted SMS) into a
transaction draft using a saved template: a regular expression plus, for
every draft field, either a capture group or a static value.
"""

import logging
import re
from dataclasses import dataclass
from datetime import date
from typing import Callable, Optional, Sequence

from ledgerkit.domain.entities import (
    DraftLine,
    Template,
    TemplateLine,
    TransactionDraft,
)
from ledgerkit.utils.amount_parser import parse_amount
from ledgerkit.utils.date_composer import compose_date
from ledgerkit.utils.match_groups import extract_group

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PatternCheck:
    """Result of validating a template pattern."""

    error: Optional[str]
    group_count: int = 0
    match_span: Optional[tuple[int, int]] = None

    @property
    def is_valid(self) -> bool:
        return self.error is None


class TemplateMatcher:
    """Service for matching text against templates and extracting drafts."""

    def __init__(
        self,
        default_currency: str = "",
        today: Callable[[], date] = date.today,
    ):
        """Initialize template matcher.

        Args:
            default_currency: Currency for lines whose template sets none
            today: Provider of the reference date for month/day defaults
        """
        self.default_currency = default_currency
        self.today = today

    def apply(self, template: Template, text: str) -> Optional[TransactionDraft]:
        """Apply a single template to text.

        Args:
            template: Template to apply
            text: Free text to match

        Returns:
            Transaction draft, or None if the pattern is invalid, does not
            match, or no year can be determined for the date
        """
        match = self.match(template, text)
        if match is None:
            return None
        return self.extract_transaction(template, match)

    def apply_first(
        self, text: str, templates: Sequence[Template]
    ) -> Optional[TransactionDraft]:
        """Apply the first template that matches text and yields a draft."""
        for template in order_templates(templates):
            draft = self.apply(template, text)
            if draft is not None:
                return draft
        return None

    def find_match(
        self, text: str, templates: Sequence[Template]
    ) -> Optional[tuple[Template, re.Match]]:
        """Find the first template whose pattern matches text.

        Regular templates are tried before fallback templates; within each
        group templates are tried by case-insensitive name.

        Returns:
            Tuple of matching template and its match, or None
        """
        for template in order_templates(templates):
            match = self.match(template, text)
            if match is not None:
                return template, match
        return None

    def match(self, template: Template, text: str) -> Optional[re.Match]:
        """Run a template's pattern against text.

        Blank and invalid patterns never match.
        """
        if not template.pattern or not template.pattern.strip():
            return None
        try:
            compiled = re.compile(template.pattern)
        except (re.error, OverflowError, RecursionError) as e:
            logger.debug(
                "Invalid regex in template '%s': %s - %s",
                template.name,
                template.pattern,
                e,
            )
            return None
        return compiled.search(text)

    def extract_transaction(
        self, template: Template, match: re.Match
    ) -> Optional[TransactionDraft]:
        """Build a transaction draft from a completed match.

        Returns:
            Transaction draft, or None if the date cannot be composed
        """
        transaction_date = compose_date(match, template, today=self.today())
        if transaction_date is None:
            logger.debug("Template '%s' yields no usable date", template.name)
            return None

        description = extract_group(
            match, template.description_group, template.description
        )
        comment = extract_group(match, template.comment_group, template.comment)

        return TransactionDraft(
            description=description or "",
            comment=comment,
            date=transaction_date,
            lines=tuple(self.extract_line(match, line) for line in template.lines),
            template_name=template.name,
        )

    def extract_line(self, match: re.Match, line: TemplateLine) -> DraftLine:
        """Resolve one template line against a match.

        An amount that cannot be parsed is left unset, which makes the line a
        balance receiver.
        """
        account_name = extract_group(match, line.account_name_group, line.account_name)

        static_amount = _amount_text(line.amount)
        amount_text = extract_group(match, line.amount_group, static_amount)
        amount = parse_amount(amount_text, line.negate_amount)

        currency = extract_group(match, line.currency_group, line.currency)
        if not currency:
            currency = self.default_currency

        comment = extract_group(match, line.comment_group, line.comment)

        return DraftLine(
            account_name=account_name or "",
            amount=amount,
            currency=currency,
            comment=comment,
        )

    def validate_pattern(
        self, pattern: str, test_text: Optional[str] = None
    ) -> PatternCheck:
        """Validate a template pattern and optionally try it on test text.

        Args:
            pattern: Regular expression source
            test_text: Optional sample text to match

        Returns:
            PatternCheck with the compile error (if any), the pattern's
            group count and the span of the first match in test_text
        """
        if not pattern:
            return PatternCheck(error="Pattern is empty")
        try:
            compiled = re.compile(pattern)
        except (re.error, OverflowError, RecursionError) as e:
            return PatternCheck(error=str(e))

        match_span = None
        if test_text:
            match = compiled.search(test_text)
            if match is not None:
                match_span = match.span()

        return PatternCheck(
            error=None, group_count=compiled.groups, match_span=match_span
        )


def order_templates(templates: Sequence[Template]) -> list[Template]:
    """Sort templates for matching: regular ones first, then by name."""
    return sorted(templates, key=lambda t: (t.is_fallback, t.name.upper()))


def _amount_text(amount: Optional[float]) -> Optional[str]:
    if amount is None:
        return None
    return repr(float(amount))
