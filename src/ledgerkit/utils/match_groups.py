"""Regex match group extraction."""

import logging
import re
from typing import Optional

logger = logging.getLogger(__name__)


def extract_group(
    match: re.Match, group: Optional[int], fallback: Optional[str]
) -> Optional[str]:
    """Extract a value from a regex match group.

    Group indices are 1-based. None, 0 or negative means the group is not
    configured; an index beyond the pattern's group count is treated the
    same way. A group that did not participate in the match also yields
    the fallback.

    Args:
        match: Completed regex match
        group: 1-based group index, or None
        fallback: Value to return when the group cannot be used

    Returns:
        Captured text or fallback (which may itself be None)
    """
    if group is None or group <= 0:
        return fallback

    group_count = len(match.groups())
    if group > group_count:
        logger.debug("Group %d exceeds group count %d", group, group_count)
        return fallback

    value = match.group(group)
    if value is None:
        return fallback
    return value
