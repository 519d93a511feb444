"""
Merchant Normalization Module

Converts raw bank descriptions into merchant keys used for rule learning
and for grouping the review queue.
"""
import re
from typing import Tuple

# Known vendors (substring of the lower-cased description -> canonical name).
# Checked in order; the first hit wins.
MERCHANT_ALIASES: Tuple[Tuple[Tuple[str, ...], str], ...] = (
    (('amzn', 'amazon aws'), 'Amazon AWS'),
    (('stripe',), 'Stripe'),
    (('google',), 'Google'),
    (('microsoft',), 'Microsoft'),
    (('salesforce',), 'Salesforce'),
    (('zoom',), 'Zoom'),
    (('slack',), 'Slack'),
    (('hubspot',), 'HubSpot'),
)

_NON_ALNUM = re.compile(r'[^A-Za-z0-9]')


def normalize_merchant(description: str) -> str:
    """
    Normalize a raw bank description into a merchant key.

    Known vendors map to their canonical name regardless of case. Anything
    else is keyed by its first whitespace-delimited token with punctuation
    stripped (original casing kept), which may be an empty string.

    Args:
        description: Raw description from a statement

    Returns:
        Merchant key
    """
    if not description:
        return ''

    text = description.lower()
    for needles, canonical in MERCHANT_ALIASES:
        if any(needle in text for needle in needles):
            return canonical

    tokens = description.split()
    if not tokens:
        return ''
    return _NON_ALNUM.sub('', tokens[0])
