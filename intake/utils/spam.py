"""
Honeypot check for public forms.

The form renders a `website` input that sighted users never see. Naive bots fill
every field, so any value there marks the submission as automated.
"""

HONEYPOT_FIELD = "website"


def is_honeypot_triggered(value) -> bool:
    """True when the hidden field carries text other than whitespace."""
    return isinstance(value, str) and bool(value.strip())
