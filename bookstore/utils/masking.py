"""Helpers for hiding personal data in admin listings."""


def mask_email(email: str) -> str:
    """
    Partially mask the local part of an email address.

    Example:
        >>> mask_email("jane@example.com")
        'j***e@example.com'
        >>> mask_email("al@example.com")
        'a***@example.com'
    """
    local, sep, domain = email.partition("@")
    if not sep:
        return "***"
    if len(local) <= 2:
        masked = f"{local[:1]}***"
    else:
        masked = f"{local[0]}***{local[-1]}"
    return f"{masked}@{domain}"
