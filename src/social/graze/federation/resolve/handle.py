"""Federation handle normalization and discovery URL derivation."""


def clean_handle(account: str) -> str:
    """Normalize a handle to the form ``local@domain``.

    Strips surrounding whitespace, drops any leading ``acct:`` prefix and
    lowercases the result. Applying it twice yields the same value.

    Args:
        account: Raw handle, optionally prefixed with acct:

    Returns:
        Normalized handle
    """
    account = account.strip().lower()
    while account.startswith("acct:"):
        account = account.removeprefix("acct:").strip()
    return account


def handle_domain(handle: str) -> str:
    """Return the domain part of a handle, or an empty string when there is none."""
    _, _, domain = handle.partition("@")
    return domain


def host_meta_url(handle: str, ssl: bool = True) -> str:
    """Build the host-meta URL of the pod hosting ``handle``.

    Args:
        handle: Normalized handle
        ssl: Use https when true, http otherwise

    Returns:
        URL of the pod's /.well-known/host-meta document
    """
    scheme = "https" if ssl else "http"
    return f"{scheme}://{handle_domain(handle)}/.well-known/host-meta"


def webfinger_url(template: str, handle: str, acct_prefix: bool = False) -> str:
    """Substitute a handle into a host-meta WebFinger URL template.

    Args:
        template: lrdd template containing {uri}
        handle: Normalized handle
        acct_prefix: Substitute acct:{handle} instead of the bare handle

    Returns:
        WebFinger document URL
    """
    uri = f"acct:{handle}" if acct_prefix else handle
    return template.replace("{uri}", uri)
