"""
Handle Discovery

This package resolves federation handles (user@pod) to verified identity records.

Key Components:
- handle.py: Handle normalization and URL derivation
- fetcher.py: Fetcher protocol and the aiohttp implementation
- documents.py: host-meta, WebFinger and hCard document adapters
- discovery.py: The discovery pipeline and DiscoveryError
- __main__.py: CLI interface for discovery

The discovery flow follows these steps:
1. Normalize the handle (trim, drop acct:, lowercase)
2. Fetch https://{domain}/.well-known/host-meta, retrying once over http on failure
3. Fetch the WebFinger document from the lrdd template, without fallback
4. Reject the result if the WebFinger subject names a different account
5. Fetch the hCard page and merge it with the WebFinger fields, hCard first
"""
