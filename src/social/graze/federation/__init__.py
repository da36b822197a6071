"""
Federation Discovery

This package resolves federated social network handles (user@pod) into verified
identity records, and provides the declarative property schema used to describe
federation entities.

Key Components:
- model: Property schema system and the entities built on it (Person, Profile, messages)
- resolve: Handle normalization, discovery document adapters and the discovery pipeline
- app: Configuration, logging and the command line entry point

Discovery Overview:
1. Normalize the handle and fetch the pod's host-meta, over https and once over http
2. Fetch the account's WebFinger document from the host-meta lrdd template
3. Verify the WebFinger subject names the requested account
4. Fetch the hCard profile page and assemble the Person and its Profile

Resolution is all-or-nothing: callers receive a complete Person or a DiscoveryError.
"""
