#!/usr/bin/env python3
"""
List the tags of a repository using regauth.

This example demonstrates:
1. Probing a registry and building an authenticating transport
2. Using the transport with a plain httpx.Client
3. Following redirects without leaking the registry token

Usage:
    REGAUTH_USERNAME=me REGAUTH_PASSWORD=secret python list_tags.py ghcr.io owner/image
"""

import os
import sys

import httpx

from regauth import Anonymous, Basic, Registry, new_transport
from regauth.types import repository_scope
from regauth.utils.logging import setup_logging


def main():
    if len(sys.argv) != 3:
        print(__doc__)
        sys.exit(2)
    
    setup_logging()
    registry = Registry.parse(sys.argv[1])
    repository = sys.argv[2]
    
    username = os.getenv("REGAUTH_USERNAME")
    password = os.getenv("REGAUTH_PASSWORD")
    auth = Basic(username, password) if username and password else Anonymous()
    
    transport = new_transport(registry, auth, scopes=[repository_scope(repository)])
    
    # Redirects to blob storage are followed by the client, and the
    # transport only attaches the token for the registry host itself
    with httpx.Client(transport=transport, follow_redirects=True) as client:
        response = client.get(f"https://{registry}/v2/{repository}/tags/list")
        response.raise_for_status()
        
        for tag in response.json().get("tags") or []:
            print(tag)


if __name__ == "__main__":
    main()
