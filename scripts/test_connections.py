#!/usr/bin/env python3
"""
Connection Test Script

Run this to verify MongoDB and the two upstream APIs are reachable.
Usage: python scripts/test_connections.py
"""

from careercatalyst.db.mongodb import test_mongo_connection
from careercatalyst.services.groq_client import get_groq_client
from careercatalyst.services.search_service import get_search_client
from careercatalyst.core.config import get_settings
from careercatalyst.core.errors import UpstreamSearchError


def main():
    settings = get_settings()
    print("=" * 50)
    print("CAREERCATALYST - CONNECTION TEST")
    print("=" * 50)

    # Test MongoDB
    print("\n[1] Testing MongoDB...")
    print(f"    URI: {settings.mongodb_uri}")
    print(f"    Database: {settings.mongodb_db}")
    if test_mongo_connection():
        print("    MongoDB: CONNECTED")
    else:
        print("    MongoDB: FAILED")

    # Test Groq (only if API key is set)
    print("\n[2] Testing Groq API...")
    if settings.groq_api_key:
        print(f"    Base URL: {settings.groq_base_url}")
        print(f"    Model: {settings.groq_model}")
        if get_groq_client().test_connection():
            print("    Groq: CONNECTED")
        else:
            print("    Groq: FAILED")
    else:
        print("    Groq: API key not configured (skipped)")

    # Test Google Custom Search
    print("\n[3] Testing Google Custom Search...")
    if settings.google_api_key and settings.google_cse_id:
        try:
            profiles = get_search_client().search_profiles("Software Engineer", ["Python"])
            print(f"    Google CSE: CONNECTED ({len(profiles)} profiles)")
        except UpstreamSearchError:
            print("    Google CSE: FAILED")
    else:
        print("    Google CSE: API key or engine id not configured (skipped)")

    print("\n" + "=" * 50)


if __name__ == "__main__":
    main()
