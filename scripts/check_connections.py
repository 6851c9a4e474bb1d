#!/usr/bin/env python3
"""
Connection Check Script

Run this to verify the database is reachable and see which optional
collaborators (SMTP, AI assistant) are configured.
Usage: python scripts/check_connections.py
"""
import sys
sys.path.insert(0, '.')

from sqlalchemy.engine import make_url

from talentos.core.config import get_settings
from talentos.db.database import init_db, ping_database
from talentos.services.email_service import get_email_service


def main():
    settings = get_settings()
    print("=" * 50)
    print("TALENTOSPLUS - CONNECTION CHECK")
    print("=" * 50)

    # Database
    print("\n[1] Checking database...")
    print(f"    URL: {make_url(settings.sqlalchemy_url).render_as_string(hide_password=True)}")
    if ping_database():
        print("    ✅ Database: CONNECTED")
        init_db()
        print("    ✅ Schema: READY")
    else:
        print("    ❌ Database: FAILED")

    # SMTP
    print("\n[2] Checking SMTP settings...")
    if get_email_service().is_configured:
        print(f"    ✅ SMTP: {settings.smtp_host}:{settings.smtp_port} as {settings.smtp_sender}")
    else:
        print("    ⚠️  SMTP: not configured (welcome emails will be skipped)")

    # AI assistant
    print("\n[3] Checking AI assistant settings...")
    if settings.ai_api_key:
        print(f"    ✅ AI: {settings.ai_model} at {settings.ai_base_url}")
    else:
        print("    ⚠️  AI: API key not configured (dashboard answers will say so)")

    print("\n" + "=" * 50)
    print("Connection check complete!")
    print("=" * 50)


if __name__ == "__main__":
    main()
