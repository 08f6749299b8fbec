#!/usr/bin/env python3
"""Generate test JWT tokens for API testing.

Usage:
    poetry run python scripts/generate_test_token.py [ACTOR_ID ROLE_LEVEL [NAME]]
"""
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from taskchain.core.auth import create_access_token  # noqa: E402

if len(sys.argv) >= 3:
    actor_id, level = sys.argv[1], int(sys.argv[2])
    name = sys.argv[3] if len(sys.argv) > 3 else actor_id
    print(create_access_token(actor_id, role_level=level, display_name=name))
    sys.exit(0)

# Tokens for the actors created by scripts/seed_roster.py
admin_token = create_access_token("admin", role_level=0, display_name="Administrator")
print(f"Administrator Token:\n{admin_token}\n")

staff_token = create_access_token("staff-1", role_level=1, display_name="Staff One")
print(f"Staff (level 1) Token:\n{staff_token}")
