#!/usr/bin/env python3
"""
Assigns the `role` (and optionally `team`) custom claims to a Firebase user.

The first master/admin accounts are provisioned this way; after that, team
admins manage roles through the API.
"""

import sys

from firebase_admin import auth

from scout_admin.config import init_firebase
from scout_admin.core.constants import ROLES


def set_role_claim(user_email: str, role: str, team: str | None = None) -> bool:
    """Set role/team claims on the user and revoke their sessions."""

    if role not in ROLES:
        print(f"❌ Unknown role '{role}' (expected one of: {', '.join(ROLES)})")
        return False

    try:
        init_firebase()
        print("✅ Firebase Admin SDK initialized")
    except Exception as e:
        print(f"❌ Firebase initialization failed: {e}")
        return False

    try:
        user = auth.get_user_by_email(user_email)
        print(f"✅ User found: {user.uid} - {user.email}")

        # Keep unrelated claims, overwrite role/team
        claims = dict(user.custom_claims or {})
        claims["role"] = role
        if team is not None:
            claims["team"] = team
        auth.set_custom_user_claims(user.uid, claims)
        print(f"✅ Claims set for {user_email}: {claims}")

        # Sessions minted with the old claims must not keep working
        auth.revoke_refresh_tokens(user.uid)
        print("✅ Existing sessions revoked")
        return True

    except auth.UserNotFoundError:
        print(f"❌ User not found: {user_email}")
        return False
    except Exception as e:
        print(f"❌ Error setting claims: {e}")
        return False


if __name__ == "__main__":
    if len(sys.argv) not in (3, 4):
        print("Usage: python set_role_claim.py <user_email> <member|admin|master> [team_id]")
        print("Example: python set_role_claim.py lead@team8020.org admin 8020")
        sys.exit(1)

    email, role = sys.argv[1], sys.argv[2]
    team = sys.argv[3] if len(sys.argv) == 4 else None
    print(f"Setting role={role} team={team} for: {email}")

    if set_role_claim(email, role, team):
        print("🎉 Claims set successfully!")
        print("The user will need to sign in again for the changes to take effect.")
    else:
        print("💥 Failed to set claims")
        sys.exit(1)
