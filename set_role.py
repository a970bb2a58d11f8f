"""
Set a user's role claim (and mirror it on users/{uid}).

Usage:
    python set_role.py <uid> <patient|dietitian|hospital-admin>
"""
import sys

from ayurdiet.core.firebase import init_firebase
from ayurdiet.core.permissions import ROLES
from ayurdiet.services import auth_service


def main(argv):
    if len(argv) != 3 or argv[2] not in ROLES:
        print(__doc__)
        print(f"Valid roles: {', '.join(ROLES)}")
        return 1

    uid, role = argv[1], argv[2]
    init_firebase()
    auth_service.set_role(uid, role)

    print(f"✅ Role claim '{role}' set successfully for UID: {uid}")
    print("✅ Now log out and log in again OR refresh token using getIdToken(true)")
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv))
