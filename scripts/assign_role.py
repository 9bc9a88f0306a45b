"""Grant or revoke a role for a user, creating the user if asked.

Usage:
  python scripts/assign_role.py recruiter@example.com recruiter
  python scripts/assign_role.py new@example.com admin --create --password 's3cret!'
  python scripts/assign_role.py someone@example.com interviewer --revoke
"""

import argparse
import os
import sys

ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from hiregate import create_app
from hiregate.extensions import db
from hiregate.models.enums import Role
from hiregate.models.user import User
from hiregate.policy.roles import assign_role, resolve_role, revoke_role


def main(argv=None):
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument('email')
    parser.add_argument('role', choices=[r.value for r in Role])
    parser.add_argument('--revoke', action='store_true')
    parser.add_argument('--create', action='store_true', help='create the user if missing')
    parser.add_argument('--password', help='password for a newly created user')
    parser.add_argument('--name')
    args = parser.parse_args(argv)

    app = create_app()
    with app.app_context():
        user = User.query.filter_by(email=args.email).first()
        if user is None:
            if not args.create or not args.password:
                parser.error(f'user {args.email} not found (use --create --password to add it)')
            user = User(email=args.email, name=args.name)
            user.set_password(args.password)
            db.session.add(user)
            db.session.commit()

        role = Role(args.role)
        changed = revoke_role(user.id, role) if args.revoke else assign_role(user.id, role)
        highest = resolve_role(user.id)
        print(f'{args.email}: {"changed" if changed else "unchanged"}; highest role now {highest.value if highest else None}')


if __name__ == '__main__':
    main()
