# clinic_booking/scripts/create_admin.py
"""
Bootstraps the first administrator, since accounts can otherwise only be
created by an admin through the API.

    python -m clinic_booking.scripts.create_admin admin "Clinic Admin" admin@example.com
"""
import argparse

from ..database import init_db, store
from ..models import Role, User


def create_admin(user_id: str, name: str, email: str, password: str,
                 department: str = "Administration", target=None) -> bool:
    target = target or store
    init_db(target)
    with target.transaction() as db:
        if db.users.get(user_id) is not None:
            return False
        db.users.insert(User(
            user_id=user_id,
            password=password,
            name=name,
            department=department,
            email=email,
            role=Role.admin,
            must_change_password=True,
        ))
    return True


if __name__ == "__main__":
    p = argparse.ArgumentParser(description="Create an administrator account")
    p.add_argument("user_id")
    p.add_argument("name")
    p.add_argument("email")
    p.add_argument("--password", default="changeme")
    p.add_argument("--department", default="Administration")
    args = p.parse_args()

    if create_admin(args.user_id, args.name, args.email, args.password, args.department):
        print(f"Created admin '{args.user_id}' in {store.path} (password must be changed at first login)")
    else:
        print(f"User '{args.user_id}' already exists in {store.path}")
