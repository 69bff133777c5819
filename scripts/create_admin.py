import sys
import os
from pathlib import Path

# Add the project root directory to Python path
project_root = str(Path(__file__).parent.parent)
sys.path.append(project_root)

from sqlalchemy.exc import SQLAlchemyError
from isave import create_app
from isave.core.constants import UserRole
from isave.extensions import db
from isave.modules.auth.services import RegistrationService
from isave.modules.user.models import User


def create_admin_user(username, email, password):
    """Create an admin user, or promote the existing account with that email"""
    app = create_app()

    with app.app_context():
        existing_user = User.query.filter_by(email=email).first()
        if existing_user:
            if existing_user.role == UserRole.ADMIN:
                print(f"Admin with email {email} already exists")
                return False
            existing_user.role = UserRole.ADMIN
            db.session.commit()
            print(f"User {existing_user.username} promoted to admin")
            return True

        try:
            RegistrationService.register(
                db.session, username, email, password, role=UserRole.ADMIN
            )
        except SQLAlchemyError as e:
            print(f"Error creating admin user: {str(e)}")
            return False

        print("Admin user created successfully!")
        print(f"Username: {username}")
        print(f"Email: {email}")
        return True


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Create an admin user")
    parser.add_argument("--username", default="superadmin", help="Admin username")
    parser.add_argument("--email", default=os.getenv("ADMIN_EMAIL"), help="Admin email")
    parser.add_argument(
        "--password", default=os.getenv("ADMIN_PASSWORD"), help="Admin password"
    )

    args = parser.parse_args()
    if not args.email or not args.password:
        parser.error("--email and --password are required (or ADMIN_EMAIL/ADMIN_PASSWORD)")

    create_admin_user(args.username, args.email, args.password)
