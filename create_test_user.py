#!/usr/bin/env python3
"""
Script to create a test officer account for DigForWeb.
"""
import sys

from digforweb import create_app
from digforweb.exceptions import ValidationError
from digforweb.models.user import User
from digforweb.services.auth_service import register_user

TEST_EMAIL = 'admin@digforweb.com'
TEST_PASSWORD = 'admin123'


def create_test_user():
    """Create an officer account for manual testing."""
    app = create_app()

    with app.app_context():
        if User.query.filter_by(email=TEST_EMAIL).first():
            print("Test user already exists:")
            print(f"  Email:    {TEST_EMAIL}")
            print(f"  Password: {TEST_PASSWORD}")
            return True

        try:
            register_user('Admin Officer', TEST_EMAIL, TEST_PASSWORD, 'officer',
                          contact='+62 811 0000 000')
        except ValidationError as e:
            print(f"ERROR: {e.errors}")
            return False

        print("")
        print("=" * 60)
        print("  TEST OFFICER CREATED")
        print("=" * 60)
        print("")
        print(f"  Email:      {TEST_EMAIL}")
        print(f"  Password:   {TEST_PASSWORD}")
        print("  Role:       officer")
        print("")
        print("=" * 60)
        return True


if __name__ == '__main__':
    success = create_test_user()
    sys.exit(0 if success else 1)
