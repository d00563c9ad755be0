"""Create an admin user, or promote an existing one.

Usage: python scripts/make_admin.py USERNAME PASSWORD
"""
import sys
import os

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from ecobuddy import create_app
from ecobuddy.extensions import db
from ecobuddy.models import User

if len(sys.argv) != 3:
    print(__doc__)
    sys.exit(1)

username, password = sys.argv[1], sys.argv[2]
app = create_app()

with app.app_context():
    user = User.query.filter_by(username=username).first()

    if not user:
        user = User(username=username, is_admin=True)
        user.set_password(password)
        db.session.add(user)
        print("New admin user created")
    else:
        user.is_admin = True
        user.set_password(password)
        print("Existing user promoted to admin")

    db.session.commit()
