import sys
from djsync import create_app
from djsync.models import User
from djsync.extensions import db
from djsync.models.enums import UserRole
from djsync.utils.qr import make_qr_data_url


def create_dj_user(email, name, update=False):
    app = create_app()
    with app.app_context():
        dj = User.query.filter_by(email=email).first()
        if not dj:
            dj = User(
                email=email,
                name=name,
                role=UserRole.DJ,
                genre_choice="",
                media_link="",
                profile_completed=True,
                is_profile_complete=True,
            )
            db.session.add(dj)
            db.session.flush()
            dj.qr_code_data_url = make_qr_data_url(str(dj.id))
            db.session.commit()
            print(f"DJ user {email} created successfully!")
        elif update:
            dj.role = UserRole.DJ
            db.session.commit()
            print(f"User {email} promoted to DJ!")
        else:
            print(f"User {email} already exists!")


if __name__ == "__main__":
    if len(sys.argv) < 3:
        print("usage: python create_dj.py <email> <name>")
        sys.exit(1)
    create_dj_user(sys.argv[1], sys.argv[2], update=True)
