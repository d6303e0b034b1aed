import sys
import os
import argparse
import secrets

sys.path.append(
    os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
)  # relative imports

from djsync import create_app
from djsync.repositories import SerialRepository


def seed_serials(codes):
    app = create_app()
    with app.app_context():
        created = 0
        for code in codes:
            if SerialRepository.find_by_serial(code):
                print(f"Serial already exists, skipping: {code}")
                continue
            SerialRepository.create_serial(code)
            print(f"Created serial: {code}")
            created += 1
        print(f"Serial seeding completed ({created} new)")


def main(argv=None):
    parser = argparse.ArgumentParser(description="Insert DJ activation serials")
    parser.add_argument("codes", nargs="*", help="serial codes to insert")
    parser.add_argument(
        "--generate", type=int, default=0, metavar="N", help="also generate N random serials"
    )
    args = parser.parse_args(argv)

    codes = list(args.codes)
    codes.extend(secrets.token_hex(8).upper() for _ in range(args.generate))
    if not codes:
        parser.error("pass at least one serial or --generate N")
    seed_serials(codes)


if __name__ == "__main__":
    main()
