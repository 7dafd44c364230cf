"""Seed a demo property with guesses and print its FMV.

Usage (from repository root):
    python backend/scripts/seed_demo.py

Usage (from backend directory):
    python scripts/seed_demo.py
    # or
    python -m scripts.seed_demo
"""

from __future__ import annotations

import argparse
import sys
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path

# Make `app` imports work whether the script is run from repo root or backend/.
BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from app.db.session import SessionLocal
from app.models.listing import Listing
from app.models.property import Property
from app.models.user import User
from app.services.fmv import get_property_fmv
from app.services.guesses import submit_guess


def build_demo_guesses() -> list[tuple[str, int, int]]:
    """Return deterministic (username, karma, guessed_price) rows."""

    return [
        ("anna", 4, 415_000),
        ("bram", 27, 432_500),
        ("chris", 75, 398_000),
        ("daan", 140, 445_000),
        ("eva", 620, 425_000),
        ("femke", 12, 460_000),
        ("gijs", 0, 1),
    ]


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Seed a demo property with crowd guesses.")
    parser.add_argument("--address", default="Prinsengracht 263")
    parser.add_argument("--city", default="Amsterdam")
    parser.add_argument("--assessed-value", type=int, default=410_000)
    parser.add_argument("--asking-price", type=int, default=450_000)
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    now = datetime.now(timezone.utc)
    with SessionLocal() as db:
        prop = Property(
            address=args.address,
            city=args.city,
            assessed_value=Decimal(args.assessed_value),
        )
        db.add(prop)
        db.flush()
        db.add(
            Listing(
                property_id=prop.id,
                source_url=f"https://listings.example/{prop.id}",
                asking_price=Decimal(args.asking_price),
                status="active",
            )
        )
        users: list[tuple[User, int]] = []
        for username, karma, price in build_demo_guesses():
            user = User(username=f"{username}-{prop.id}", display_name=username.title(), karma=karma)
            db.add(user)
            users.append((user, price))
        db.commit()

        for user, price in users:
            submit_guess(db, prop.id, user.id, price, now=now)

        fmv = get_property_fmv(db, prop.id)
        print(f"Seeded property {prop.id}: {args.address}, {args.city}")
        print(f"  confidence={fmv.confidence} guesses={fmv.guess_count} outliers={fmv.outlier_count}")
        print(f"  fmv={fmv.value} divergence={fmv.divergence}%")
        if fmv.distribution is not None:
            print(f"  p10={fmv.distribution.p10} p50={fmv.distribution.p50} p90={fmv.distribution.p90}")


if __name__ == "__main__":
    main()
