#!/usr/bin/env python3
"""Manage shop-floor operators and the access PIN.

Usage:
  # create (or re-activate) operators
  python3 scripts/manage_operators.py --add Mario --add Luigi

  # deactivate an operator (stop events will no longer accept the name)
  python3 scripts/manage_operators.py --deactivate Luigi

  # print a hashed PIN to put in ACCESS_PIN
  python3 scripts/manage_operators.py --hash-pin 1234

This script will create DB tables if missing.
"""
import sys
from pathlib import Path
import argparse

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from prodtrack.db import SessionLocal, Base, engine
from prodtrack import crud, schemas
from prodtrack.security import get_pin_hash


def main():
    parser = argparse.ArgumentParser(description='Manage operators and the access PIN')
    parser.add_argument("--add", action="append", default=[], metavar="NAME")
    parser.add_argument("--deactivate", action="append", default=[], metavar="NAME")
    parser.add_argument("--list", action="store_true")
    parser.add_argument("--hash-pin", metavar="PIN")
    args = parser.parse_args()

    if args.hash_pin:
        print(get_pin_hash(args.hash_pin))
        return

    try:
        Base.metadata.create_all(bind=engine)
    except Exception as exc:
        print("Warning: could not create tables on startup:", exc)

    with SessionLocal() as db:
        for name in args.add:
            existing = crud.get_operator_by_name(db, name)
            if existing:
                print(f"Re-activating existing operator: {name}")
                crud.update_operator(db, existing.id, schemas.OperatorUpdate(active=True))
            else:
                print(f"Creating operator: {name}")
                crud.create_operator(db, schemas.OperatorCreate(name=name))

        for name in args.deactivate:
            existing = crud.get_operator_by_name(db, name)
            if not existing:
                print(f"Unknown operator: {name}")
                continue
            crud.update_operator(db, existing.id, schemas.OperatorUpdate(active=False))
            print(f"Operator deactivated: {name}")

        if args.list:
            for op in crud.list_operators(db):
                print(f"{op.id}\t{op.name}\t{'active' if op.active else 'inactive'}")


if __name__ == '__main__':
    main()
