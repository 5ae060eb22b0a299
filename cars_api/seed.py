"""
Fill the cars table with a few classic cars.

Usage:
    python -m cars_api.seed [--reset]
"""

from __future__ import annotations

import argparse
import logging
import sys

from cars_api.cars import store
from cars_api.cars.validation import normalize_car, validate_car
from cars_api.db import get_connection, init_db

logger = logging.getLogger(__name__)

SAMPLE_CARS = [
    {
        "brand": "Ferrari",
        "model": "250 GTO",
        "year": 1962,
        "color": "Red",
        "price": 45000000,
        "mileage": 12000,
        "description": "Exceptional collector car",
        "category": "Sports",
    },
    {
        "brand": "Porsche",
        "model": "911 Carrera RS",
        "year": 1973,
        "color": "White",
        "price": 850000,
        "mileage": 45000,
        "description": "Legendary RS model",
        "category": "Sports",
    },
    {
        "brand": "Jaguar",
        "model": "E-Type",
        "year": 1961,
        "color": "Blue",
        "price": 320000,
        "mileage": 78000,
        "description": "Icon of automotive design",
        "category": "Convertible",
    },
    {
        "brand": "Mercedes-Benz",
        "model": "300 SL",
        "year": 1955,
        "color": "Silver",
        "price": 1200000,
        "mileage": 34000,
        "description": "Famous gullwing doors",
        "category": "Sports",
    },
    {
        "brand": "Aston Martin",
        "model": "DB5",
        "year": 1964,
        "color": "Grey",
        "price": 750000,
        "mileage": 56000,
        "description": "The James Bond car",
        "favorite": True,
        "category": "Coupe",
    },
]


def seed(cars: list[dict] | None = None, reset: bool = False) -> int:
    init_db()
    if reset:
        with get_connection() as conn:
            conn.execute("DELETE FROM cars")

    inserted = 0
    for payload in cars if cars is not None else SAMPLE_CARS:
        violations = validate_car(payload)
        if violations:
            logger.warning(f"Skipping {payload.get('brand')} {payload.get('model')}: {violations[0].message}")
            continue
        store.create_car(normalize_car(payload))
        inserted += 1
    return inserted


def main() -> int:
    parser = argparse.ArgumentParser()
    parser.add_argument("--reset", action="store_true", help="Delete existing cars before seeding")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    inserted = seed(reset=args.reset)
    print(f"OK: inserted {inserted} cars")
    return 0


if __name__ == "__main__":
    sys.exit(main())
