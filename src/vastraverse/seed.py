"""
Seed script -- populates the database with a demo catalog and an admin.

Run with:
    flask --app vastraverse.app seed

Idempotent: products are matched by (name, collection) and users by email,
so running it twice leaves the database unchanged. The admin password comes
from SEED_ADMIN_PASSWORD (default "admin123"); change it outside development.
"""

import json
import logging
import os
from typing import Any, Dict, List

import bcrypt
from sqlalchemy import text
from sqlalchemy.engine import Engine

from vastraverse.config import SecurityConfig
from vastraverse.utils.date_utils import DateUtils
from vastraverse.utils.formatting_utils import FormattingUtils

logger = logging.getLogger(__name__)

ADMIN_EMAIL = "admin@vastraverse.com"

CATALOG: List[Dict[str, Any]] = [
    {
        "name": "Classic Cotton Kurta",
        "description": "Breathable handloom cotton kurta with a mandarin collar.",
        "category": "Kurtas",
        "collection": "men",
        "price": "1299.00",
        "stock": 40,
        "rating": 4.5,
        "sizes": ["S", "M", "L", "XL"],
        "image": "https://images.vastraverse.com/men/cotton-kurta.jpg",
    },
    {
        "name": "Slim Fit Denim Jeans",
        "description": "Mid-rise stretch denim in an indigo wash.",
        "category": "Jeans",
        "collection": "men",
        "price": "1899.50",
        "stock": 60,
        "rating": 4.2,
        "sizes": ["30", "32", "34", "36"],
        "image": "https://images.vastraverse.com/men/slim-denim.jpg",
    },
    {
        "name": "Linen Nehru Jacket",
        "description": "Textured linen bandhgala jacket for festive evenings.",
        "category": "Jackets",
        "collection": "men",
        "price": "2499.00",
        "stock": 15,
        "rating": 4.7,
        "sizes": ["M", "L", "XL"],
        "image": "https://images.vastraverse.com/men/nehru-jacket.jpg",
    },
    {
        "name": "Banarasi Silk Saree",
        "description": "Pure silk saree with zari border, blouse piece included.",
        "category": "Sarees",
        "collection": "women",
        "price": "5499.00",
        "stock": 10,
        "rating": 4.8,
        "sizes": ["Free Size"],
        "image": "https://images.vastraverse.com/women/banarasi-saree.jpg",
    },
    {
        "name": "Printed Anarkali Kurti",
        "description": "Flared rayon kurti with block-print motifs.",
        "category": "Kurtis",
        "collection": "women",
        "price": "999.00",
        "stock": 75,
        "rating": 4.3,
        "sizes": ["XS", "S", "M", "L", "XL"],
        "image": "https://images.vastraverse.com/women/anarkali-kurti.jpg",
    },
    {
        "name": "Embroidered Palazzo Set",
        "description": "Georgette top with matching palazzo and dupatta.",
        "category": "Sets",
        "collection": "women",
        "price": "2199.00",
        "stock": 30,
        "rating": 4.1,
        "sizes": ["S", "M", "L"],
        "image": "https://images.vastraverse.com/women/palazzo-set.jpg",
    },
]


def seed(engine: Engine, security: SecurityConfig) -> None:
    now = DateUtils.now_iso()

    with engine.begin() as conn:
        # ------------------------------------------------------------------ #
        # Products                                                             #
        # ------------------------------------------------------------------ #
        for p in CATALOG:
            existing = conn.execute(
                text("SELECT id FROM products WHERE name = :name AND collection = :collection"),
                {"name": p["name"], "collection": p["collection"]},
            ).first()
            if existing:
                continue

            conn.execute(
                text(
                    "INSERT INTO products "
                    "(name, description, brand, category, collection, image, "
                    " price_cents, stock, rating, sizes, created_at, updated_at) "
                    "VALUES (:name, :description, 'VastraVerse', :category, :collection, :image, "
                    " :price_cents, :stock, :rating, :sizes, :now, :now)"
                ),
                {
                    "name": p["name"],
                    "description": p["description"],
                    "category": p["category"],
                    "collection": p["collection"],
                    "image": p["image"],
                    "price_cents": FormattingUtils.to_cents(p["price"]),
                    "stock": p["stock"],
                    "rating": p["rating"],
                    "sizes": json.dumps(p["sizes"]),
                    "now": now,
                },
            )
            logger.info(f"Seeded product: {p['name']}")

        # ------------------------------------------------------------------ #
        # Admin user                                                           #
        # ------------------------------------------------------------------ #
        password = os.getenv("SEED_ADMIN_PASSWORD", "admin123")
        password_hash = bcrypt.hashpw(
            password.encode("utf-8"), bcrypt.gensalt(rounds=security.bcrypt_rounds)
        ).decode("utf-8")
        conn.execute(
            text(
                "INSERT INTO users "
                "(name, email, password_hash, phone, address, role, created_at, updated_at) "
                "VALUES ('VastraVerse Admin', :email, :hash, '+91 98765 43210', "
                " 'VastraVerse HQ, Bengaluru', 'admin', :now, :now) "
                "ON CONFLICT (email) DO NOTHING"
            ),
            {"email": ADMIN_EMAIL, "hash": password_hash, "now": now},
        )
        logger.info(f"Admin user ensured: {ADMIN_EMAIL}")
