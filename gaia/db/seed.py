"""
Demo data seeding

Each table is seeded only while it is empty, so running this on every startup
is safe. Run standalone with:

    python -m gaia.db.seed
"""
import asyncio
import logging
from datetime import datetime

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from gaia.core.database import get_db_session, init_db
from gaia.core.security import get_password_hash
from gaia.models import (
    Category,
    Content,
    Product,
    ProductColor,
    ProductImage,
    PromoCode,
    User,
)
from gaia.services.catalog_service import CatalogService

logger = logging.getLogger(__name__)

SEED_USERS = [
    {"name": "Admin User", "email": "admin@gaia.com", "password": "admin123", "role": "admin"},
    {"name": "Demo User", "email": "demo@gaia.com", "password": "password123", "role": "customer"},
]

SEED_CATEGORIES = [
    {"name": "Makeup", "image_path": "/uploads/categories/makeup.jpg"},
    {"name": "Skincare", "image_path": "/uploads/categories/skincare.jpg"},
    {"name": "Fragrance", "image_path": "/uploads/categories/fragrance.jpg"},
    {"name": "Eyes", "image_path": "/uploads/categories/eyes.jpg"},
    {"name": "Lips", "image_path": "/uploads/categories/lips.jpg"},
    {"name": "Face", "image_path": "/uploads/categories/face.jpg"},
]

SEED_PRODUCTS = [
    {
        "name": "Plush Warm Beige Lipstick",
        "category": "Lips",
        "price": 499,
        "original_price": 999,
        "discount_percentage": 50,
        "description": (
            "A luxurious matte lipstick that delivers intense color payoff with a velvety finish. "
            "The ultra-creamy formula keeps lips hydrated all day while providing long-lasting wear."
        ),
        "ingredients": (
            "Ricinus Communis (Castor) Seed Oil, Caprylic/Capric Triglyceride, Silica, Cetyl Alcohol, "
            "Euphorbia Cerifera (Candelilla) Wax, Aluminum Starch Octenylsuccinate, Cetearyl Alcohol, "
            "Aluminum Hydroxide, Copernicia Cerifera (Carnauba) Wax, Tocopheryl Acetate, Tocopherol."
        ),
        "how_to_use": (
            "Start by outlining the lips with the pointed tip for precision, then fill in with the flat "
            "side of the bullet. For a more defined look, use with a lip liner. Apply a second coat for "
            "more intensity."
        ),
        "inventory_status": "in-stock",
        "images": [
            ("/uploads/products/product-lipstick-beige.jpg", True),
            ("/uploads/products/product-lipstick-beige-2.jpg", False),
            ("/uploads/products/product-lipstick-beige-3.jpg", False),
        ],
        "colors": [("Pink", "#FFB6C1"), ("Silver", "#D3D3D3"), ("Beige", "#DEB887"), ("Coral", "#FF7F7F")],
    },
    {
        "name": "Silk Foundation Medium",
        "category": "Face",
        "price": 799,
        "original_price": 1299,
        "discount_percentage": 38,
        "description": (
            "A lightweight, buildable foundation that blends seamlessly for a natural, skin-like finish. "
            "Formulated with hydrating ingredients to keep skin moisturized throughout the day."
        ),
        "ingredients": (
            "Aqua, Cyclopentasiloxane, Glycerin, Dimethicone, Peg-10 Dimethicone, Butylene Glycol, "
            "Alcohol Denat., Phenyl Trimethicone, Peg/Ppg-18/18 Dimethicone, Silica."
        ),
        "how_to_use": (
            "Apply with fingers, a brush, or a makeup sponge. Start from the center of the face and "
            "blend outward. Build coverage as desired."
        ),
        "inventory_status": "in-stock",
        "images": [("/uploads/products/product-foundation.jpg", True)],
        "colors": [("Beige", "#E3BC9A"), ("Tan", "#D2B48C"), ("Rose", "#BC8F8F")],
    },
    {
        "name": "Rose Gold Highlighter",
        "category": "Face",
        "price": 599,
        "original_price": 899,
        "discount_percentage": 33,
        "description": (
            "A finely-milled, luminous highlighter that gives skin a natural, radiant glow. "
            "The silky formula blends effortlessly and can be built up for a more intense highlight."
        ),
        "inventory_status": "in-stock",
        "images": [("/uploads/products/product-highlighter.jpg", True)],
        "colors": [("Gold", "#FFD700"), ("Champagne", "#F0E68C"), ("Rose", "#FFC0CB")],
    },
    {
        "name": "Velvet Matte Eyeliner",
        "category": "Eyes",
        "price": 349,
        "original_price": 499,
        "discount_percentage": 30,
        "description": (
            "A smudge-proof, long-wearing eyeliner that glides on smoothly for precise application. "
            "The waterproof formula stays put for up to 12 hours."
        ),
        "inventory_status": "low-stock",
        "inventory_message": "Only Few Left!",
        "images": [("/uploads/products/product-eyeliner.jpg", True)],
        "colors": [("Black", "#000000"), ("Brown", "#8B4513")],
    },
    {
        "name": "Dewy Setting Spray",
        "category": "Face",
        "price": 449,
        "original_price": 699,
        "discount_percentage": 36,
        "description": (
            "A lightweight setting spray that locks in makeup while providing a dewy finish. "
            "Enriched with hydrating ingredients to refresh and revitalize the skin."
        ),
        "inventory_status": "in-stock",
        "images": [("/uploads/products/product-setting-spray.jpg", True)],
        "colors": [],
    },
    {
        "name": "Glossy Lip Oil",
        "category": "Lips",
        "price": 399,
        "original_price": 599,
        "discount_percentage": 33,
        "description": (
            "A nourishing lip oil that provides a glossy finish while hydrating and conditioning the lips. "
            "Infused with vitamin E and jojoba oil for added moisture."
        ),
        "inventory_status": "in-stock",
        "images": [("/uploads/products/product-lip-oil.jpg", True)],
        "colors": [("Pink", "#FFB6C1"), ("Coral", "#FF7F7F")],
    },
    {
        "name": "Hydrating Face Mist",
        "category": "Skincare",
        "price": 349,
        "original_price": 499,
        "discount_percentage": 30,
        "description": (
            "A refreshing face mist that hydrates and revitalizes the skin throughout the day. "
            "Infused with rose water and hyaluronic acid for added moisture."
        ),
        "inventory_status": "in-stock",
        "images": [("/uploads/products/product-face-mist.jpg", True)],
        "colors": [],
    },
    {
        "name": "Citrus Blossom Perfume",
        "category": "Fragrance",
        "price": 1299,
        "original_price": 1999,
        "discount_percentage": 35,
        "description": (
            "A vibrant, energizing fragrance with notes of citrus, jasmine, and warm amber. "
            "Long-lasting and perfect for everyday wear."
        ),
        "inventory_status": "in-stock",
        "images": [("/uploads/products/product-citrus-perfume.jpg", True)],
        "colors": [],
    },
]

SEED_CONTENT = [
    ("hero", "title", "Ready to look flawless all day", "text"),
    ("hero", "discount", "25-50% OFF", "text"),
    ("hero", "image", "/uploads/content/hero-banner.jpg", "image"),
    ("limited_editions", "summer_title", "Summer Collection", "text"),
    ("limited_editions", "summer_image", "/uploads/content/limited-summer.jpg", "image"),
    ("limited_editions", "summer_discount", "30% OFF", "text"),
    ("limited_editions", "bridal_title", "Bridal Collection", "text"),
    ("limited_editions", "bridal_image", "/uploads/content/limited-bridal.jpg", "image"),
    ("limited_editions", "bridal_discount", "20% OFF", "text"),
    ("category", "makeup_banner", "/uploads/content/category-makeup-banner.jpg", "image"),
    ("category", "skincare_banner", "/uploads/content/category-skincare-banner.jpg", "image"),
    ("category", "fragrance_banner", "/uploads/content/category-fragrance-banner.jpg", "image"),
    ("about", "title", "About GAIA Cosmetics", "text"),
    (
        "about", "description",
        "GAIA Cosmetics is committed to creating high-quality, sustainable beauty products that empower "
        "you to express yourself. Our formulations are clean, cruelty-free, and packaged in eco-friendly "
        "materials.",
        "text",
    ),
    (
        "about", "mission",
        "Our mission is to provide innovative, inclusive beauty products that celebrate diversity and "
        "promote self-expression while being kind to our planet.",
        "text",
    ),
    ("footer", "copyright", "© 2023 GAIA Cosmetics. All rights reserved.", "text"),
    ("footer", "address", "123 Beauty Lane, Makeup City, MC 10001", "text"),
    ("footer", "phone", "+91 1234567890", "text"),
    ("footer", "email", "contact@gaiacosmetics.com", "text"),
]

SEED_PROMO_CODES = [
    {"code": "WELCOME10", "discount_type": "percentage", "discount_value": 10, "min_purchase": 500,
     "max_uses": None, "expires_at": None},
    {"code": "GAIA20", "discount_type": "percentage", "discount_value": 20, "min_purchase": 1000,
     "max_uses": 100, "expires_at": datetime(2024, 12, 31)},
    {"code": "FLAT100", "discount_type": "fixed", "discount_value": 100, "min_purchase": 500,
     "max_uses": 50, "expires_at": datetime(2024, 12, 31)},
]


async def _is_empty(db: AsyncSession, model) -> bool:
    return not await db.scalar(select(func.count(model.id)))


async def seed_users(db: AsyncSession) -> None:
    for data in SEED_USERS:
        existing = await db.scalar(select(User.id).where(User.email == data["email"]))
        if existing:
            logger.info(f"User {data['email']} already exists")
            continue
        db.add(User(
            name=data["name"],
            email=data["email"],
            password=get_password_hash(data["password"]),
            role=data["role"],
        ))
        logger.info(f"Seeded user {data['email']}")


async def seed_categories(db: AsyncSession) -> None:
    if not await _is_empty(db, Category):
        logger.info("Categories already exist")
        return
    db.add_all(Category(**data) for data in SEED_CATEGORIES)
    logger.info(f"Seeded {len(SEED_CATEGORIES)} categories")


async def seed_products(db: AsyncSession) -> None:
    if not await _is_empty(db, Product):
        logger.info("Products already exist")
        return
    for data in SEED_PRODUCTS:
        fields = {k: v for k, v in data.items() if k not in ("images", "colors")}
        db.add(Product(
            **fields,
            images=[ProductImage(image_path=path, is_primary=primary) for path, primary in data["images"]],
            colors=[ProductColor(name=name, value=value) for name, value in data["colors"]],
        ))
    logger.info(f"Seeded {len(SEED_PRODUCTS)} products")


async def seed_content(db: AsyncSession) -> None:
    if not await _is_empty(db, Content):
        logger.info("Content already exists")
        return
    db.add_all(
        Content(section=section, key=key, value=value, type=type_)
        for section, key, value, type_ in SEED_CONTENT
    )
    logger.info(f"Seeded {len(SEED_CONTENT)} content entries")


async def seed_promo_codes(db: AsyncSession) -> None:
    if not await _is_empty(db, PromoCode):
        logger.info("Promo codes already exist")
        return
    db.add_all(PromoCode(**data) for data in SEED_PROMO_CODES)
    logger.info(f"Seeded {len(SEED_PROMO_CODES)} promo codes")


async def seed_database(db: AsyncSession) -> None:
    """Seed every empty table, then refresh category product counts."""
    await seed_users(db)
    await seed_categories(db)
    await seed_products(db)
    await seed_content(db)
    await seed_promo_codes(db)
    await db.flush()
    await CatalogService(db).refresh_category_counts()
    await db.commit()


async def main() -> None:
    await init_db()
    async with get_db_session() as db:
        await seed_database(db)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s [%(name)s] %(message)s")
    asyncio.run(main())
