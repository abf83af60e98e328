# storefront/catalog.py
# Каталог товаров: статичные данные, в рантайме не меняются

from typing import List, Optional
from storefront.schemas.product import Product

PRODUCTS: List[Product] = [
    Product(
        id="p1",
        name="Magie Renewal Serum",
        shortName="The Serum",
        price=125,
        description=(
            "A potent bio-active concentrate designed to accelerate cellular turnover "
            "and restore skin elasticity. The magic of youth in a bottle."
        ),
        benefits=["Reduces fine lines", "Boosts collagen", "Deep hydration"],
        ingredients=["Epidermal Growth Factor", "Hyaluronic Acid", "Peptides"],
        imageUrl="https://picsum.photos/id/1/800/1000",
        size="30ml / 1.0 fl oz",
    ),
    Product(
        id="p2",
        name="Magie Radiance Cream",
        shortName="The Cream",
        price=85,
        description=(
            "A rich, biomimetic lipid complex that repairs the skin barrier and locks in "
            "moisture for 24 hours. Reveal your inner glow."
        ),
        benefits=["Repairs skin barrier", "Sooths inflammation", "Intense moisture"],
        ingredients=["Ceramides", "Squalane", "Niacinamide"],
        imageUrl="https://picsum.photos/id/2/800/1000",
        size="50ml / 1.7 fl oz",
    ),
    Product(
        id="p3",
        name="Magie Crystal Essence",
        shortName="The Essence",
        price=65,
        description=(
            "A gentle exfoliating toner that refines texture and prepares the skin for "
            "maximum absorption. Crystal clear perfection."
        ),
        benefits=["Exfoliates gently", "Brightens tone", "Minimizes pores"],
        ingredients=["Fruit Enzymes", "PHA", "Aloe Vera"],
        imageUrl="https://picsum.photos/id/3/800/1000",
        size="100ml / 3.4 fl oz",
    ),
]


def list_products() -> List[Product]:
    return list(PRODUCTS)


def get_product(product_id: str) -> Optional[Product]:
    return next((p for p in PRODUCTS if p.id == product_id), None)
