from __future__ import annotations

from ..seo.schema import SITE_URL, MenuItemInfo

MENU_HIGHLIGHTS: tuple[MenuItemInfo, ...] = (
    MenuItemInfo(
        name="Houmos",
        description="Chickpea purée with tahini, lemon and olive oil",
        price="7.50",
        currency="EUR",
        category="Cold mezze",
        image=f"{SITE_URL}/images/gallery/houmos.webp",
        allergens=("sesame",),
        dietary=("Vegan",),
    ),
    MenuItemInfo(
        name="Falafel",
        description="Golden-fried chickpea fritters served with tahini sauce and fresh herbs",
        price="8.00",
        currency="EUR",
        category="Hot mezze",
        image=f"{SITE_URL}/images/gallery/falafel.webp",
        allergens=("sesame",),
        dietary=("Vegan",),
    ),
    MenuItemInfo(
        name="Kebbe",
        description="Bulgur croquettes stuffed with seasoned minced beef and walnuts",
        price="9.00",
        currency="EUR",
        category="Hot mezze",
        image=f"{SITE_URL}/images/gallery/kebbe.webp",
        allergens=("gluten", "nuts"),
    ),
    MenuItemInfo(
        name="Aish el Saraya",
        description="Layered dessert with sweetened biscuits, pudding and orange blossom water",
        price="6.50",
        currency="EUR",
        category="Desserts",
        image=f"{SITE_URL}/images/gallery/aish-el-saraya.webp",
        allergens=("gluten",),
        dietary=("Vegetarian",),
    ),
)
