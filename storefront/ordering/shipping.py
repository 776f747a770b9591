# storefront/ordering/shipping.py
from __future__ import annotations

from typing import Optional

ALGIERS = "16 - Alger"

SOUTH = frozenset({
    "01 - Adrar",
    "11 - Tamanrasset",
    "33 - Illizi",
    "37 - Tindouf",
    "49 - Timimoun",
    "50 - Bordj Badji Mokhtar",
    "53 - In Salah",
    "54 - In Guezzam",
    "56 - Djanet",
    "30 - Ouargla",
    "55 - Touggourt",
    "57 - El M’Ghair",
    "58 - El Menia",
    "47 - Ghardaïa",
    "32 - El Bayadh",
})

FEE_ALGIERS = 400
FEE_SOUTH = 900
FEE_DEFAULT = 600


def shipping_fee(wilaya: Optional[str]) -> int:
    """Flat delivery fee for a wilaya label like "16 - Alger".

    Unknown labels fall back to the default tier; nothing is rejected here.
    """
    if not wilaya:
        return 0
    if wilaya == ALGIERS:
        return FEE_ALGIERS
    if wilaya in SOUTH:
        return FEE_SOUTH
    return FEE_DEFAULT


def city_from_wilaya(wilaya: Optional[str]) -> str:
    w = wilaya or ""
    if " - " in w:
        return w.split(" - ", 1)[1]
    return w
