"""Data models for product records and their categories."""

from __future__ import annotations

from dataclasses import dataclass

MAIN_CATEGORIES: tuple[str, ...] = ("skincare", "makeup", "perfume")
SUB_CATEGORIES: tuple[str, ...] = ("skincare", "haircare", "bodycare")

UNNAMED_PRODUCT = "(Unnamed product)"

# Persisted record keys, in export order
RECORD_FIELDS: tuple[str, ...] = (
    "id",
    "productName",
    "brandName",
    "mainCategory",
    "subCategory",
    "expiryDate",
    "manufacturingDate",
    "openingDate",
    "weight",
    "price",
    "paoMonths",
    "imageData",
    "createdAt",
    "updatedAt",
)


@dataclass
class ProductForm:
    """Raw field values as collected from the user.

    Dates are ``YYYY-MM-DD`` strings (empty when unset); ``pao_months`` is the
    month count as typed.
    """

    product_name: str = ""
    brand_name: str = ""
    main_category: str = "skincare"
    sub_category: str = "skincare"
    expiry_date: str = ""
    manufacturing_date: str = ""
    opening_date: str = ""
    weight: str = ""
    price: str = ""
    pao_months: str = ""
    image_data: str = ""  # data: URL
