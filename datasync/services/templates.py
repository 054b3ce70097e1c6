"""Starter content types an organization can create in one step."""

from __future__ import annotations

from typing import Any


def _field(name: str, label: str, type: str = "text", required: bool = False, **extra: Any) -> dict:
    return {"name": name, "label": label, "type": type, "required": required, **extra}


CONTENT_TYPE_TEMPLATES: dict[str, dict[str, Any]] = {
    "promotional_offer": {
        "name": "Promotional Offer",
        "slug": "promotional_offer",
        "description": "Special deals, discounts, and limited-time offers",
        "schema": [
            _field("offer_title", "Offer Title", required=True),
            _field("offer_description", "Offer Description", "markdown", required=True),
            _field("discount_amount", "Discount Amount", required=True),
            _field("valid_from", "Valid From", "date", required=True),
            _field("valid_until", "Valid Until", "date", required=True),
            _field("terms", "Terms & Conditions", "textarea"),
            _field("cta_text", "Call-to-Action Button", required=True),
            _field("cta_link", "Button Link", "url"),
            _field("image_url", "Promotional Image", "image"),
        ],
    },
    "landing_page_content": {
        "name": "Landing Page Content",
        "slug": "landing_page_content",
        "description": "Complete content for marketing landing pages",
        "schema": [
            _field("page_title", "Page Title", required=True),
            _field("hero_headline", "Hero Headline", required=True),
            _field("hero_subheadline", "Hero Subheadline", "textarea"),
            _field("hero_image", "Hero Image", "image"),
            _field("features", "Key Features", "markdown"),
            _field("testimonial", "Customer Testimonial", "textarea"),
            _field("testimonial_author", "Testimonial Author"),
            _field("cta_primary", "Primary Call-to-Action", required=True),
            _field("phone", "Contact Phone", "phone", required=True),
            _field("email", "Contact Email", "email"),
        ],
    },
    "business_info": {
        "name": "Business Information",
        "slug": "business_info",
        "description": "Core business details and contact information",
        "schema": [
            _field("business_name", "Business Name", required=True),
            _field("tagline", "Business Tagline"),
            _field("description", "Business Description", "textarea", required=True),
            _field("phone", "Phone Number", "phone", required=True),
            _field("email", "Email Address", "email", required=True),
            _field("address", "Business Address", "textarea", required=True),
            _field("service_areas", "Service Areas", "textarea", required=True),
            _field("hours", "Hours of Operation", "textarea"),
            _field("license_number", "License Number"),
            _field("years_in_business", "Years in Business", "number"),
        ],
    },
    "service_area": {
        "name": "Service Area",
        "slug": "service_area",
        "description": "Geographic regions where services are offered",
        "schema": [
            _field("area_name", "Area Name", required=True),
            _field(
                "coverage_type",
                "Coverage Type",
                "select",
                required=True,
                options=["Full Coverage", "Partial Coverage", "On Request"],
            ),
            _field("zip_codes", "Zip Codes", "textarea"),
            _field("special_notes", "Special Notes", "textarea"),
            _field("active", "Currently Active", "select", required=True, options=["Yes", "No"]),
        ],
    },
}


def list_templates() -> list[dict[str, Any]]:
    return list(CONTENT_TYPE_TEMPLATES.values())


def get_template(key: str) -> dict[str, Any] | None:
    return CONTENT_TYPE_TEMPLATES.get(key)
