"""Builds the flat template record from trade-in item, card and trade-in rows."""
from datetime import date, datetime
from typing import Any, Dict, Optional


def format_condition(condition: Optional[str]) -> str:
    """near_mint → Near Mint"""
    if not condition:
        return "Unknown"

    return " ".join(word[:1].upper() + word[1:] for word in condition.split("_"))


def format_card_type(is_first_edition: bool, is_holo: bool, is_reverse_holo: bool) -> str:
    """Card edition label from the printing flags."""
    if is_first_edition and is_holo:
        return "1st Edition Holo"
    if is_first_edition:
        return "1st Edition"
    if is_holo:
        return "Holo"
    if is_reverse_holo:
        return "Reverse Holo"
    return "Standard"


def format_date(value: Any, today: Optional[date] = None) -> str:
    """ISO date (YYYY-MM-DD) from a date, datetime or ISO string, else ``today``."""
    if isinstance(value, (date, datetime)):
        return value.isoformat()[:10]
    if value:
        return str(value)[:10]
    return (today or date.today()).isoformat()


def build_template_data(
    item: Dict[str, Any],
    card: Optional[Dict[str, Any]] = None,
    trade_in: Optional[Dict[str, Any]] = None,
    customer_name: str = "Unknown",
    today: Optional[date] = None,
) -> Dict[str, Any]:
    """
    Build the template record used by mapping rules

    Args:
        item: Trade-in item row (id, price, quantity, condition, attributes)
        card: Card row (name, set_name, card_number, rarity, game, ...)
        trade_in: Trade-in row (id, trade_in_date, payment_type)
        customer_name: Display name of the customer
        today: Date used when the trade-in has no date (defaults to the current day)

    Returns:
        Flat record of template variables
    """
    card = card or {}
    trade_in = trade_in or {}
    attributes = item.get("attributes") or {}
    card_attributes = card.get("attributes") or {}

    price = item.get("price")
    cash_value = attributes.get("cashValue") or price
    trade_value = attributes.get("tradeValue") or price
    payment_type = attributes.get("paymentType") or trade_in.get("payment_type") or "cash"

    is_first_edition = bool(attributes.get("isFirstEdition"))
    is_holo = bool(attributes.get("isHolo"))
    is_reverse_holo = bool(attributes.get("isReverseHolo"))

    return {
        "card_name": card.get("name") or "Unknown Card",
        "set_name": card.get("set_name") or "",
        "card_number": card.get("card_number") or "",
        "condition": format_condition(item.get("condition")),
        "rarity": card.get("rarity") or "",
        "game_type": card.get("game") or "unknown",
        "price": price,
        "cost": cash_value if payment_type == "cash" else trade_value,
        "cashValue": cash_value,
        "tradeValue": trade_value,
        "paymentType": payment_type,
        "quantity": item.get("quantity"),
        "is_first_edition": is_first_edition,
        "is_holo": is_holo,
        "is_reverse_holo": is_reverse_holo,
        "card_type": format_card_type(is_first_edition, is_holo, is_reverse_holo),
        "image_url": card.get("image_url") or "",
        "product_id": card_attributes.get("productId") or card_attributes.get("tcgplayer_id") or "",
        "customer_name": customer_name,
        "item_id": item.get("id"),
        "trade_in_id": trade_in.get("id") or item.get("trade_in_id") or "",
        "trade_in_date": format_date(trade_in.get("trade_in_date"), today),
        "payment_type": trade_in.get("payment_type") or "cash",
    }
