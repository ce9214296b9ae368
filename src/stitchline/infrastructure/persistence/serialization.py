"""Order <-> JSON-compatible dict mapping used by the JSON repositories."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any

from stitchline.domain.model.item import (
    CustomizationType,
    DesignAssets,
    DesignStatus,
    DesignVersion,
    OrderItem,
    SleeveConfig,
    SleeveFont,
    SleeveIcon,
)
from stitchline.domain.model.order import Order, OrderStatus
from stitchline.domain.model.slot import EmbroideryPosition, EmbroiderySlot, SlotStatus
from stitchline.domain.model.staff import StaffMember, UserRole
from stitchline.domain.model.value_objects import Money


# --- To raw -----------------------------------------------------------------

def order_to_raw(order: Order) -> dict:
    return {
        "id": order.id,
        "customer_id": order.customer_id,
        "customer_name": order.customer_name,
        "email": order.email,
        "phone": order.phone,
        "shipping_address": order.shipping_address,
        "created_at": order.created_at.isoformat(),
        "status": order.status.value,
        "total_amount": _money_to_raw(order.total_amount),
        "assigned_designer_id": order.assigned_designer_id,
        "assigned_embroiderer_id": order.assigned_embroiderer_id,
        "design": _assets_to_raw(order.design),
        "design_history": [_version_to_raw(v) for v in order.design_history],
        "client_feedback": order.client_feedback,
        "production_issue": order.production_issue,
        "finished_product_photo": order.finished_product_photo,
        "packed_product_photo": order.packed_product_photo,
        "items": [item_to_raw(item) for item in order.items],
    }


def item_to_raw(item: OrderItem) -> dict:
    return {
        "id": item.id,
        "group_id": item.group_id,
        "sku": item.sku,
        "product_name": item.product_name,
        "quantity": item.quantity,
        "unit_price": _money_to_raw(item.unit_price),
        "customization_type": item.customization_type.value,
        "garment_type": item.garment_type,
        "color": item.color,
        "size": item.size,
        "sleeve": _sleeve_to_raw(item.sleeve),
        "design": _assets_to_raw(item.design),
        "design_status": item.design_status.value if item.design_status else None,
        "design_feedback": item.design_feedback,
        "design_history": [_version_to_raw(v) for v in item.design_history],
        "slots": [slot_to_raw(slot) for slot in item.slots],
    }


def slot_to_raw(slot: EmbroiderySlot) -> dict:
    return {
        "id": slot.id,
        "status": slot.status.value,
        "pet_name": slot.pet_name,
        "photo_url": slot.photo_url,
        "position": slot.position.value if slot.position else None,
        "include_halo": slot.include_halo,
        "include_name": slot.include_name,
        "ai_reason": slot.ai_reason,
        "font_id": slot.font_id,
        "sleeve_icon_id": slot.sleeve_icon_id,
        "created_at": slot.created_at,
    }


def staff_to_raw(member: StaffMember) -> dict:
    return {
        "id": member.id,
        "name": member.name,
        "role": member.role.value,
        "email": member.email,
        "avatar": member.avatar,
    }


def _money_to_raw(money: Money | None) -> dict | None:
    if money is None:
        return None
    return {"amount": str(money.amount), "currency": money.currency}


def _sleeve_to_raw(sleeve: SleeveConfig | None) -> dict | None:
    if sleeve is None:
        return None
    return {"text": sleeve.text, "font": sleeve.font.value, "icon": sleeve.icon.value}


def _assets_to_raw(assets: DesignAssets | None) -> dict | None:
    if assets is None:
        return None
    return {
        "image": assets.image,
        "machine_file": assets.machine_file,
        "technical_sheet": assets.technical_sheet,
    }


def _version_to_raw(version: DesignVersion) -> dict:
    return {
        "assets": _assets_to_raw(version.assets),
        "created_at": version.created_at,
        "feedback": version.feedback,
    }


# --- To domain --------------------------------------------------------------

def order_from_raw(raw: dict) -> Order:
    return Order(
        id=raw["id"],
        customer_id=raw.get("customer_id"),
        customer_name=raw["customer_name"],
        email=raw["email"],
        phone=raw.get("phone", ""),
        shipping_address=raw.get("shipping_address", ""),
        created_at=datetime.fromisoformat(raw["created_at"]),
        status=OrderStatus(raw["status"]),
        total_amount=_money_from_raw(raw.get("total_amount")),
        assigned_designer_id=raw.get("assigned_designer_id"),
        assigned_embroiderer_id=raw.get("assigned_embroiderer_id"),
        design=_assets_from_raw(raw.get("design")),
        design_history=[_version_from_raw(v) for v in raw.get("design_history", [])],
        client_feedback=raw.get("client_feedback"),
        production_issue=raw.get("production_issue"),
        finished_product_photo=raw.get("finished_product_photo"),
        packed_product_photo=raw.get("packed_product_photo"),
        items=[item_from_raw(i) for i in raw["items"]],
    )


def item_from_raw(raw: dict) -> OrderItem:
    return OrderItem(
        id=raw["id"],
        group_id=raw.get("group_id"),
        sku=raw["sku"],
        product_name=raw["product_name"],
        quantity=raw.get("quantity", 1),
        unit_price=_money_from_raw(raw.get("unit_price")),
        customization_type=CustomizationType(raw.get("customization_type", "PORTRAIT")),
        garment_type=raw.get("garment_type"),
        color=raw.get("color"),
        size=raw.get("size"),
        sleeve=_sleeve_from_raw(raw.get("sleeve")),
        design=_assets_from_raw(raw.get("design")),
        design_status=DesignStatus(raw["design_status"]) if raw.get("design_status") else None,
        design_feedback=raw.get("design_feedback"),
        design_history=[_version_from_raw(v) for v in raw.get("design_history", [])],
        slots=[slot_from_raw(s) for s in raw.get("slots", [])],
    )


def slot_from_raw(raw: dict) -> EmbroiderySlot:
    return EmbroiderySlot(
        id=raw["id"],
        status=SlotStatus(raw.get("status", "EMPTY")),
        pet_name=raw.get("pet_name"),
        photo_url=raw.get("photo_url"),
        position=EmbroideryPosition(raw["position"]) if raw.get("position") else None,
        include_halo=raw.get("include_halo", False),
        include_name=raw.get("include_name", False),
        ai_reason=raw.get("ai_reason"),
        font_id=raw.get("font_id"),
        sleeve_icon_id=raw.get("sleeve_icon_id"),
        created_at=raw.get("created_at"),
    )


def staff_from_raw(raw: dict) -> StaffMember:
    return StaffMember(
        id=raw["id"],
        name=raw["name"],
        role=UserRole(raw["role"]),
        email=raw.get("email"),
        avatar=raw.get("avatar"),
    )


def _money_from_raw(raw: dict | None) -> Money | None:
    if raw is None:
        return None
    return Money(Decimal(raw["amount"]), raw.get("currency", "CLP"))


def _sleeve_from_raw(raw: dict | None) -> SleeveConfig | None:
    if raw is None:
        return None
    return SleeveConfig(
        text=raw.get("text", ""),
        font=SleeveFont(raw.get("font", "ARIAL_ROUNDED")),
        icon=SleeveIcon(raw.get("icon", "NONE")),
    )


def _assets_from_raw(raw: dict | None) -> DesignAssets | None:
    if raw is None:
        return None
    return DesignAssets(
        image=raw["image"],
        machine_file=raw["machine_file"],
        technical_sheet=raw["technical_sheet"],
    )


def _version_from_raw(raw: dict) -> DesignVersion:
    return DesignVersion(
        assets=_assets_from_raw(raw["assets"]),  # type: ignore[arg-type]
        created_at=raw["created_at"],
        feedback=raw.get("feedback"),
    )


def apply_fields(target: Any, changes: dict[str, Any]) -> None:
    """Set attributes on a domain object, refusing unknown field names."""
    for name, value in changes.items():
        if not hasattr(target, name):
            raise KeyError(f"{type(target).__name__} has no field '{name}'")
        setattr(target, name, value)
