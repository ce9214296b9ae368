"""Data Transfer Objects — plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from stitchline.domain.model.order import Order


@dataclass(frozen=True)
class MutationResult:
    """Outcome of one command, always tied to the attempted action."""

    ok: bool
    action: str
    message: str
    order_id: str | None = None
    payload: Any = None


@dataclass(frozen=True)
class SlotDTO:
    id: str
    status: str
    pet_name: str
    position: str
    photo_url: str
    ai_reason: str
    include_halo: bool


@dataclass(frozen=True)
class OrderItemDTO:
    id: str
    product_name: str
    sku: str
    quantity: int
    group_id: str
    sleeve: str
    design_status: str
    slots: list[SlotDTO] = field(default_factory=list)
    is_sleeve_addon: bool = False


@dataclass(frozen=True)
class OrderDTO:
    """Output: a complete order as displayed to the user."""

    id: str
    customer_name: str
    email: str
    status: str
    created_at: str
    total: str
    designer: str
    embroiderer: str
    sleeve_credits: str
    client_feedback: str
    production_issue: str
    items: list[OrderItemDTO]

    @staticmethod
    def from_order(order: Order) -> OrderDTO:
        total = order.total_amount or order.computed_total
        return OrderDTO(
            id=order.id,
            customer_name=order.customer_name,
            email=order.email,
            status=order.status.value,
            created_at=order.created_at.strftime("%Y-%m-%d %H:%M UTC"),
            total=str(total),
            designer=order.assigned_designer_id or "-",
            embroiderer=order.assigned_embroiderer_id or "-",
            sleeve_credits=(
                f"{order.remaining_sleeve_credits}/{order.total_sleeve_credits}"
                if order.total_sleeve_credits
                else "-"
            ),
            client_feedback=order.client_feedback or "",
            production_issue=order.production_issue or "",
            items=[
                OrderItemDTO(
                    id=item.id,
                    product_name=item.product_name,
                    sku=item.sku,
                    quantity=item.quantity,
                    group_id=item.group_id or "",
                    sleeve=(
                        f"{item.sleeve.text!r} {item.sleeve.font.value}/{item.sleeve.icon.value}"
                        if item.sleeve
                        else ""
                    ),
                    design_status=item.design_status.value if item.design_status else "",
                    is_sleeve_addon=item.is_sleeve_addon,
                    slots=[
                        SlotDTO(
                            id=slot.id,
                            status=slot.status.value,
                            pet_name=slot.pet_name or "",
                            position=slot.position.value if slot.position else "",
                            photo_url=slot.photo_url or "",
                            ai_reason=slot.ai_reason or "",
                            include_halo=slot.include_halo,
                        )
                        for slot in item.slots
                    ],
                )
                for item in order.items
            ],
        )
