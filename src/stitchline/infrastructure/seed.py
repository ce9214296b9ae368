"""Demo data: three sample orders and the default staff roster."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from stitchline.domain.model.item import SLEEVE_SKU, OrderItem, SleeveConfig, SleeveFont, SleeveIcon
from stitchline.domain.model.order import Order, OrderStatus
from stitchline.domain.model.slot import EmbroideryPosition, EmbroiderySlot, SlotStatus
from stitchline.domain.model.staff import StaffMember, UserRole
from stitchline.domain.model.value_objects import Money
from stitchline.domain.repository.order_repository import OrderRepository
from stitchline.domain.repository.staff_repository import StaffRepository

logger = logging.getLogger(__name__)

_PHOTO = "https://images.unsplash.com/photo-{}?auto=format&fit=crop&w=500&q=80"


def demo_staff() -> list[StaffMember]:
    return [
        StaffMember("DES-1", "Ana Diseño", UserRole.DESIGNER, "ana@stitchline.test"),
        StaffMember("DES-2", "Carlos Arte", UserRole.DESIGNER, "carlos@stitchline.test"),
        StaffMember("EMB-1", "Pedro Hilos", UserRole.EMBROIDERER, "pedro@stitchline.test"),
        StaffMember("EMB-2", "Maria Bordado", UserRole.EMBROIDERER, "maria@stitchline.test"),
        StaffMember("PCK-1", "Sofía Empaque", UserRole.PACKER, "sofia@stitchline.test"),
        StaffMember("ADM-1", "Admin", UserRole.ADMIN, "admin@stitchline.test"),
    ]


def demo_orders() -> list[Order]:
    pack = Order(
        id="4001-PACK",
        customer_name="Javiera Pack",
        email="javi@example.com",
        phone="+569 0000 0000",
        shipping_address="Calle Falsa 123",
        created_at=datetime(2025, 11, 29, 10, 0, tzinfo=timezone.utc),
        total_amount=Money.of(65000),
        items=[
            OrderItem(
                id="4001-H",
                group_id="VOL-PACK1",
                sku="hood-neg-m",
                product_name="Hoodie Pack",
                unit_price=Money.of(42500),
                slots=[
                    EmbroiderySlot("S1", include_halo=True, position=EmbroideryPosition.CENTER)
                ],
            ),
            OrderItem(
                id="4001-J",
                group_id="VOL-PACK1",
                sku="jockey-bei",
                product_name="Jockey Pack",
                unit_price=Money.of(22500),
                slots=[
                    EmbroiderySlot("S2", include_halo=True, position=EmbroideryPosition.CENTER)
                ],
            ),
        ],
    )

    mixed = Order(
        id="3872",
        customer_name="Rebeca Figueroa",
        email="rebecafigueroacisternas@gmail.com",
        phone="+569 62438492",
        shipping_address="Las Lomas de Maipú 1784",
        created_at=datetime(2025, 11, 28, 10, 54, tzinfo=timezone.utc),
        status=OrderStatus.WAITING_FOR_DESIGN,
        total_amount=Money.of(139000),
        assigned_designer_id="DES-1",
        items=[
            OrderItem(
                id="3872-1",
                sku="hood-neg-l",
                product_name="Hoodie Independiente 1",
                unit_price=Money.of(45000),
                sleeve=SleeveConfig("Rebeca", SleeveFont.COMIC, SleeveIcon.PAW),
                slots=[
                    EmbroiderySlot(
                        "C1",
                        status=SlotStatus.APPROVED,
                        pet_name="Rocky",
                        position=EmbroideryPosition.CENTER_LEFT,
                        photo_url=_PHOTO.format("1517849845537-4d257902454a"),
                    )
                ],
            ),
            OrderItem(
                id="3872-2",
                sku="hood-bei-m",
                product_name="Hoodie Independiente 2",
                unit_price=Money.of(45000),
                slots=[
                    EmbroiderySlot(
                        "C2",
                        status=SlotStatus.APPROVED,
                        pet_name="Luna",
                        position=EmbroideryPosition.CENTER,
                        photo_url=_PHOTO.format("1543466835-00a7907e9de1"),
                    )
                ],
            ),
            OrderItem(
                id="3872-EXTRA",
                sku=SLEEVE_SKU,
                product_name="Nombre de tu regalón en Manga",
                unit_price=Money.of(9900),
            ),
        ],
    )

    dispatched = Order(
        id="3850",
        customer_name="Juan Pérez",
        email="juan@example.com",
        phone="+569 1111 2222",
        shipping_address="Av Providencia 123",
        created_at=datetime(2025, 11, 25, 14, 0, tzinfo=timezone.utc),
        status=OrderStatus.DISPATCHED,
        total_amount=Money.of(25000),
        assigned_designer_id="DES-2",
        assigned_embroiderer_id="EMB-1",
        finished_product_photo=_PHOTO.format("1575424909138-46b05e5919ec"),
        packed_product_photo=_PHOTO.format("1586769852044-692d6e3703f0"),
        items=[
            OrderItem(
                id="3850-1",
                sku="cap-black",
                product_name="Jockey Bordado",
                unit_price=Money.of(25000),
                slots=[
                    EmbroiderySlot(
                        "J1",
                        status=SlotStatus.APPROVED,
                        position=EmbroideryPosition.CENTER,
                        photo_url=_PHOTO.format("1587300003388-59208cc962cb"),
                    )
                ],
            )
        ],
    )
    return [pack, mixed, dispatched]


async def seed(order_repo: OrderRepository, staff_repo: StaffRepository) -> tuple[int, int]:
    """Write the demo data, skipping orders that already exist.

    Returns (orders added, staff saved).
    """
    for member in demo_staff():
        await staff_repo.save(member)

    added = 0
    for order in demo_orders():
        if await order_repo.get_by_id(order.id) is not None:
            logger.info("Order %s already present, not seeding it", order.id)
            continue
        await order_repo.add(order)
        added += 1
    return added, len(demo_staff())
