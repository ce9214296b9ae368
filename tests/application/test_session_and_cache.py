"""Tests for session resolution, order listing and the read-through cache."""

import pytest

from stitchline.application.order_cache import OrderQueryCache
from stitchline.application.session import SessionResolver
from stitchline.application.show_order import ListOrdersHandler, ShowOrderHandler
from stitchline.domain.exceptions import EntityNotFoundError, ExternalServiceError, PermissionDeniedError
from stitchline.domain.gateway.identity import RoleGrant
from stitchline.domain.model.order import OrderStatus
from stitchline.domain.model.session import Identity
from stitchline.domain.model.staff import UserRole
from tests.factories import client_session, pack_order, single_order, sleeve_order
from tests.fakes import FakeIdentityProvider, FakeOrderRepository, FakeRoleDirectory

ANA = Identity(subject_id="staff:DES-1", email="ana@stitchline.test", name="Ana Diseño")
JAVI = Identity(subject_id="customer:javi", email="javi@example.com")


def _resolver(roles: FakeRoleDirectory | None = None):
    identities = FakeIdentityProvider({"ana-token": ANA, "javi-token": JAVI})
    roles = roles or FakeRoleDirectory({"staff:DES-1": RoleGrant(UserRole.DESIGNER, "DES-1")})
    return SessionResolver(identities, roles), identities, roles


@pytest.mark.asyncio
class TestSessionResolver:

    async def test_staff_member_gets_their_role(self):
        resolver, _, _ = _resolver()
        session = await resolver.resolve("ana-token")
        assert session.role == UserRole.DESIGNER
        assert session.staff_id == "DES-1"
        assert session.subject_id == "staff:DES-1"

    async def test_no_role_on_record_means_client(self):
        resolver, _, _ = _resolver()
        session = await resolver.resolve("javi-token")
        assert session.role == UserRole.CLIENT
        assert session.staff_id is None

    async def test_unknown_token_refused(self):
        resolver, _, _ = _resolver()
        with pytest.raises(PermissionDeniedError, match="Unknown session"):
            await resolver.resolve("nobody")

    async def test_both_steps_are_cached(self):
        resolver, identities, roles = _resolver()
        await resolver.resolve("ana-token")
        await resolver.resolve("ana-token")
        assert identities.calls == 1
        assert roles.calls == 1

    async def test_failed_role_lookup_falls_back_to_client_and_retries(self):
        roles = FakeRoleDirectory(
            {"staff:DES-1": RoleGrant(UserRole.DESIGNER, "DES-1")},
            error=ExternalServiceError("Staff directory unreadable"),
        )
        resolver, _, _ = _resolver(roles)

        assert (await resolver.resolve("ana-token")).role == UserRole.CLIENT

        roles.error = None
        assert (await resolver.resolve("ana-token")).role == UserRole.DESIGNER
        assert roles.calls == 2

    async def test_forget_drops_cached_lookups(self):
        resolver, identities, _ = _resolver()
        await resolver.resolve("ana-token")
        resolver.forget("ana-token")
        await resolver.resolve("ana-token")
        assert identities.calls == 2


@pytest.mark.asyncio
class TestOrderQueryCache:

    async def test_loader_runs_once_per_subject(self):
        calls = []

        async def loader(session):
            calls.append(session.subject_id)
            return [single_order()]

        cache = OrderQueryCache(loader)
        session = client_session()
        await cache.orders_for(session)
        order = await cache.order_for(session, "1001")

        assert order.id == "1001"
        assert calls == [session.subject_id]
        assert session.subject_id in cache

    async def test_invalidate_one_or_all(self):
        async def loader(session):
            return []

        cache = OrderQueryCache(loader)
        a, b = client_session("a@example.com"), client_session("b@example.com")
        await cache.orders_for(a)
        await cache.orders_for(b)

        cache.invalidate(a.subject_id)
        assert a.subject_id not in cache and b.subject_id in cache

        cache.invalidate()
        assert b.subject_id not in cache


class TestListOrdersFilter:

    def _orders(self):
        waiting = sleeve_order()
        waiting.status = OrderStatus.WAITING_FOR_DESIGN
        return [single_order(), pack_order(), waiting]

    def test_status_filter(self):
        result = ListOrdersHandler.filter(self._orders(), {OrderStatus.WAITING_FOR_DESIGN})
        assert [o.id for o in result] == ["3872"]

    def test_search_matches_id_customer_or_product(self):
        orders = self._orders()
        assert [o.id for o in ListOrdersHandler.filter(orders, search="4001")] == ["4001-PACK"]
        assert [o.id for o in ListOrdersHandler.filter(orders, search="rebeca")] == ["3872"]
        assert [o.id for o in ListOrdersHandler.filter(orders, search="jockey")] == ["4001-PACK"]

    def test_no_filter_keeps_everything(self):
        assert len(ListOrdersHandler.filter(self._orders())) == 3


@pytest.mark.asyncio
class TestShowOrder:

    async def test_dto_shows_slots_and_credits(self):
        repo = FakeOrderRepository([sleeve_order(credits=2)])
        dto = await ShowOrderHandler(repo).handle("3872", client_session())
        assert dto.status == "PENDING_UPLOAD"
        assert dto.sleeve_credits == "2/2"
        assert [item.id for item in dto.items][-1] == "3872-EXTRA"
        assert dto.items[-1].is_sleeve_addon
        assert dto.items[0].slots[0].status == "EMPTY"

    async def test_foreign_order_is_not_found(self):
        repo = FakeOrderRepository([single_order()])
        with pytest.raises(EntityNotFoundError, match="not found"):
            await ShowOrderHandler(repo).handle("1001", client_session("other@example.com"))
