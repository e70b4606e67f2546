"""Tests for property inventory operations."""

import uuid
from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from staybook.exceptions import ConflictError, InvalidInputError, InvalidStateError, NotFoundError
from staybook.models.access_code import PropertyAccessCode
from staybook.models.property import Property, PropertyStatus
from staybook.models.reservation import Reservation
from staybook.services import access_code_service, property_service, reservation_service


class TestCreateProperty:
    """Tests for property_service.create_property."""

    async def test_create_active(self, test_property: Property) -> None:
        assert test_property.status == PropertyStatus.ACTIVE
        assert test_property.owner_id == "owner-1"
        assert test_property.price_per_night == Decimal("100.00")
        assert test_property.is_bookable

    @pytest.mark.parametrize("price", [Decimal("0"), Decimal("-5"), Decimal("12.345")])
    async def test_invalid_price_rejected(self, db_session: AsyncSession, price: Decimal) -> None:
        with pytest.raises(InvalidInputError, match="price_per_night"):
            await property_service.create_property(db_session, owner_id="o", title="T", price_per_night=price)

    async def test_get_unknown(self, db_session: AsyncSession) -> None:
        missing = uuid.uuid4()
        with pytest.raises(NotFoundError, match=str(missing)):
            await property_service.get_property(db_session, missing)


class TestUpdateProperty:
    """Tests for property_service.update_property."""

    async def test_partial_update(self, db_session: AsyncSession, test_property: Property) -> None:
        updated = await property_service.update_property(
            db_session, test_property.id, title="Harbour Loft II", price_per_night=Decimal("120")
        )

        assert updated.title == "Harbour Loft II"
        assert updated.price_per_night == Decimal("120.00")
        assert updated.city == "Lisbon"
        assert updated.description == "Two rooms above the harbour."

    async def test_update_rejects_bad_price(self, db_session: AsyncSession, test_property: Property) -> None:
        with pytest.raises(InvalidInputError):
            await property_service.update_property(db_session, test_property.id, price_per_night=Decimal("0"))


class TestActivation:
    """Tests for the ACTIVE/INACTIVE toggle."""

    async def test_deactivate_then_activate(self, db_session: AsyncSession, test_property: Property) -> None:
        prop = await property_service.deactivate(db_session, test_property.id)
        assert prop.status == PropertyStatus.INACTIVE
        assert not prop.is_bookable

        prop = await property_service.activate(db_session, test_property.id)
        assert prop.status == PropertyStatus.ACTIVE

    async def test_activate_active_rejected(self, db_session: AsyncSession, test_property: Property) -> None:
        with pytest.raises(InvalidStateError, match="already active"):
            await property_service.activate(db_session, test_property.id)

    async def test_deactivate_inactive_rejected(self, db_session: AsyncSession, test_property: Property) -> None:
        await property_service.deactivate(db_session, test_property.id)

        with pytest.raises(InvalidStateError, match="already inactive"):
            await property_service.deactivate(db_session, test_property.id)

    async def test_deactivation_keeps_existing_reservations(
        self, db_session: AsyncSession, pending_reservation: Reservation
    ) -> None:
        await property_service.deactivate(db_session, pending_reservation.property_id)

        kept = await reservation_service.get_reservation(db_session, pending_reservation.id)
        assert kept.is_active


class TestListing:
    """Tests for the property list queries."""

    async def test_public_listing_hides_inactive_and_filters_city(
        self, db_session: AsyncSession, test_property: Property
    ) -> None:
        porto = await property_service.create_property(
            db_session, owner_id="owner-2", title="Ribeira Flat", price_per_night=Decimal("80.00"), city="Porto"
        )
        hidden = await property_service.create_property(
            db_session, owner_id="owner-2", title="Closed", price_per_night=Decimal("80.00"), city="Porto"
        )
        await property_service.deactivate(db_session, hidden.id)

        items, total = await property_service.list_active_properties(db_session)
        assert total == 2
        assert {p.id for p in items} == {test_property.id, porto.id}

        items, total = await property_service.list_active_properties(db_session, city="  pOrTo ")
        assert total == 1
        assert items[0].id == porto.id

    async def test_owner_listing_includes_inactive(self, db_session: AsyncSession, test_property: Property) -> None:
        await property_service.deactivate(db_session, test_property.id)

        items, total = await property_service.list_owner_properties(db_session, "owner-1")
        assert total == 1
        assert items[0].status == PropertyStatus.INACTIVE

        _, total = await property_service.list_owner_properties(db_session, "owner-2")
        assert total == 0


class TestDeleteProperty:
    """Tests for property_service.delete_property."""

    async def test_delete_with_active_reservation_rejected(
        self, db_session: AsyncSession, pending_reservation: Reservation
    ) -> None:
        with pytest.raises(ConflictError, match="active reservations"):
            await property_service.delete_property(db_session, pending_reservation.property_id)

        assert await property_service.get_property(db_session, pending_reservation.property_id)

    async def test_delete_removes_history_and_codes(
        self, db_session: AsyncSession, pending_reservation: Reservation
    ) -> None:
        property_id = pending_reservation.property_id
        await reservation_service.cancel(db_session, pending_reservation.id)
        await access_code_service.create(db_session, property_id, "guest@example.com", "owner-1")

        await property_service.delete_property(db_session, property_id)

        with pytest.raises(NotFoundError):
            await property_service.get_property(db_session, property_id)
        reservations = await db_session.execute(select(Reservation).where(Reservation.property_id == property_id))
        assert reservations.scalars().all() == []
        codes = await db_session.execute(
            select(PropertyAccessCode).where(PropertyAccessCode.property_id == property_id)
        )
        assert codes.scalars().all() == []

    async def test_delete_unknown(self, db_session: AsyncSession) -> None:
        with pytest.raises(NotFoundError):
            await property_service.delete_property(db_session, uuid.uuid4())

    async def test_has_active_reservations(self, db_session: AsyncSession, test_property: Property) -> None:
        assert not await property_service.has_active_reservations(db_session, test_property.id)

        booking = await reservation_service.create(
            db_session, property_id=test_property.id, tenant_id="t", start=date(2026, 9, 1), end=date(2026, 9, 2)
        )
        assert await property_service.has_active_reservations(db_session, test_property.id)

        await reservation_service.cancel(db_session, booking.id)
        assert not await property_service.has_active_reservations(db_session, test_property.id)
