"""Tests for reservation endpoints."""

import uuid
from decimal import Decimal

import pytest
from httpx import AsyncClient

from staybook.models.property import Property
from staybook.models.reservation import Reservation

pytestmark = pytest.mark.asyncio


def _booking(prop: Property, start: str = "2026-03-01", end: str = "2026-03-10") -> dict:
    return {"property_id": str(prop.id), "start_date": start, "end_date": end}


# ---------------------------------------------------------------------------
# POST /api/v1/reservations
# ---------------------------------------------------------------------------


class TestCreateReservation:
    """Tests for booking a property."""

    async def test_create_success(self, client: AsyncClient, tenant_headers: dict, test_property: Property) -> None:
        response = await client.post("/api/v1/reservations", json=_booking(test_property), headers=tenant_headers)
        assert response.status_code == 201
        data = response.json()
        assert data["tenant_id"] == "tenant-1"
        assert data["status"] == "PENDING"
        assert data["nights"] == 9
        assert data["pricing_type"] == "NORMAL"
        assert Decimal(data["unit_price_applied"]) == Decimal("100.00")
        assert Decimal(data["total_price"]) == Decimal("900.00")

    @pytest.mark.parametrize(("start", "end"), [("2026-03-10", "2026-03-10"), ("2026-03-10", "2026-03-01")])
    async def test_malformed_range_is_400(
        self, client: AsyncClient, tenant_headers: dict, test_property: Property, start: str, end: str
    ) -> None:
        response = await client.post(
            "/api/v1/reservations",
            json=_booking(test_property, start, end),
            headers=tenant_headers,
        )
        assert response.status_code == 400
        assert response.json() == {
            "detail": "end_date must be after start_date",
            "kind": "invalid_input",
            "retryable": False,
        }

    async def test_boundary_overlap_is_409(
        self, client: AsyncClient, tenant_headers: dict, test_property: Property
    ) -> None:
        first = await client.post(
            "/api/v1/reservations", json=_booking(test_property, "2026-06-10", "2026-06-15"), headers=tenant_headers
        )
        assert first.status_code == 201

        second = await client.post(
            "/api/v1/reservations", json=_booking(test_property, "2026-06-15", "2026-06-20"), headers=tenant_headers
        )
        assert second.status_code == 409
        body = second.json()
        assert body["kind"] == "conflict"
        assert "overlap" in body["detail"]

    async def test_unknown_property_is_404(self, client: AsyncClient, tenant_headers: dict) -> None:
        response = await client.post(
            "/api/v1/reservations",
            json={"property_id": str(uuid.uuid4()), "start_date": "2026-03-01", "end_date": "2026-03-02"},
            headers=tenant_headers,
        )
        assert response.status_code == 404

    async def test_requires_auth(self, client: AsyncClient, test_property: Property) -> None:
        response = await client.post("/api/v1/reservations", json=_booking(test_property))
        assert response.status_code == 401


# ---------------------------------------------------------------------------
# Lifecycle
# ---------------------------------------------------------------------------


class TestLifecycle:
    """Tests for confirm / complete / cancel."""

    async def test_owner_confirms_and_completes(
        self, client: AsyncClient, owner_headers: dict, pending_reservation: Reservation
    ) -> None:
        rid = pending_reservation.id
        response = await client.post(f"/api/v1/reservations/{rid}/confirm", headers=owner_headers)
        assert response.status_code == 200
        assert response.json()["status"] == "CONFIRMED"

        response = await client.post(f"/api/v1/reservations/{rid}/complete", headers=owner_headers)
        assert response.status_code == 200
        assert response.json()["status"] == "COMPLETED"

        response = await client.post(f"/api/v1/reservations/{rid}/cancel", headers=owner_headers)
        assert response.status_code == 409
        assert response.json() == {
            "detail": "A completed reservation cannot be cancelled",
            "kind": "invalid_state",
            "retryable": False,
        }

    async def test_tenant_cannot_confirm(
        self, client: AsyncClient, tenant_headers: dict, pending_reservation: Reservation
    ) -> None:
        response = await client.post(f"/api/v1/reservations/{pending_reservation.id}/confirm", headers=tenant_headers)
        assert response.status_code == 403

    async def test_tenant_cancels(
        self, client: AsyncClient, tenant_headers: dict, pending_reservation: Reservation
    ) -> None:
        response = await client.post(f"/api/v1/reservations/{pending_reservation.id}/cancel", headers=tenant_headers)
        assert response.status_code == 200
        assert response.json()["status"] == "CANCELLED"

    async def test_stranger_cannot_cancel(
        self, client: AsyncClient, stranger_headers: dict, pending_reservation: Reservation
    ) -> None:
        response = await client.post(
            f"/api/v1/reservations/{pending_reservation.id}/cancel", headers=stranger_headers
        )
        assert response.status_code == 403

    async def test_unknown_reservation_is_404(self, client: AsyncClient, owner_headers: dict) -> None:
        response = await client.post(f"/api/v1/reservations/{uuid.uuid4()}/confirm", headers=owner_headers)
        assert response.status_code == 404


# ---------------------------------------------------------------------------
# Pricing
# ---------------------------------------------------------------------------


class TestPricing:
    """Tests for discount and free-stay endpoints."""

    async def test_discount(self, client: AsyncClient, owner_headers: dict, pending_reservation: Reservation) -> None:
        response = await client.post(
            f"/api/v1/reservations/{pending_reservation.id}/discount",
            json={"unit_price": "80.00", "reason": "repeat guest"},
            headers=owner_headers,
        )
        assert response.status_code == 200
        data = response.json()
        assert data["pricing_type"] == "DISCOUNT"
        assert Decimal(data["total_price"]) == Decimal("720.00")
        assert data["priced_by"] == "owner-1"

    async def test_discount_above_price_is_400(
        self, client: AsyncClient, owner_headers: dict, pending_reservation: Reservation
    ) -> None:
        response = await client.post(
            f"/api/v1/reservations/{pending_reservation.id}/discount",
            json={"unit_price": "150.00"},
            headers=owner_headers,
        )
        assert response.status_code == 400
        assert response.json()["kind"] == "invalid_input"

    async def test_negative_discount_is_400(
        self, client: AsyncClient, owner_headers: dict, pending_reservation: Reservation
    ) -> None:
        response = await client.post(
            f"/api/v1/reservations/{pending_reservation.id}/discount",
            json={"unit_price": "-1.00"},
            headers=owner_headers,
        )
        assert response.status_code == 400
        assert response.json()["kind"] == "invalid_input"

    async def test_state_checked_before_price(
        self, client: AsyncClient, owner_headers: dict, pending_reservation: Reservation
    ) -> None:
        rid = pending_reservation.id
        assert (await client.post(f"/api/v1/reservations/{rid}/confirm", headers=owner_headers)).status_code == 200

        response = await client.post(
            f"/api/v1/reservations/{rid}/discount",
            json={"unit_price": "-1.00"},
            headers=owner_headers,
        )
        assert response.status_code == 409
        assert response.json()["kind"] == "invalid_state"

    async def test_tenant_cannot_discount(
        self, client: AsyncClient, tenant_headers: dict, pending_reservation: Reservation
    ) -> None:
        response = await client.post(
            f"/api/v1/reservations/{pending_reservation.id}/discount",
            json={"unit_price": "1.00"},
            headers=tenant_headers,
        )
        assert response.status_code == 403

    async def test_free_stay(self, client: AsyncClient, owner_headers: dict, pending_reservation: Reservation) -> None:
        response = await client.post(
            f"/api/v1/reservations/{pending_reservation.id}/free",
            json={"reason": "Family"},
            headers=owner_headers,
        )
        assert response.status_code == 200
        data = response.json()
        assert data["pricing_type"] == "FREE"
        assert Decimal(data["total_price"]) == Decimal("0")

    @pytest.mark.parametrize("reason", ["", "   ", "x" * 256])
    async def test_free_stay_bad_reason_is_400(
        self, client: AsyncClient, owner_headers: dict, pending_reservation: Reservation, reason: str
    ) -> None:
        response = await client.post(
            f"/api/v1/reservations/{pending_reservation.id}/free",
            json={"reason": reason},
            headers=owner_headers,
        )
        assert response.status_code == 400
        assert response.json()["kind"] == "invalid_input"


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------


class TestReads:
    """Tests for reservation reads and listings."""

    async def test_get_by_tenant_and_owner(
        self,
        client: AsyncClient,
        owner_headers: dict,
        tenant_headers: dict,
        stranger_headers: dict,
        pending_reservation: Reservation,
    ) -> None:
        url = f"/api/v1/reservations/{pending_reservation.id}"
        assert (await client.get(url, headers=tenant_headers)).status_code == 200
        assert (await client.get(url, headers=owner_headers)).status_code == 200
        assert (await client.get(url, headers=stranger_headers)).status_code == 403

    async def test_listings(
        self,
        client: AsyncClient,
        owner_headers: dict,
        tenant_headers: dict,
        pending_reservation: Reservation,
    ) -> None:
        mine = await client.get("/api/v1/reservations/mine", headers=tenant_headers)
        assert mine.json()["total"] == 1

        owner_view = await client.get("/api/v1/reservations/owner", headers=owner_headers)
        assert owner_view.json()["total"] == 1

        pending = await client.get("/api/v1/reservations/owner/pending", headers=owner_headers)
        assert pending.json()["items"][0]["id"] == str(pending_reservation.id)

        confirmed = await client.get(
            "/api/v1/reservations/owner", params={"status": "CONFIRMED"}, headers=owner_headers
        )
        assert confirmed.json()["total"] == 0

        tenant_as_owner = await client.get("/api/v1/reservations/owner", headers=tenant_headers)
        assert tenant_as_owner.json()["total"] == 0

    async def test_property_reservations_owner_only(
        self,
        client: AsyncClient,
        owner_headers: dict,
        tenant_headers: dict,
        pending_reservation: Reservation,
    ) -> None:
        url = f"/api/v1/reservations/property/{pending_reservation.property_id}"

        response = await client.get(url, headers=owner_headers)
        assert response.status_code == 200
        assert [r["id"] for r in response.json()["items"]] == [str(pending_reservation.id)]

        assert (await client.get(url, headers=tenant_headers)).status_code == 403
