from datetime import timedelta
from decimal import Decimal

from tour_booking.models.voucher import Voucher, VoucherStatus
from tour_booking.utils.helpers import utcnow


def _payload(**overrides):
    now = utcnow()
    payload = {
        "voucher_code": "WELCOME",
        "voucher_name": "Welcome offer",
        "description": "First booking discount",
        "discount_type": "percentage",
        "discount_value": "15",
        "max_discount_amount": "300000",
        "usage_limit": 100,
        "valid_from": (now - timedelta(days=1)).isoformat(),
        "valid_to": (now + timedelta(days=60)).isoformat(),
    }
    payload.update(overrides)
    return payload


class TestVoucherCrud:
    def test_create_voucher(self, client):
        resp = client.post("/api/v1/vouchers", json=_payload())

        assert resp.status_code == 201
        body = resp.json()
        assert body["voucher_code"] == "WELCOME"
        assert body["discount_type"] == "percentage"
        assert body["status"] == "Active"
        assert body["used_count"] == 0
        assert Decimal(body["discount_value"]) == Decimal("15")

    def test_create_normalises_discount_type(self, client):
        resp = client.post("/api/v1/vouchers", json=_payload(discount_type="FIXED", discount_value="50000"))
        assert resp.status_code == 201
        assert resp.json()["discount_type"] == "fixed"

    def test_create_duplicate_code(self, client, make_voucher):
        make_voucher(voucher_code="WELCOME")
        resp = client.post("/api/v1/vouchers", json=_payload())
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Voucher code already exists"

    def test_create_invalid_window(self, client):
        now = utcnow()
        resp = client.post(
            "/api/v1/vouchers",
            json=_payload(valid_from=now.isoformat(), valid_to=now.isoformat()),
        )
        assert resp.status_code == 400

    def test_create_percentage_over_100(self, client):
        resp = client.post("/api/v1/vouchers", json=_payload(discount_value="120"))
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Percentage discount cannot exceed 100"

    def test_create_as_deleted_is_rejected(self, client):
        resp = client.post("/api/v1/vouchers", json=_payload(status="Deleted"))
        assert resp.status_code == 400

    def test_list_excludes_deleted(self, client, make_voucher):
        make_voucher(voucher_code="A")
        make_voucher(voucher_code="B", status=VoucherStatus.DELETED)
        make_voucher(voucher_code="C", status=VoucherStatus.INACTIVE)

        codes = {v["voucher_code"] for v in client.get("/api/v1/vouchers").json()}

        assert codes == {"A", "C"}

    def test_list_active(self, client, make_voucher):
        now = utcnow()
        make_voucher(voucher_code="LIVE")
        make_voucher(voucher_code="OFF", status=VoucherStatus.INACTIVE)
        make_voucher(voucher_code="OLD", valid_from=now - timedelta(days=9), valid_to=now - timedelta(days=2))
        make_voucher(voucher_code="SPENT", usage_limit=1, used_count=1)

        codes = [v["voucher_code"] for v in client.get("/api/v1/vouchers/active").json()]

        assert codes == ["LIVE"]

    def test_get_by_id(self, client, make_voucher):
        voucher = make_voucher()
        resp = client.get(f"/api/v1/vouchers/{voucher.id}")
        assert resp.status_code == 200
        assert resp.json()["voucher_code"] == "SUMMER20"

    def test_get_deleted_by_id_is_404(self, client, make_voucher):
        voucher = make_voucher(status=VoucherStatus.DELETED)
        assert client.get(f"/api/v1/vouchers/{voucher.id}").status_code == 404

    def test_get_by_code(self, client, make_voucher):
        make_voucher()
        assert client.get("/api/v1/vouchers/code/SUMMER20").status_code == 200
        assert client.get("/api/v1/vouchers/code/MISSING").status_code == 404

    def test_get_by_code_exhausted(self, client, make_voucher):
        make_voucher(usage_limit=2, used_count=2)
        resp = client.get("/api/v1/vouchers/code/SUMMER20")
        assert resp.status_code == 400

    def test_update_voucher(self, client, make_voucher):
        voucher = make_voucher()
        resp = client.put(
            f"/api/v1/vouchers/{voucher.id}",
            json=_payload(voucher_code="SUMMER20", voucher_name="Summer sale v2", status="Inactive"),
        )
        assert resp.status_code == 200
        body = resp.json()
        assert body["voucher_name"] == "Summer sale v2"
        assert body["status"] == "Inactive"

    def test_update_to_deleted_is_rejected(self, client, make_voucher):
        voucher = make_voucher()
        resp = client.put(f"/api/v1/vouchers/{voucher.id}", json=_payload(status="Deleted"))
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Use DELETE to remove a voucher"

    def test_update_code_collision(self, client, make_voucher):
        make_voucher(voucher_code="TAKEN")
        voucher = make_voucher(voucher_code="MINE")
        resp = client.put(f"/api/v1/vouchers/{voucher.id}", json=_payload(voucher_code="TAKEN"))
        assert resp.status_code == 400

    def test_delete_is_soft_and_terminal(self, client, db, make_voucher):
        voucher = make_voucher()

        resp = client.delete(f"/api/v1/vouchers/{voucher.id}")
        assert resp.status_code == 200
        assert resp.json() == {"message": "Voucher deleted successfully"}

        db.expire_all()
        assert db.get(Voucher, voucher.id).status == VoucherStatus.DELETED

        assert client.delete(f"/api/v1/vouchers/{voucher.id}").status_code == 404
        assert client.put(f"/api/v1/vouchers/{voucher.id}", json=_payload()).status_code == 404


class TestApplyAndUse:
    def test_apply_percentage(self, client, make_voucher):
        make_voucher(max_discount_amount=Decimal("100000"))

        resp = client.post("/api/v1/vouchers/apply", json={"voucher_code": "SUMMER20", "order_amount": 1000000})

        assert resp.status_code == 200
        body = resp.json()
        assert Decimal(body["discount_amount"]) == Decimal("100000")
        assert Decimal(body["final_amount"]) == Decimal("900000")
        assert body["message"] == "Voucher applied successfully"

    def test_apply_fixed_capped_at_order(self, client, make_voucher):
        make_voucher(voucher_code="FLAT", discount_type="fixed", discount_value=Decimal("50000"))

        resp = client.post("/api/v1/vouchers/apply", json={"voucher_code": "FLAT", "order_amount": 30000})

        body = resp.json()
        assert Decimal(body["discount_amount"]) == Decimal("30000")
        assert Decimal(body["final_amount"]) == Decimal("0")

    def test_apply_unknown_code(self, client):
        resp = client.post("/api/v1/vouchers/apply", json={"voucher_code": "NOPE", "order_amount": 1000})
        assert resp.status_code == 404

    def test_apply_expired(self, client, make_voucher):
        now = utcnow()
        make_voucher(valid_from=now - timedelta(days=5), valid_to=now - timedelta(days=1))
        resp = client.post("/api/v1/vouchers/apply", json={"voucher_code": "SUMMER20", "order_amount": 1000})
        assert resp.status_code == 400

    def test_apply_below_minimum(self, client, make_voucher):
        make_voucher(min_order_amount=Decimal("500000"))
        resp = client.post("/api/v1/vouchers/apply", json={"voucher_code": "SUMMER20", "order_amount": 100000})
        assert resp.status_code == 400

    def test_apply_rejects_non_positive_amount(self, client, make_voucher):
        make_voucher()
        resp = client.post("/api/v1/vouchers/apply", json={"voucher_code": "SUMMER20", "order_amount": 0})
        assert resp.status_code == 422

    def test_use_until_exhausted(self, client, make_voucher):
        voucher = make_voucher(usage_limit=1)

        first = client.post(f"/api/v1/vouchers/{voucher.id}/use")
        assert first.status_code == 200
        assert first.json()["used_count"] == 1

        second = client.post(f"/api/v1/vouchers/{voucher.id}/use")
        assert second.status_code == 400

    def test_use_deleted_voucher(self, client, make_voucher):
        voucher = make_voucher(status=VoucherStatus.DELETED)
        assert client.post(f"/api/v1/vouchers/{voucher.id}/use").status_code == 404

    def test_redeem(self, client, db, make_voucher):
        voucher = make_voucher(usage_limit=5, used_count=2)

        resp = client.post("/api/v1/vouchers/redeem", json={"voucher_code": "SUMMER20", "order_amount": 200000})

        assert resp.status_code == 200
        assert resp.json()["message"] == "Voucher redeemed successfully"
        assert Decimal(resp.json()["discount_amount"]) == Decimal("40000")
        db.expire_all()
        assert db.get(Voucher, voucher.id).used_count == 3
