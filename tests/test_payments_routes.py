import hashlib
import hmac
import json

from conftest import WEBHOOK_SECRET


def fund(client, customer, amount=10000):
    response = client.post("/api/payments/wallet/fund", json={"amount": amount}, headers=customer)
    assert response.status_code == 200, response.text
    return response.json()


def balance(client, customer):
    return client.get("/api/payments/wallet/balance", headers=customer).json()["balance"]


def test_fund_wallet_initializes_gateway_in_kobo(client, customer, paystack):
    body = fund(client, customer, 2500)
    assert body["reference"].startswith("FUND-")
    assert body["authorization_url"].endswith(body["reference"])
    assert body["transaction"]["status"] == "pending"
    assert paystack.initialized == [{"amount": 250000, "email": "ada@example.com", "reference": body["reference"]}]
    assert balance(client, customer) == 0


def test_fund_wallet_rejects_bad_amount_and_barbers(client, customer, barber):
    assert client.post("/api/payments/wallet/fund", json={"amount": 0}, headers=customer).status_code == 400
    assert client.post("/api/payments/wallet/fund", json={"amount": 100}, headers=barber).status_code == 403


def test_gateway_failure_marks_transaction_failed(client, customer, paystack):
    paystack.fail = True
    response = client.post("/api/payments/wallet/fund", json={"amount": 1000}, headers=customer)
    assert response.status_code == 502
    history = client.get("/api/payments/transactions", headers=customer).json()
    assert [t["status"] for t in history] == ["failed"]


def test_verify_credits_wallet_once(client, customer):
    reference = fund(client, customer)["reference"]

    verified = client.get(f"/api/payments/verify/{reference}", headers=customer)
    assert verified.json()["message"] == "Payment verified successfully"
    assert balance(client, customer) == 10000

    again = client.get(f"/api/payments/verify/{reference}", headers=customer)
    assert again.json()["message"] == "Payment already verified"
    assert balance(client, customer) == 10000

    types = [n["type"] for n in client.get("/api/notifications", headers=customer).json()]
    assert types == ["payment_deposit"]


def test_verify_failed_payment(client, customer, paystack):
    reference = fund(client, customer)["reference"]
    paystack.verify_status = "abandoned"
    response = client.get(f"/api/payments/verify/{reference}", headers=customer)
    assert response.status_code == 400
    assert balance(client, customer) == 0


def test_verify_someone_elses_payment(client, customer, register):
    reference = fund(client, customer)["reference"]
    other, _ = register("bola@example.com")
    assert client.get(f"/api/payments/verify/{reference}", headers=other).status_code == 403
    assert client.get("/api/payments/verify/NOPE", headers=other).status_code == 404


def _signed(event):
    payload = json.dumps(event).encode()
    signature = hmac.new(WEBHOOK_SECRET.encode(), payload, hashlib.sha512).hexdigest()
    return payload, signature


def test_webhook_settles_deposit(client, customer):
    reference = fund(client, customer)["reference"]
    payload, signature = _signed({"event": "charge.success", "data": {"reference": reference}})

    response = client.post("/api/webhook/paystack", content=payload, headers={"x-paystack-signature": signature})
    assert response.status_code == 200
    assert balance(client, customer) == 10000

    # redelivery is harmless
    client.post("/api/webhook/paystack", content=payload, headers={"x-paystack-signature": signature})
    assert balance(client, customer) == 10000


def test_webhook_rejects_bad_signature(client, customer):
    reference = fund(client, customer)["reference"]
    payload, _ = _signed({"event": "charge.success", "data": {"reference": reference}})
    response = client.post("/api/webhook/paystack", content=payload, headers={"x-paystack-signature": "bad"})
    assert response.status_code == 401
    assert balance(client, customer) == 0


def test_pay_for_booking_from_wallet(client, customer, barber, make_booking):
    client.get(f"/api/payments/verify/{fund(client, customer)['reference']}", headers=customer)
    booking = make_booking()

    paid = client.post("/api/payments/booking/pay", json={"booking_id": booking["id"]}, headers=customer)
    assert paid.status_code == 200, paid.text
    body = paid.json()
    assert body["booking"]["payment_status"] == "paid"
    assert body["wallet"]["balance"] == 10000 - 5400
    assert body["transaction"]["type"] == "payment"

    again = client.post("/api/payments/booking/pay", json={"booking_id": booking["id"]}, headers=customer)
    assert again.status_code == 409

    barber_types = [n["type"] for n in client.get("/api/notifications", headers=barber).json()]
    assert "payment_payment" in barber_types


def test_pay_with_insufficient_balance(client, customer, make_booking):
    booking = make_booking()
    response = client.post("/api/payments/booking/pay", json={"booking_id": booking["id"]}, headers=customer)
    assert response.status_code == 400


def test_cancelling_paid_booking_refunds_wallet(client, customer, make_booking):
    client.get(f"/api/payments/verify/{fund(client, customer)['reference']}", headers=customer)
    booking = make_booking(hours=1)
    client.post("/api/payments/booking/pay", json={"booking_id": booking["id"]}, headers=customer)

    cancelled = client.patch(f"/api/bookings/{booking['id']}/cancel", headers=customer).json()
    assert cancelled["cancellation_fee"] == 1080
    assert cancelled["booking"]["payment_status"] == "refunded"
    assert balance(client, customer) == 10000 - 1080

    refunds = client.get("/api/payments/transactions?type=refund", headers=customer).json()
    assert [t["amount"] for t in refunds] == [5400 - 1080]


def test_barber_balance_reports_earnings(client, barber, make_booking):
    booking = make_booking()
    client.patch(f"/api/bookings/{booking['id']}/confirm", headers=barber)
    client.patch(f"/api/bookings/{booking['id']}/complete", headers=barber)
    body = client.get("/api/payments/wallet/balance", headers=barber).json()
    assert body == {"total_earnings": 5000, "currency": "NGN"}


def test_customer_wallet_summary(client, customer):
    client.get(f"/api/payments/verify/{fund(client, customer)['reference']}", headers=customer)
    wallet = client.get("/api/customers/wallet", headers=customer).json()
    assert wallet["balance"] == 10000
    assert len(wallet["transactions"]) == 1


def test_webhook_rejects_malformed_body(client, customer):
    payload = b"not json"
    signature = hmac.new(WEBHOOK_SECRET.encode(), payload, hashlib.sha512).hexdigest()
    response = client.post("/api/webhook/paystack", content=payload, headers={"x-paystack-signature": signature})
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid payload"
