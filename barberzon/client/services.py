"""Thin wrappers, one method per backend endpoint."""

from typing import Any, List, Optional

from .api import ApiClient


class _Service:
    def __init__(self, api: ApiClient):
        self.api = api


class AuthService(_Service):
    def register(self, email: str, password: str, full_name: str = "", phone_number: str = "",
                 role: Optional[str] = None) -> dict:
        response = self.api.post("/auth/register", {
            "email": email,
            "password": password,
            "full_name": full_name,
            "phone_number": phone_number,
            "role": role,
        })
        self._remember(response)
        return response

    def login(self, email: str, password: str) -> dict:
        response = self.api.post("/auth/login", form={"username": email, "password": password})
        self._remember(response)
        return response

    def logout(self):
        self.api.clear_token()

    def me(self) -> dict:
        user = self.api.get("/auth/me")
        self.api.store.set("user", user)
        return user

    def complete_onboarding(self, form: dict) -> dict:
        response = self.api.post("/auth/onboarding/complete", form)
        # The role changed, so the old token is stale
        if response.get("new_token"):
            self.api.set_token(response["new_token"])
        self.api.store.set("user", response.get("user"))
        return response

    def current_user(self) -> Optional[dict]:
        return self.api.store.get("user")

    def _remember(self, response: dict):
        self.api.set_token(response["access_token"])
        self.api.store.set("user", response.get("user"))


class CustomerService(_Service):
    def get_profile(self) -> dict:
        return self.api.get("/customers/profile")

    def update_profile(self, data: dict) -> dict:
        return self.api.put("/customers/profile", data)

    def get_bookings(self, status: Optional[str] = None) -> List[dict]:
        return self.api.get("/customers/bookings", {"status": status})

    def add_favorite_shop(self, shop_id) -> dict:
        return self.api.post("/customers/favorites", {"shop_id": shop_id})

    def remove_favorite_shop(self, shop_id) -> dict:
        return self.api.delete(f"/customers/favorites/{shop_id}")

    def get_wallet(self) -> dict:
        return self.api.get("/customers/wallet")


class BarberService(_Service):
    def get_profile(self) -> dict:
        return self.api.get("/barbers/profile")

    def get_barber_profile(self, barber_id) -> dict:
        return self.api.get(f"/barbers/{barber_id}")

    def update_profile(self, data: dict) -> dict:
        return self.api.put("/barbers/profile", data)

    def update_status(self, status: str) -> dict:
        return self.api.patch("/barbers/status", {"status": status})

    def get_appointments(self, status: Optional[str] = None, on_date: Optional[str] = None) -> List[dict]:
        return self.api.get("/barbers/appointments", {"status": status, "on_date": on_date})

    def update_appointment_status(self, booking_id, status: str, notes: Optional[str] = None) -> dict:
        return self.api.patch(f"/barbers/appointments/{booking_id}/status", {"status": status, "notes": notes})

    def get_earnings(self, period: str = "week") -> dict:
        return self.api.get("/barbers/earnings", {"period": period})


class ShopService(_Service):
    def get_all_shops(self, query: Optional[str] = None, lat: Optional[float] = None,
                      lng: Optional[float] = None, radius: Optional[float] = None) -> List[dict]:
        return self.api.get("/shops", {"query": query, "lat": lat, "lng": lng, "radius": radius})

    def get_nearby_shops(self, lat: float, lng: float, radius: float = 10) -> List[dict]:
        return self.get_all_shops(lat=lat, lng=lng, radius=radius)

    def get_shop_details(self, shop_id) -> dict:
        return self.api.get(f"/shops/{shop_id}")

    def get_shop_services(self, shop_id) -> List[dict]:
        return self.api.get(f"/shops/{shop_id}/services")

    def add_shop_service(self, shop_id, name: str, price: float, duration_minutes: int = 30) -> dict:
        return self.api.post(f"/shops/{shop_id}/services", {
            "name": name,
            "price": price,
            "duration_minutes": duration_minutes,
        })

    def get_shop_barbers(self, shop_id) -> List[dict]:
        return self.api.get(f"/shops/{shop_id}/barbers")

    def get_shop_layout(self, shop_id) -> List[dict]:
        return self.api.get(f"/shops/{shop_id}/layout")

    def update_shop(self, shop_id, data: dict) -> dict:
        return self.api.put(f"/shops/{shop_id}", data)

    def update_business_hours(self, shop_id, opening_hours: dict) -> dict:
        return self.api.put(f"/shops/{shop_id}/hours", {"opening_hours": opening_hours})


class BarbershopService(_Service):
    """Shop membership: search, create, join requests and barber onboarding."""

    def search_shops(self, query: Optional[str] = None, latitude: Optional[float] = None,
                     longitude: Optional[float] = None, radius: Optional[float] = None) -> List[dict]:
        return self.api.get("/barber-requests/shops/search", {
            "query": query,
            "latitude": latitude,
            "longitude": longitude,
            "radius": radius,
        })

    def create_shop(self, shop_data: dict) -> dict:
        return self.api.post("/barber-requests/shops", shop_data)

    def submit_join_request(self, shop_id, message: str = "", seat_number: Optional[int] = None) -> dict:
        return self.api.post("/barber-requests/submit", {
            "shop_id": shop_id,
            "message": message,
            "seat_number": seat_number,
        })

    def get_incoming_join_requests(self, status: Optional[str] = None) -> List[dict]:
        return self.api.get("/barber-requests/incoming", {"status": status})

    def respond_to_join_request(self, request_id, action: str, seat_number: Optional[int] = None) -> dict:
        return self.api.put(f"/barber-requests/{request_id}/respond", {
            "action": action,
            "seat_number": seat_number,
        })

    def get_my_join_requests(self) -> List[dict]:
        return self.api.get("/barber-requests/my-requests")

    def complete_barber_onboarding(self, data: dict) -> dict:
        """Run the barber onboarding calls for a solo or shop barber.

        ``data`` holds barber_type, specialties and hourly_rate, plus either
        ``new_shop`` or ``requested_shop_id``/``join_message`` for shop barbers.
        """
        profile = {
            "specialties": data["specialties"],
            "hourly_rate": data["hourly_rate"],
            "experience": data.get("experience", ""),
            "completed_onboarding": True,
        }

        if data["barber_type"] == "solo":
            barber = self.api.put("/barbers/profile", {**profile, "is_solo": True})
            return {"barber": barber}

        if data.get("new_shop"):
            shop = self.create_shop(data["new_shop"])
            barber = self.api.put("/barbers/profile", {**profile, "is_solo": False})
            return {"shop": shop, "barber": barber}

        if data.get("requested_shop_id") is not None:
            join_request = self.submit_join_request(data["requested_shop_id"], data.get("join_message", ""))
            barber = self.api.put("/barbers/profile", {**profile, "is_solo": False})
            return {"join_request": join_request, "barber": barber}

        raise ValueError("A shop barber needs either a new shop or a shop to join")


class BookingService(_Service):
    def create_booking(self, barber_id, booking_date: str, services: Optional[List[dict]] = None,
                       shop_id=None, notes: str = "") -> dict:
        return self.api.post("/bookings", {
            "barber_id": barber_id,
            "shop_id": shop_id,
            "services": services or [],
            "booking_date": booking_date,
            "notes": notes,
        })

    def get_booking_details(self, booking_id) -> dict:
        return self.api.get(f"/bookings/{booking_id}")

    def get_user_bookings(self, status: Optional[str] = None) -> List[dict]:
        return self.api.get("/customers/bookings", {"status": status})

    def cancel_booking(self, booking_id, reason: Optional[str] = None) -> dict:
        return self.api.patch(f"/bookings/{booking_id}/cancel", {"reason": reason})

    def confirm_booking(self, booking_id) -> dict:
        return self.api.patch(f"/bookings/{booking_id}/confirm")

    def complete_booking(self, booking_id, notes: Optional[str] = None) -> dict:
        return self.api.patch(f"/bookings/{booking_id}/complete", {"notes": notes})

    def rate_booking(self, booking_id, rating: int, comment: str = "") -> dict:
        return self.api.post(f"/bookings/{booking_id}/rate", {"rating": rating, "comment": comment})

    def pay_for_booking(self, booking_id, payment_method: str = "wallet") -> dict:
        return self.api.post("/payments/booking/pay", {"booking_id": booking_id, "payment_method": payment_method})


class PaymentService(_Service):
    def get_wallet_balance(self) -> dict:
        return self.api.get("/payments/wallet/balance")

    def fund_wallet(self, amount: float, payment_method: str = "card") -> dict:
        return self.api.post("/payments/wallet/fund", {"amount": amount, "payment_method": payment_method})

    def pay_for_booking(self, booking_id, payment_method: str = "wallet") -> dict:
        return self.api.post("/payments/booking/pay", {"booking_id": booking_id, "payment_method": payment_method})

    def get_transaction_history(self, type: Optional[str] = None, page: int = 1, limit: int = 20) -> List[dict]:
        return self.api.get("/payments/transactions", {"type": type, "page": page, "limit": limit})

    def verify_payment(self, reference: str) -> dict:
        return self.api.get(f"/payments/verify/{reference}")

    def handle_paystack_callback(self, reference: str) -> dict:
        """Verify a returning payment; refresh the balance after a deposit."""
        result = self.verify_payment(reference)
        if result["transaction"]["type"] == "deposit":
            result["wallet"] = self.get_wallet_balance()
        return result


class NotificationService(_Service):
    def get_user_notifications(self, page: int = 1, limit: int = 20, read: Optional[bool] = None) -> List[dict]:
        return self.api.get("/notifications", {"page": page, "limit": limit, "read": read})

    def get_unread_count(self) -> int:
        return self.api.get("/notifications/unread-count")["count"]

    def mark_as_read(self, notification_id) -> dict:
        return self.api.patch(f"/notifications/{notification_id}/read")

    def mark_all_as_read(self) -> dict:
        return self.api.patch("/notifications/read-all")

    def register_push_token(self, token: str, platform: str = "web") -> dict:
        return self.api.post("/notifications/push-token", {"token": token, "platform": platform})

    def unregister_push_token(self, token: str) -> Any:
        return self.api.delete("/notifications/push-token", {"token": token})


class Barberzon:
    """All services sharing one ApiClient session."""

    def __init__(self, api: Optional[ApiClient] = None, **kwargs):
        self.api = api if api is not None else ApiClient(**kwargs)
        self.auth = AuthService(self.api)
        self.customers = CustomerService(self.api)
        self.barbers = BarberService(self.api)
        self.shops = ShopService(self.api)
        self.barbershops = BarbershopService(self.api)
        self.bookings = BookingService(self.api)
        self.payments = PaymentService(self.api)
        self.notifications = NotificationService(self.api)
