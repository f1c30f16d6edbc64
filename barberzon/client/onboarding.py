"""Onboarding wizards: step navigation gated by the shared step rules."""

import logging
from abc import ABC, abstractmethod
from typing import Callable, Optional

from ..onboarding import (
    BARBER_WIZARD_STEPS,
    BarberOnboardingForm,
    OnboardingForm,
    can_proceed_barber_step,
    can_proceed_from_step,
    total_steps,
)
from .api import ApiError
from .bookings import log_notifier
from .services import AuthService, BarbershopService

logger = logging.getLogger(__name__)


class _Wizard(ABC):
    def __init__(self, notify: Callable[[str], None] = log_notifier):
        self.step = 1
        self.notify = notify
        self.submitting = False
        self.result: Optional[dict] = None

    @property
    @abstractmethod
    def total_steps(self) -> int:
        ...

    @abstractmethod
    def can_proceed(self) -> bool:
        ...

    @property
    def is_last_step(self) -> bool:
        return self.step == self.total_steps

    def next(self) -> bool:
        if self.is_last_step or not self.can_proceed():
            return False
        self.step += 1
        return True

    def back(self):
        self.step = max(1, self.step - 1)

    @abstractmethod
    def _send(self) -> dict:
        ...

    def submit(self) -> bool:
        if not self.is_last_step or not self.can_proceed():
            return False
        self.submitting = True
        try:
            self.result = self._send()
        except (ApiError, ValueError) as exc:
            message = exc.message if isinstance(exc, ApiError) else str(exc)
            self.notify(f"Failed to complete onboarding: {message}")
            return False
        finally:
            self.submitting = False
        logger.info("Onboarding completed")
        return True


class OnboardingWizard(_Wizard):
    """Unified wizard for customers and barbers; one call on submit."""

    def __init__(self, auth: AuthService, form: Optional[OnboardingForm] = None, **kwargs):
        super().__init__(**kwargs)
        self.auth = auth
        self.form = form if form is not None else OnboardingForm()

    @property
    def total_steps(self) -> int:
        return total_steps(self.form.role)

    def can_proceed(self) -> bool:
        return can_proceed_from_step(self.step, self.form)

    def _send(self) -> dict:
        return self.auth.complete_onboarding(self.form.model_dump())


class BarberOnboardingWizard(_Wizard):
    def __init__(self, barbershops: BarbershopService, form: Optional[BarberOnboardingForm] = None, **kwargs):
        super().__init__(**kwargs)
        self.barbershops = barbershops
        self.form = form if form is not None else BarberOnboardingForm()

    @property
    def total_steps(self) -> int:
        return BARBER_WIZARD_STEPS

    def can_proceed(self) -> bool:
        return can_proceed_barber_step(self.step, self.form)

    def payload(self) -> dict:
        form = self.form
        data = {
            "barber_type": form.barber_type,
            "specialties": form.specialties,
            "hourly_rate": form.hourly_rate,
            "experience": form.experience,
        }
        if form.barber_type == "shop":
            if form.selected_shop_id is not None:
                data["requested_shop_id"] = form.selected_shop_id
                data["join_message"] = form.join_message
            else:
                data["new_shop"] = form.new_shop.model_dump()
        return data

    def _send(self) -> dict:
        return self.barbershops.complete_barber_onboarding(self.payload())
