from barberzon.onboarding import (
    BarberOnboardingForm,
    NewShopData,
    OnboardingForm,
    can_proceed_barber_step,
    can_proceed_from_step,
    total_steps,
    validate_onboarding,
)


def customer_form(**kwargs):
    return OnboardingForm(role="customer", full_name="Ada Obi", phone_number="0801", **kwargs)


def barber_form(**kwargs):
    values = dict(role="barber", full_name="Tunde", phone_number="0802", specialties=["fade"], hourly_rate=5000)
    values.update(kwargs)
    return OnboardingForm(**values)


def test_step_counts():
    assert total_steps("customer") == 4
    assert total_steps("barber") == 5
    assert total_steps(None) == 5


def test_step_one_needs_role_name_and_phone():
    assert can_proceed_from_step(1, customer_form())
    assert not can_proceed_from_step(1, OnboardingForm(full_name="Ada", phone_number="0801"))
    assert not can_proceed_from_step(1, customer_form().model_copy(update={"full_name": "   "}))


def test_barber_needs_specialties_and_rate():
    assert can_proceed_from_step(3, barber_form())
    assert not can_proceed_from_step(3, barber_form(specialties=[]))
    assert not can_proceed_from_step(3, barber_form(hourly_rate=0))
    assert can_proceed_from_step(3, customer_form())


def test_new_shop_needs_name_and_address():
    assert not can_proceed_from_step(4, barber_form(is_new_shop=True, shop_name="Fresh"))
    assert can_proceed_from_step(4, barber_form(is_new_shop=True, shop_name="Fresh", shop_address="Ikeja"))
    assert can_proceed_from_step(4, barber_form())


def test_step_five_is_barber_only():
    assert can_proceed_from_step(5, barber_form())
    assert not can_proceed_from_step(5, customer_form())
    assert not can_proceed_from_step(6, barber_form())


def test_validate_onboarding_reports_first_failing_step():
    assert validate_onboarding(customer_form()) is None
    assert validate_onboarding(barber_form()) is None
    assert validate_onboarding(barber_form(hourly_rate=None)) == 3
    assert validate_onboarding(OnboardingForm()) == 1


def test_barber_wizard_steps():
    form = BarberOnboardingForm()
    assert not can_proceed_barber_step(1, form)

    solo = BarberOnboardingForm(barber_type="solo")
    assert can_proceed_barber_step(1, solo)
    assert can_proceed_barber_step(2, solo)

    shop = BarberOnboardingForm(barber_type="shop")
    assert not can_proceed_barber_step(2, shop)
    assert can_proceed_barber_step(2, shop.model_copy(update={"selected_shop_id": 3}))
    assert can_proceed_barber_step(2, shop.model_copy(update={
        "new_shop": NewShopData(name="Fresh", address="Ikeja"),
    }))

    assert not can_proceed_barber_step(3, solo)
    assert can_proceed_barber_step(3, solo.model_copy(update={"specialties": ["fade"], "hourly_rate": 4000}))
    assert can_proceed_barber_step(4, solo)
