import pytest

from checkout.services.fees import FeeCalculator


@pytest.mark.parametrize(
    "subtotal, fee, net",
    [
        (2000, 300, 1700),
        (3550, 533, 3017),  # 532.5 -> 533
        (0, 0, 0),
        (1, 0, 1),
        (10, 2, 8),  # 1.5 -> 2
    ],
)
def test_fifteen_percent_rounds_half_up(subtotal, fee, net):
    breakdown = FeeCalculator(15).calculate(subtotal)

    assert breakdown.subtotal_cents == subtotal
    assert breakdown.platform_fee_cents == fee
    assert breakdown.net_to_seller_cents == net


def test_fee_and_net_always_add_up_to_subtotal():
    calc = FeeCalculator("12.5")
    for subtotal in range(0, 5000, 7):
        b = calc.calculate(subtotal)
        assert b.platform_fee_cents + b.net_to_seller_cents == subtotal
        assert isinstance(b.platform_fee_cents, int)


def test_same_input_same_result():
    calc = FeeCalculator(15)
    assert calc.calculate(3550) == calc.calculate(3550)
    assert FeeCalculator(15).calculate(3550) == FeeCalculator("15").calculate(3550)


def test_fractional_rate():
    # 1001 * 12.5% = 125.125
    assert FeeCalculator("12.5").calculate(1001).platform_fee_cents == 125


def test_zero_rate_sends_everything_to_seller():
    b = FeeCalculator(0).calculate(4999)
    assert b.platform_fee_cents == 0
    assert b.net_to_seller_cents == 4999


@pytest.mark.parametrize("bad", [-1, 10.5, "100", True, None])
def test_rejects_non_integer_or_negative_subtotal(bad):
    with pytest.raises(ValueError):
        FeeCalculator(15).calculate(bad)


@pytest.mark.parametrize("rate", [-1, 101])
def test_rejects_rate_out_of_range(rate):
    with pytest.raises(ValueError):
        FeeCalculator(rate)
