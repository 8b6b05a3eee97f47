"""Tests for the payment method catalogue."""

import pytest
from payments.methods import COD_FEE, PaymentMethod, calculate_total, method_fee, payment_methods


class TestPaymentMethods:
    def test_online_listed_first(self):
        assert [option.method for option in payment_methods()] == [PaymentMethod.ONLINE, PaymentMethod.COD]

    def test_every_method_enabled(self):
        assert all(option.enabled for option in payment_methods())

    def test_cod_fee(self):
        assert COD_FEE == 50
        assert method_fee(PaymentMethod.COD) == 50
        assert method_fee(PaymentMethod.ONLINE) == 0

    def test_calculate_total(self):
        assert calculate_total(2000, PaymentMethod.COD) == 2050
        assert calculate_total(2000, "ONLINE") == 2000

    def test_unknown_method(self):
        with pytest.raises(ValueError):
            calculate_total(2000, "CHEQUE")
