"""
Test suite for currency module

Tests fixed-point Money arithmetic and the decimal boundary conversions.
"""

import pytest
from decimal import Decimal

from payments_engine.currency import Money, SCALE, DECIMAL_PLACES, decimal_from_string


class TestMoney:
    """Test Money class operations"""
    
    def test_money_creation(self):
        """Test Money object creation and validation"""
        money = Money(12345)
        assert money.units == 12345
        assert Money().units == 0
        assert Money.zero().is_zero()
        assert SCALE == 10000
        assert DECIMAL_PLACES == 4
    
    def test_non_integer_units_rejected(self):
        """Test that only integer units are accepted"""
        with pytest.raises(TypeError):
            Money(1.5)
        with pytest.raises(TypeError):
            Money(Decimal('1'))
        with pytest.raises(TypeError):
            Money(True)
    
    def test_money_arithmetic(self):
        """Test Money arithmetic operations"""
        money1 = Money.from_decimal('100.50')
        money2 = Money.from_decimal('50.25')
        
        assert (money1 + money2).to_decimal() == Decimal('150.75')
        assert (money1 - money2).to_decimal() == Decimal('50.25')
        assert (money2 - money1).to_decimal() == Decimal('-50.25')
        assert (-money1).units == -1005000
    
    def test_arithmetic_with_other_types_fails(self):
        """Test that Money only combines with Money"""
        with pytest.raises(TypeError):
            Money(1) + 1
        with pytest.raises(TypeError):
            Money(1) - Decimal('1')
    
    def test_money_comparisons(self):
        """Test Money comparison operations"""
        small = Money.from_decimal('1.0001')
        large = Money.from_decimal('1.0002')
        
        assert small < large
        assert large > small
        assert small <= Money(10001)
        assert large >= small
        assert small == Money(10001)
        assert small != large
    
    def test_money_predicates(self):
        """Test Money state checks"""
        assert Money(0).is_zero()
        assert Money(1).is_positive()
        assert Money(-1).is_negative()
        assert not Money(-1).is_positive()
    
    def test_money_is_immutable(self):
        """Test that Money cannot be modified"""
        money = Money(1)
        with pytest.raises(AttributeError):
            money.units = 2
    
    def test_money_is_hashable(self):
        """Test Money can be used as a dict key"""
        assert len({Money(1), Money(1), Money(2)}) == 2


class TestDecimalConversion:
    """Test conversion at the system boundary"""
    
    def test_from_decimal(self):
        """Test scaling decimal amounts to units"""
        assert Money.from_decimal(Decimal('1000')).units == 10000000
        assert Money.from_decimal('2.5').units == 25000
        assert Money.from_decimal(3).units == 30000
        assert Money.from_decimal('0.0001').units == 1
    
    def test_from_decimal_truncates_extra_digits(self):
        """Test that digits past the fourth are dropped, not rounded"""
        assert Money.from_decimal('1.99999').units == 19999
        assert Money.from_decimal('0.00009').units == 0
        assert Money.from_decimal('-1.99999').units == -19999
    
    def test_from_decimal_rejects_non_finite(self):
        """Test that NaN and infinity are rejected"""
        with pytest.raises(ValueError):
            Money.from_decimal(Decimal('NaN'))
        with pytest.raises(ValueError):
            Money.from_decimal('Infinity')
    
    def test_from_decimal_rejects_out_of_range(self):
        """Test amounts too large for 64-bit units are rejected"""
        with pytest.raises(ValueError, match="out of range"):
            Money.from_decimal('1e999999')
        with pytest.raises(ValueError, match="out of range"):
            Money.from_decimal(Decimal('-1e999999'))
        with pytest.raises(ValueError, match="out of range"):
            Money.from_decimal('922337203685477.5808')
        
        assert Money.from_decimal('922337203685477.5807').units == 2 ** 63 - 1
    
    def test_to_decimal(self):
        """Test conversion back to decimal"""
        assert Money(10000000).to_decimal() == Decimal('1000.0000')
        assert str(Money(1).to_decimal()) == '0.0001'
        assert str(Money(-25000).to_decimal()) == '-2.5000'
    
    def test_to_string(self):
        """Test output formatting with four fractional digits"""
        assert Money.from_decimal('1000').to_string() == '1000.0000'
        assert Money(0).to_string() == '0.0000'
        assert Money.from_decimal('1.5').to_string() == '1.5000'
        assert str(Money(123456)) == '12.3456'


class TestDecimalFromString:
    """Test the strict boundary parser"""
    
    def test_valid_strings(self):
        """Test parsing valid numeric strings"""
        assert decimal_from_string('1.5') == Decimal('1.5')
        assert decimal_from_string('  42  ') == Decimal('42')
        assert decimal_from_string('-0.25') == Decimal('-0.25')
    
    def test_invalid_strings(self):
        """Test that garbage is rejected"""
        with pytest.raises(ValueError, match="non-empty string"):
            decimal_from_string('')
        with pytest.raises(ValueError, match="non-empty string"):
            decimal_from_string('   ')
        with pytest.raises(ValueError, match="Cannot convert"):
            decimal_from_string('abc')
        with pytest.raises(ValueError, match="Cannot convert"):
            decimal_from_string('1,000.00')
