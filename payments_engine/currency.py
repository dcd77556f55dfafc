"""
Fixed-Point Money Module

Monetary amounts are stored as signed integers scaled by SCALE, so all
arithmetic inside the engine is exact integer arithmetic. NEVER uses float
for monetary values. Conversion to and from Decimal only happens at the
system boundary.
"""

from decimal import Decimal, DecimalException, InvalidOperation, ROUND_DOWN, localcontext
from dataclasses import dataclass
from typing import Union

# Four fractional digits
DECIMAL_PLACES = 4
SCALE = 10 ** DECIMAL_PLACES

# Units fit a signed 64-bit integer
UNITS_MAX = 2 ** 63 - 1

_QUANTUM = Decimal(1).scaleb(-DECIMAL_PLACES)


@dataclass(frozen=True, order=True)
class Money:
    """
    Immutable fixed-point money value.
    `units` is the amount multiplied by SCALE (1 unit == 0.0001).
    """
    units: int = 0
    
    def __post_init__(self):
        # bool is an int subclass but never a valid amount
        if not isinstance(self.units, int) or isinstance(self.units, bool):
            raise TypeError(f"Money units must be int, got {type(self.units).__name__}")
    
    @classmethod
    def zero(cls) -> 'Money':
        return cls(0)
    
    @classmethod
    def from_decimal(cls, value: Union[Decimal, int, str]) -> 'Money':
        """
        Convert a human decimal amount to fixed-point, truncating any digits
        beyond DECIMAL_PLACES toward zero.
        
        Raises:
            ValueError: If the value is not a finite number or is out of range
        """
        if isinstance(value, str):
            value = decimal_from_string(value)
        elif not isinstance(value, Decimal):
            value = Decimal(value)
        
        if not value.is_finite():
            raise ValueError(f"Cannot convert non-finite amount {value} to Money")
        
        try:
            with localcontext() as ctx:
                ctx.traps[InvalidOperation] = True
                scaled = (value * SCALE).to_integral_value(rounding=ROUND_DOWN)
        except DecimalException as e:
            raise ValueError(f"Amount {value} is out of range") from e
        if abs(scaled) > UNITS_MAX:
            raise ValueError(f"Amount {value} is out of range")
        return cls(int(scaled))
    
    def to_decimal(self) -> Decimal:
        """Exact decimal representation with DECIMAL_PLACES digits"""
        return (Decimal(self.units) / SCALE).quantize(_QUANTUM)
    
    def to_string(self) -> str:
        """Format for output, e.g. '1000.0000'"""
        return f"{self.to_decimal():.{DECIMAL_PLACES}f}"
    
    def __add__(self, other: 'Money') -> 'Money':
        if not isinstance(other, Money):
            return NotImplemented
        return Money(self.units + other.units)
    
    def __sub__(self, other: 'Money') -> 'Money':
        if not isinstance(other, Money):
            return NotImplemented
        return Money(self.units - other.units)
    
    def __neg__(self) -> 'Money':
        return Money(-self.units)
    
    def is_zero(self) -> bool:
        """Check if amount is exactly zero"""
        return self.units == 0
    
    def is_positive(self) -> bool:
        """Check if amount is positive"""
        return self.units > 0
    
    def is_negative(self) -> bool:
        """Check if amount is negative"""
        return self.units < 0
    
    def __str__(self) -> str:
        return self.to_string()


def decimal_from_string(value: str) -> Decimal:
    """
    Strictly convert a boundary string to Decimal
    
    Args:
        value: String representation of number, surrounding whitespace allowed
        
    Returns:
        Decimal value
        
    Raises:
        ValueError: If string cannot be converted to a valid Decimal
    """
    if not isinstance(value, str) or not value.strip():
        raise ValueError("Value must be a non-empty string")
    
    try:
        return Decimal(value.strip())
    except InvalidOperation:
        raise ValueError(f"Cannot convert '{value}' to Decimal") from None
