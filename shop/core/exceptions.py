from __future__ import annotations
from typing import Any, Tuple, Type, Union


class ShopError(Exception):
    """Base class for domain errors raised by the shop services."""


class InvalidArgumentTypeError(ShopError, TypeError):
    """
    A caller passed a payload of the wrong shape, e.g. upload mode without a file.
    Not retryable.
    """

    def __init__(self, argument: str, expected: Union[Type, Tuple[Type, ...]], actual: Any):
        self.argument = argument
        self.expected = expected
        self.actual_type = type(actual)
        if isinstance(expected, tuple):
            expected_name = " | ".join(t.__name__ for t in expected)
        else:
            expected_name = expected.__name__
        super().__init__(
            f"Argument {argument} must be of type {expected_name}, {self.actual_type.__name__} given"
        )


class UnexpectedValueError(ShopError, ValueError):
    pass


class DoesNotExistError(ShopError, LookupError):
    pass


class EnchantmentDoesNotExistError(DoesNotExistError):
    def __init__(self, enchantment_id: Any):
        self.enchantment_id = enchantment_id
        super().__init__(f"Enchantment with id {enchantment_id} does not exist")
