class ConstructionError(ValueError):
    """Raised when a pricing building block is constructed with invalid parameters.

    Covers invalid configurations (non-positive path count, exercise-date count
    or maturity), out-of-range basis-function orders/powers, invalid process
    parameters and empty basis sets. Values are never silently clamped.
    """


class InvalidInputError(ValueError):
    """Raised when a pricing call receives an invalid market input.

    Notes
    -----
    :meth:`LSMPricer.price` rejects a non-positive (or non-finite) spot before
    any path is simulated, so no partial result is ever produced.
    """
