"""Domain errors raised by the pet store service layer.

Each class maps to one HTTP status; the central handler renders the message
into the standard error envelope.
"""

from http import HTTPStatus

from libs.common.exceptions import AppError


class PetStoreError(AppError):
    """Base class for pet store domain errors."""


# Not found (404)


class NotFoundError(PetStoreError):
    status_code = HTTPStatus.NOT_FOUND


class PetNotFound(NotFoundError):
    pass


class CategoryNotFound(NotFoundError):
    pass


class UserNotFound(NotFoundError):
    pass


class AddressNotFound(NotFoundError):
    pass


class OrderNotFound(NotFoundError):
    pass


class DiscountNotFound(NotFoundError):
    pass


class UserCartNotFound(NotFoundError):
    pass


class CartItemNotFound(NotFoundError):
    pass


# Conflicts (409)


class ConflictError(PetStoreError):
    status_code = HTTPStatus.CONFLICT


class PetAlreadySold(ConflictError):
    pass


class PetAlreadyInCart(ConflictError):
    pass


class PetInUse(ConflictError):
    pass


class CategoryAlreadyExists(ConflictError):
    pass


class CategoryInUse(ConflictError):
    pass


class DiscountAlreadyExists(ConflictError):
    pass


class DiscountInUse(ConflictError):
    pass


class EmailAlreadyInUse(ConflictError):
    pass


class UserInUse(ConflictError):
    pass


class AddressInUse(ConflictError):
    pass


class OrderStatusConflict(ConflictError):
    pass


class InvalidDeliveryTransition(ConflictError):
    pass


# Bad requests (400)


class BadRequestError(PetStoreError):
    status_code = HTTPStatus.BAD_REQUEST
    error = "Validation Failed"


class CartEmpty(BadRequestError):
    pass


class InvalidDiscount(BadRequestError):
    pass


class InvalidPayment(BadRequestError):
    pass


class UnsupportedPaymentType(BadRequestError):
    pass


class UnsupportedPayment(BadRequestError):
    pass


class InvalidPet(BadRequestError):
    pass


class InvalidCategory(BadRequestError):
    pass


class InvalidUser(BadRequestError):
    pass


# Auth (401/403)


class AuthenticationFailed(PetStoreError):
    status_code = HTTPStatus.UNAUTHORIZED


class AccessDenied(PetStoreError):
    status_code = HTTPStatus.FORBIDDEN


class OrderOwnership(AccessDenied):
    pass
