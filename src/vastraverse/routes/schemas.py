from marshmallow import EXCLUDE, Schema, fields, post_load, pre_load, validate, validates, ValidationError

from vastraverse.models.order import ORDER_STATUSES, PAYMENT_STATUSES
from vastraverse.models.product import COLLECTIONS
from vastraverse.utils.validators import ValidationUtils

NonBlank = validate.Length(min=1)
PriceRange = validate.Range(max=ValidationUtils.MAX_PRICE)
StockRange = validate.Range(min=0, max=ValidationUtils.MAX_STOCK)
IdRange = validate.Range(min=1, max=ValidationUtils.MAX_ID)


class BaseSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    @pre_load
    def strip_strings(self, data, **kwargs):
        if not isinstance(data, dict):
            return data
        return {k: v.strip() if isinstance(v, str) else v for k, v in data.items()}


def _normalize(email: str) -> str:
    try:
        return ValidationUtils.normalize_email(email)
    except ValueError as e:
        raise ValidationError(str(e))


def _check_phone(value: str) -> None:
    if not ValidationUtils.is_valid_phone(value):
        raise ValidationError("Invalid phone number.")


# ---------------------------------------------------------------------- #
# Auth                                                                     #
# ---------------------------------------------------------------------- #

class RegisterSchema(BaseSchema):
    name = fields.Str(required=True, validate=NonBlank)
    email = fields.Email(required=True)
    password = fields.Str(
        required=True,
        validate=validate.Length(
            min=ValidationUtils.MIN_PASSWORD_LENGTH,
            max=ValidationUtils.MAX_PASSWORD_LENGTH,
        ),
    )
    phone = fields.Str(required=True, validate=NonBlank)
    address = fields.Str(required=True, validate=NonBlank)

    @validates("phone")
    def validate_phone(self, value, **kwargs):
        _check_phone(value)

    @post_load
    def normalize(self, data, **kwargs):
        data["email"] = _normalize(data["email"])
        return data


class LoginSchema(BaseSchema):
    email = fields.Email(required=True)
    password = fields.Str(required=True, validate=NonBlank)

    @post_load
    def normalize(self, data, **kwargs):
        data["email"] = _normalize(data["email"])
        return data


class ProfileUpdateSchema(BaseSchema):
    name = fields.Str(validate=NonBlank)
    phone = fields.Str(validate=NonBlank)
    address = fields.Str(validate=NonBlank)

    @validates("phone")
    def validate_phone(self, value, **kwargs):
        _check_phone(value)


# ---------------------------------------------------------------------- #
# Products                                                                 #
# ---------------------------------------------------------------------- #

class ProductSchema(BaseSchema):
    name = fields.Str(required=True, validate=NonBlank)
    description = fields.Str(required=True, validate=NonBlank)
    price = fields.Float(required=True, allow_nan=False, validate=PriceRange)
    category = fields.Str(required=True, validate=NonBlank)
    image = fields.Str(required=True, validate=NonBlank)
    stock = fields.Int(load_default=0, validate=StockRange)
    rating = fields.Float(load_default=0, validate=validate.Range(min=0, max=5))
    sizes = fields.List(fields.Str(validate=NonBlank), load_default=list)
    brand = fields.Str(validate=NonBlank)
    collection = fields.Str(allow_none=True, load_default=None, validate=validate.OneOf(COLLECTIONS))


class ProductUpdateSchema(ProductSchema):
    """Every field optional; nothing defaults, so absent fields stay untouched."""
    stock = fields.Int(validate=StockRange)
    rating = fields.Float(validate=validate.Range(min=0, max=5))
    sizes = fields.List(fields.Str(validate=NonBlank))
    collection = fields.Str(allow_none=True, validate=validate.OneOf(COLLECTIONS))


class ProductQuerySchema(BaseSchema):
    category = fields.Str(validate=NonBlank)
    collection = fields.Str(validate=validate.OneOf(COLLECTIONS))
    limit = fields.Int(validate=validate.Range(min=1, max=ValidationUtils.MAX_ID))
    offset = fields.Int(load_default=0, validate=validate.Range(min=0, max=ValidationUtils.MAX_ID))


class StockUpdateSchema(BaseSchema):
    quantity = fields.Int(
        required=True, strict=True, validate=validate.Range(min=1, max=ValidationUtils.MAX_STOCK)
    )


# ---------------------------------------------------------------------- #
# Orders                                                                   #
# ---------------------------------------------------------------------- #

class OrderLineSchema(BaseSchema):
    product_id = fields.Int(required=True, strict=True, validate=IdRange)
    product_name = fields.Str(required=True, validate=NonBlank)
    product_price = fields.Float(
        required=True,
        allow_nan=False,
        validate=validate.Range(min=0, min_inclusive=False, max=ValidationUtils.MAX_PRICE),
    )
    product_image = fields.Str(load_default="")
    quantity = fields.Int(
        load_default=1, strict=True, validate=validate.Range(min=1, max=ValidationUtils.MAX_ORDER_QUANTITY)
    )
    collection = fields.Str(allow_none=True, load_default=None, validate=validate.OneOf(COLLECTIONS))


class OrderCreateSchema(BaseSchema):
    user_name = fields.Str(required=True, validate=NonBlank)
    user_email = fields.Email(required=True)
    user_phone = fields.Str(required=True, validate=NonBlank)
    location = fields.Str(required=True, validate=NonBlank)
    products = fields.List(fields.Nested(OrderLineSchema), required=True)

    @post_load
    def normalize(self, data, **kwargs):
        data["user_email"] = _normalize(data["user_email"])
        return data


class OrderStatusSchema(BaseSchema):
    order_status = fields.Str(validate=validate.OneOf(ORDER_STATUSES))
    payment_status = fields.Str(validate=validate.OneOf(PAYMENT_STATUSES))


# ---------------------------------------------------------------------- #
# Cart / wishlist                                                          #
# ---------------------------------------------------------------------- #

class CartAddSchema(BaseSchema):
    productId = fields.Int(required=True, strict=True, validate=IdRange)
    quantity = fields.Int(load_default=1, strict=True, validate=validate.Range(min=1, max=99))


class CartUpdateSchema(BaseSchema):
    productId = fields.Int(required=True, strict=True, validate=IdRange)
    quantity = fields.Int(required=True, strict=True, validate=validate.Range(min=0, max=99))


class WishlistItemSchema(BaseSchema):
    productId = fields.Int(required=True, strict=True, validate=IdRange)
