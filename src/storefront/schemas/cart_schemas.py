from marshmallow import EXCLUDE, Schema, fields, post_load, validate

from storefront.models.cart import CartLine


class CartLineSchema(Schema):
    """Stored cart line: {"itemId": str, "quantity": int}"""

    class Meta:
        unknown = EXCLUDE

    item_id = fields.Str(required=True, data_key="itemId", validate=validate.Length(min=1))
    quantity = fields.Int(required=True, strict=True, validate=validate.Range(min=1))

    @post_load
    def make_line(self, data, **kwargs):
        return CartLine(**data)


# Snapshot of the whole cart, in cart order
cart_snapshot_schema = CartLineSchema(many=True)
