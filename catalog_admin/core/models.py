"""
Product Models
==============

The product record as exchanged with the product service, the blank template
the modal starts from, and the conversions between form input and wire format.
"""

import copy

from .api_client import ValidationError

MAX_IMAGES = 5


class ModalMode:
    CLOSED = ''
    CREATE = 'create'
    EDIT = 'edit'
    DELETE = 'delete'

    ALL = (CREATE, EDIT, DELETE)


PRODUCT_TEMPLATE = {
    'id': '',
    'title': '',
    'category': '',
    'origin_price': '',
    'price': '',
    'unit': '',
    'description': '',
    'content': '',
    'is_enabled': False,
    'imageUrl': '',
    'imagesUrl': [],
}

# Fields the modal form may set directly; imagesUrl has its own operations
SCALAR_FIELDS = ('title', 'category', 'origin_price', 'price', 'unit',
                 'description', 'content', 'is_enabled', 'imageUrl')

NUMERIC_FIELDS = ('origin_price', 'price')


def empty_product():
    """Fresh copy of the blank product template"""
    return copy.deepcopy(PRODUCT_TEMPLATE)


def to_number(value, field='value'):
    """
    Coerce form input to a number.

    Blank input becomes 0; integral values stay ints so the service gets
    100 rather than 100.0. Negative or non-numeric input raises ValidationError.
    """
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be a number")
    if value is None or (isinstance(value, str) and not value.strip()):
        return 0

    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be a number")

    if number != number or number in (float('inf'), float('-inf')):
        raise ValidationError(f"{field} must be a number")
    if number < 0:
        raise ValidationError(f"{field} cannot be negative")

    return int(number) if number.is_integer() else number


def to_bool(value):
    """Read a boolean from the wire (0/1), a form checkbox ('on'/'true') or a bool"""
    if isinstance(value, str):
        return value.strip().lower() in ('1', 'true', 'on', 'yes')
    return bool(value)


def normalize_for_wire(product, require_title=True):
    """
    Build the payload sent to the product service.

    Prices become numbers, is_enabled becomes 1/0, empty image entries are
    dropped and a blank id is left out entirely.
    """
    payload = {key: product.get(key, default) for key, default in PRODUCT_TEMPLATE.items()}
    payload.update({k: v for k, v in product.items() if k not in payload})

    if require_title and not str(payload.get('title') or '').strip():
        raise ValidationError('Title is required')

    for field in NUMERIC_FIELDS:
        payload[field] = to_number(payload.get(field), field)

    payload['is_enabled'] = 1 if to_bool(payload.get('is_enabled')) else 0
    payload['imagesUrl'] = [url for url in (payload.get('imagesUrl') or []) if url != '']

    if not payload.get('id'):
        payload.pop('id', None)

    return payload


def product_from_wire(data):
    """Turn a product from the service into the shape the console edits"""
    product = empty_product()
    product.update(data or {})

    product['id'] = str(product.get('id') or '')
    for field in ('title', 'category', 'unit', 'description', 'content', 'imageUrl'):
        product[field] = product.get(field) or ''
    product['is_enabled'] = to_bool(product.get('is_enabled'))

    images = product.get('imagesUrl') or []
    if isinstance(images, str):
        images = [images]
    elif not isinstance(images, (list, tuple)):
        images = []
    product['imagesUrl'] = [str(url) for url in images if url is not None]
    return product
