"""
Product Store
=============

The console's copy of the catalog. The list only ever changes by a full
refetch from the service; create/update/delete go straight to the API and the
caller refetches afterwards, so server-assigned fields are never guessed.
"""

import logging

from .api_client import ApiError
from .logging_service import LoggingService
from .models import normalize_for_wire, product_from_wire

logger = logging.getLogger(__name__)


class ProductStore:

    def __init__(self, gateway):
        self.gateway = gateway
        self.products = []
        self.is_loading = False
        self.error = None

    def get(self, product_id):
        if not product_id:
            return None
        for product in self.products:
            if product.get('id') == product_id:
                return product
        return None

    def fetch_all(self):
        """Replace the list with the service's; keep the old list on failure"""
        self.is_loading = True
        self.error = None
        try:
            raw = self.gateway.list_products()
            products = [product_from_wire(item) for item in raw if isinstance(item, dict)]
        except ApiError as e:
            self.error = e.message
            LoggingService.error('products', 'Failed to fetch products', {'error': e.message, 'status': e.status_code})
            return {'success': False, 'error': e.message}
        finally:
            self.is_loading = False

        if len(products) != len(raw):
            LoggingService.warning('products', 'Skipped malformed product entries', {
                'received': len(raw),
                'kept': len(products),
            })

        self.products = products
        return {'success': True}

    def _mutate(self, action, call, *args):
        self.is_loading = True
        self.error = None
        try:
            response = call(*args)
        except ApiError as e:
            self.error = e.message
            LoggingService.error('products', f'Failed to {action} product', {
                'error': e.message,
                'status': e.status_code,
                'error_type': type(e).__name__,
            })
            return {'success': False, 'error': e.message}
        finally:
            self.is_loading = False

        logger.debug("Product %s acknowledged: %s", action, response)
        LoggingService.log_user_action('products', f'{action} product')
        return {'success': True}

    def create(self, product):
        try:
            payload = normalize_for_wire(product)
        except ApiError as e:
            self.error = e.message
            return {'success': False, 'error': e.message}
        payload.pop('id', None)
        return self._mutate('create', self.gateway.create_product, payload)

    def update(self, product_id, product):
        try:
            payload = normalize_for_wire(product)
        except ApiError as e:
            self.error = e.message
            return {'success': False, 'error': e.message}
        return self._mutate('update', self.gateway.update_product, product_id, payload)

    def delete(self, product_id):
        return self._mutate('delete', self.gateway.delete_product, product_id)
