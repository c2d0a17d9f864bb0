"""
Product Modal
=============

One editing buffer behind the create, edit and delete dialogs.

The buffer is a disposable copy of a product. Nothing in it reaches the
product list until confirm() has gone through the API and the list has been
refetched.
"""

import copy
import logging

from .logging_service import LoggingService
from .models import MAX_IMAGES, SCALAR_FIELDS, ModalMode, empty_product

logger = logging.getLogger(__name__)


class FlagModalPresenter:
    """Presenter that just remembers whether the dialog should be showing"""

    def __init__(self, visible=False):
        self.visible = visible

    def show(self):
        self.visible = True

    def hide(self):
        self.visible = False


class ModalFormController:
    """
    Modal state machine: closed -> create/edit/delete -> closed.

    The presenter is anything with show() and hide(); the controller calls it
    on open and close and never looks at it otherwise.
    """

    TITLES = {
        ModalMode.CREATE: 'New product',
        ModalMode.EDIT: 'Edit product',
        ModalMode.DELETE: 'Delete product',
    }

    def __init__(self, product_store, presenter=None, state=None):
        self.product_store = product_store
        self.presenter = presenter or FlagModalPresenter()
        self.mode = ModalMode.CLOSED
        self.buffer = empty_product()
        self.generation = 0

        if state:
            self._load_state(state)

    # State

    def _load_state(self, state):
        mode = state.get('mode') or ModalMode.CLOSED
        self.mode = mode if mode in ModalMode.ALL else ModalMode.CLOSED
        self.generation = int(state.get('generation') or 0)

        buffer = empty_product()
        buffer.update(copy.deepcopy(state.get('buffer') or {}))
        buffer['imagesUrl'] = list(buffer.get('imagesUrl') or [])
        self.buffer = buffer

    def to_state(self):
        return {
            'mode': self.mode,
            'buffer': copy.deepcopy(self.buffer),
            'generation': self.generation,
        }

    @property
    def is_open(self):
        return self.mode != ModalMode.CLOSED

    @property
    def is_create(self):
        return self.mode == ModalMode.CREATE

    @property
    def is_edit(self):
        return self.mode == ModalMode.EDIT

    @property
    def is_delete(self):
        return self.mode == ModalMode.DELETE

    @property
    def title(self):
        return self.TITLES.get(self.mode, '')

    @property
    def images(self):
        return self.buffer['imagesUrl']

    @property
    def can_add_image(self):
        images = self.images
        return len(images) < MAX_IMAGES and (not images or images[-1] != '')

    @property
    def can_remove_image(self):
        return len(self.images) > 1

    # Transitions

    def open(self, product, mode):
        if mode not in ModalMode.ALL:
            raise ValueError(f"Unknown modal mode: {mode!r}")

        buffer = empty_product()
        if product:
            buffer.update(copy.deepcopy(product))
        if mode == ModalMode.CREATE:
            buffer['id'] = ''
        buffer['imagesUrl'] = list(buffer.get('imagesUrl') or [])

        self.buffer = buffer
        self.mode = mode
        self.generation += 1
        self.presenter.show()

    def close(self):
        self.mode = ModalMode.CLOSED
        self.buffer = empty_product()
        self.generation += 1
        self.presenter.hide()

    def set_field(self, name, value):
        if self.mode in (ModalMode.CLOSED, ModalMode.DELETE):
            return
        if name not in SCALAR_FIELDS:
            logger.debug("Ignoring modal field %r", name)
            return
        self.buffer[name] = value

    def change_image(self, index, value):
        images = list(self.images)
        if not 0 <= index <= len(images):
            return

        value = value or ''
        if index == len(images):
            # Typing into the first slot of an empty list
            images.append(value)
        else:
            images[index] = value

        if value != '' and index == len(images) - 1 and len(images) < MAX_IMAGES:
            images.append('')
        elif value == '' and len(images) > 1 and images[-1] == '':
            images.pop()

        self.buffer['imagesUrl'] = images

    def add_image(self):
        if len(self.images) >= MAX_IMAGES:
            return
        self.buffer['imagesUrl'] = self.images + ['']

    def remove_image(self):
        if len(self.images) <= 1:
            return
        self.buffer['imagesUrl'] = self.images[:-1]

    def confirm(self):
        """
        Send the buffer to the service according to the mode.

        On success the dialog closes and the product list is refetched; on
        failure the dialog and buffer are left as they were. Returns the
        store's {'success': ..., 'error': ...} result.
        """
        mode = self.mode
        generation = self.generation
        buffer = copy.deepcopy(self.buffer)
        store = self.product_store

        if mode == ModalMode.DELETE:
            result = store.delete(buffer.get('id'))
        elif mode == ModalMode.EDIT:
            result = store.update(buffer.get('id'), buffer)
        elif mode == ModalMode.CREATE:
            result = store.create(buffer)
        else:
            return {'success': False, 'error': 'Nothing to confirm'}

        if not result.get('success'):
            return result

        if self.generation == generation:
            self.close()
        else:
            LoggingService.debug('modal', 'Modal reopened while saving; keeping the newer buffer', {'mode': mode})

        store.fetch_all()
        return result
