"""
Products Admin Routes
=====================

Product table plus the create/edit/delete modal. Every modal interaction is a
form post that updates the buffer kept in the Flask session and redirects back
to the table.
"""

from flask import render_template, request, redirect, url_for, jsonify, flash

from . import products_bp
from ..dashboard import admin_required
from ...core.context import get_console
from ...core.logging_service import LoggingService
from ...core.models import MAX_IMAGES, SCALAR_FIELDS, ModalMode


def _back_to_list():
    return redirect(url_for('products_admin.product_list'))


def _apply_form(modal, form):
    """Copy submitted inputs into the modal buffer, as if each had been typed"""
    if not form.get('form_fields'):
        return

    for name in SCALAR_FIELDS:
        if name == 'is_enabled':
            modal.set_field(name, 'is_enabled' in form)
        elif name in form:
            modal.set_field(name, form.get(name, '').strip())

    # Highest slot first: a shrink only ever pops slots already replayed
    submitted = form.getlist('imagesUrl')
    for index in reversed(range(len(submitted))):
        value = submitted[index].strip()
        if index < len(modal.images) and modal.images[index] != value:
            modal.change_image(index, value)


def _is_stale(modal, form):
    """True when the posted form was rendered for an earlier open of the modal"""
    return form.get('generation', type=int) != modal.generation


@products_bp.route('/')
@admin_required
def product_list():
    """Product table with the modal rendered on top when it is open"""
    console = get_console()
    result = console.products.fetch_all()
    if not result['success']:
        flash(result['error'], 'error')

    return render_template(
        'products/products.html',
        products=console.products.products,
        modal=console.modal,
        modal_visible=console.modal.presenter.visible,
        max_images=MAX_IMAGES,
    )


@products_bp.route('/data')
@admin_required
def product_data():
    """Get all products as JSON"""
    console = get_console()
    result = console.products.fetch_all()
    if not result['success']:
        return jsonify({'success': False, 'error': result['error']}), 502
    return jsonify({'success': True, 'products': console.products.products})


@products_bp.route('/modal/open', methods=['POST'])
@admin_required
def open_modal():
    console = get_console()
    mode = request.form.get('mode', '')
    product_id = request.form.get('product_id', '')

    if mode not in ModalMode.ALL:
        flash('Unknown action', 'error')
        return _back_to_list()

    product = None
    if mode != ModalMode.CREATE:
        result = console.products.fetch_all()
        if not result['success']:
            flash(result['error'], 'error')
            return _back_to_list()

        product = console.products.get(product_id)
        if product is None:
            LoggingService.warning('products', 'Modal opened for missing product', {'product_id': product_id})
            flash('Product not found', 'error')
            return _back_to_list()

    console.modal.open(product, mode)
    return _back_to_list()


@products_bp.route('/modal/save', methods=['POST'])
@admin_required
def save_modal():
    """Apply form edits, then the requested modal action"""
    console = get_console()
    modal = console.modal
    if not modal.is_open:
        flash('The product form is no longer open', 'info')
        return _back_to_list()
    if _is_stale(modal, request.form):
        LoggingService.warning('products', 'Stale modal form rejected', {
            'posted': request.form.get('generation'),
            'current': modal.generation,
            'mode': modal.mode,
        })
        flash('This form is out of date', 'error')
        return _back_to_list()

    _apply_form(modal, request.form)
    action = request.form.get('action', 'apply')

    if action == 'add_image':
        modal.add_image()
    elif action == 'remove_image':
        modal.remove_image()
    elif action == 'confirm':
        mode = modal.mode
        result = modal.confirm()
        if result['success']:
            flash({
                ModalMode.CREATE: 'Product created',
                ModalMode.EDIT: 'Product updated',
                ModalMode.DELETE: 'Product deleted',
            }[mode], 'success')
        else:
            flash(result.get('error') or 'The operation failed', 'error')

    return _back_to_list()


@products_bp.route('/modal/close', methods=['POST'])
@admin_required
def close_modal():
    modal = get_console().modal
    if not modal.is_open:
        return _back_to_list()
    if _is_stale(modal, request.form):
        flash('This form is out of date', 'error')
        return _back_to_list()
    modal.close()
    return _back_to_list()
