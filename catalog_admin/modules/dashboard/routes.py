"""
Admin Dashboard Routes
======================

Login and logout for the console operator. The credential itself lives in a
cookie issued by the product service; nothing is stored server-side.
"""

from functools import wraps

from flask import render_template, request, redirect, url_for, flash, session, jsonify

from . import dashboard_bp
from ...core.context import get_console, MODAL_SESSION_KEY


def admin_required(f):
    """Decorator to require a valid product-service token"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not get_console().ensure_authenticated():
            if request.accept_mimetypes.best == 'application/json':
                return jsonify({'success': False, 'error': 'Authentication required'}), 401
            return redirect(url_for('admin.login', next=request.path))
        return f(*args, **kwargs)
    return decorated_function


def _safe_next(target):
    """Only follow relative redirects back into the console"""
    if target and target.startswith('/') and not target.startswith('//'):
        return target
    return None


@dashboard_bp.route('/login', methods=['GET', 'POST'])
def login():
    """Admin login route"""
    console = get_console()

    if request.method == 'GET':
        if console.ensure_authenticated():
            return redirect(url_for('products_admin.product_list'))
        return render_template('dashboard/login.html')

    username = request.form.get('username', '').strip()
    password = request.form.get('password', '')

    if not username or not password:
        flash('Please enter both email and password', 'error')
        return render_template('dashboard/login.html', username=username), 400

    result = console.session.login({'username': username, 'password': password})
    if not result['success']:
        flash(result.get('error') or 'Sign-in failed', 'error')
        return render_template('dashboard/login.html', username=username), 401

    flash('Login successful', 'success')
    next_page = _safe_next(request.args.get('next'))
    return redirect(next_page or url_for('products_admin.product_list'))


@dashboard_bp.route('/logout')
def logout():
    """Admin logout route"""
    console = get_console()
    console.session.logout()
    console.modal.close()
    session.pop(MODAL_SESSION_KEY, None)
    flash('You have been logged out', 'info')
    return redirect(url_for('admin.login'))


@dashboard_bp.route('/')
@dashboard_bp.route('/dashboard')
def dashboard():
    """The product table is the console's home page"""
    return redirect(url_for('products_admin.product_list'))
