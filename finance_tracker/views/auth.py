from urllib.parse import urlsplit

from flask import Blueprint, flash, redirect, render_template, request, url_for
from flask_login import current_user, login_required, login_user, logout_user

from ..forms import FormError, parse_registration_form
from ..services import get_services

bp = Blueprint('auth', __name__)


def _is_local(target):
    parts = urlsplit(target)
    return bool(target) and not parts.scheme and not parts.netloc and target.startswith('/')


@bp.route('/register', methods=['GET', 'POST'])
def register():
    if current_user.is_authenticated:
        return redirect(url_for('dashboard.index'))

    if request.method == 'POST':
        try:
            data = parse_registration_form(request.form)
        except FormError as e:
            for message in e.errors:
                flash(message, 'danger')
            return render_template('register.html', form=request.form)

        auth = get_services().auth
        if auth.user_exists(data.username, data.email):
            flash('Username or email already exists', 'danger')
            return render_template('register.html', form=request.form)
        if not auth.register(data):
            flash('Registration failed. Please try again.', 'danger')
            return render_template('register.html', form=request.form)

        flash('Registration successful! Please log in.', 'success')
        return redirect(url_for('auth.login'))

    return render_template('register.html', form={})


@bp.route('/login', methods=['GET', 'POST'])
def login():
    next_url = request.values.get('next', '')
    if request.method == 'POST':
        username = (request.form.get('username') or '').strip()
        password = request.form.get('password') or ''
        user = None
        if username and password:
            user = get_services().auth.authenticate(username, password)

        if user is not None:
            login_user(user, remember=bool(request.form.get('remember_me')))
            if _is_local(next_url):
                return redirect(next_url)
            return redirect(url_for('dashboard.index'))
        flash('Invalid username or password', 'danger')
        return render_template('login.html', next=next_url, username=username)

    return render_template('login.html', next=next_url, username='')


@bp.route('/logout')
@login_required
def logout():
    logout_user()
    flash('You have been logged out.', 'info')
    return redirect(url_for('auth.login'))
