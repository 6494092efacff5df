from flask import Blueprint, abort, flash, jsonify, redirect, render_template, request, url_for
from flask_login import current_user, login_required

from ..forms import FormError, parse_date, parse_transaction_form, parse_transaction_type
from ..repository import TransactionFilter
from ..services import get_services
from ..viewmodels import TransactionHistory

bp = Blueprint('transactions', __name__, url_prefix='/transactions')

INVALID_CATEGORY = 'Please select a valid category'


def _categories():
    return get_services().uow.categories.get_all()


def _is_category(category_id):
    return get_services().uow.categories.exists(id=category_id)


def _optional_date(name):
    raw = request.args.get(name, '').strip()
    if not raw:
        return None
    try:
        return parse_date(raw)
    except ValueError:
        flash(f'Ignoring invalid {name.replace("_", " ")}: {raw}', 'warning')
        return None


@bp.route('')
@login_required
def index():
    filters = TransactionFilter(
        start_date=_optional_date('start_date'),
        end_date=_optional_date('end_date'),
        category_id=request.args.get('category_id', type=int),
        type=parse_transaction_type(request.args.get('type')),
    )
    history = TransactionHistory(
        transactions=get_services().transactions.search(current_user.id, filters),
        categories=_categories(),
        start_date=filters.start_date,
        end_date=filters.end_date,
        category_id=filters.category_id,
        type=filters.type,
    )
    return render_template('transactions/index.html', history=history)


@bp.route('/create', methods=['GET', 'POST'])
@login_required
def create():
    if request.method == 'POST':
        try:
            data = parse_transaction_form(request.form)
        except FormError as e:
            for message in e.errors:
                flash(message, 'danger')
            return render_template('transactions/form.html', form=request.form,
                                   categories=_categories(), transaction=None)

        if not _is_category(data.category_id):
            flash(INVALID_CATEGORY, 'danger')
            return render_template('transactions/form.html', form=request.form,
                                   categories=_categories(), transaction=None)

        if not get_services().transactions.create_transaction(data, current_user.id):
            flash('Failed to create transaction', 'danger')
            return render_template('transactions/form.html', form=request.form,
                                   categories=_categories(), transaction=None)

        flash('Transaction added successfully!', 'success')
        return redirect(url_for('transactions.index'))

    return render_template('transactions/form.html', form={}, categories=_categories(),
                           transaction=None)


@bp.route('/create-ajax', methods=['POST'])
@login_required
def create_ajax():
    try:
        data = parse_transaction_form(request.get_json(silent=True) or request.form)
    except FormError as e:
        return jsonify({'success': False, 'message': 'Invalid data', 'errors': e.errors}), 400

    if not _is_category(data.category_id):
        return jsonify({'success': False, 'message': 'Invalid data',
                        'errors': [INVALID_CATEGORY]}), 400

    if get_services().transactions.create_transaction(data, current_user.id):
        return jsonify({'success': True, 'message': 'Transaction added successfully!'})
    return jsonify({'success': False, 'message': 'Failed to add transaction'})


@bp.route('/<int:transaction_id>/edit', methods=['GET', 'POST'])
@login_required
def edit(transaction_id):
    service = get_services().transactions
    transaction = service.get_by_id(transaction_id, current_user.id)
    if transaction is None:
        abort(404)

    if request.method == 'POST':
        try:
            data = parse_transaction_form(request.form)
        except FormError as e:
            for message in e.errors:
                flash(message, 'danger')
            return render_template('transactions/form.html', form=request.form,
                                   categories=_categories(), transaction=transaction)

        if not _is_category(data.category_id):
            flash(INVALID_CATEGORY, 'danger')
            return render_template('transactions/form.html', form=request.form,
                                   categories=_categories(), transaction=transaction)

        if not service.update_transaction(transaction_id, data, current_user.id):
            flash('Failed to update transaction', 'danger')
            return render_template('transactions/form.html', form=request.form,
                                   categories=_categories(), transaction=transaction)

        flash('Transaction updated successfully!', 'success')
        return redirect(url_for('transactions.index'))

    form = {
        'description': transaction.description,
        'amount': transaction.amount,
        'category_id': transaction.category_id,
        'type': transaction.type.value,
        'date': transaction.date.isoformat(),
    }
    return render_template('transactions/form.html', form=form, categories=_categories(),
                           transaction=transaction)


@bp.route('/<int:transaction_id>/delete', methods=['POST'])
@login_required
def delete(transaction_id):
    if get_services().transactions.delete_transaction(transaction_id, current_user.id):
        return jsonify({'success': True, 'message': 'Transaction deleted successfully!'})
    return jsonify({'success': False, 'message': 'Failed to delete transaction'})
