from datetime import date

from flask import Blueprint, abort, flash, jsonify, redirect, render_template, request, url_for
from flask_login import current_user, login_required

from ..forms import FormError, parse_budget_form
from ..services import get_services
from ..services.budgets import BUDGET_CATEGORY_TYPES

bp = Blueprint('budgets', __name__, url_prefix='/budgets')

INVALID_CATEGORY = 'Please select a valid expense category'


def _budget_categories():
    """Only categories that can carry spending get a budget."""
    return [c for c in get_services().uow.categories.get_all()
            if c.type in BUDGET_CATEGORY_TYPES]


def _is_budget_category(category_id):
    return any(c.id == category_id for c in _budget_categories())


def _render_form(form, budget=None):
    return render_template('budgets/form.html', form=form, categories=_budget_categories(),
                           budget=budget)


@bp.route('')
@login_required
def index():
    today = date.today()
    month = request.args.get('month', today.month, type=int)
    year = request.args.get('year', today.year, type=int)
    if not 1 <= month <= 12:
        month = today.month
    budget_list = get_services().budgets.get_budget_list(current_user.id, month, year)
    return render_template('budgets/index.html', budget_list=budget_list)


@bp.route('/create', methods=['GET', 'POST'])
@login_required
def create():
    if request.method == 'POST':
        try:
            data = parse_budget_form(request.form)
        except FormError as e:
            for message in e.errors:
                flash(message, 'danger')
            return _render_form(request.form)

        if not _is_budget_category(data.category_id):
            flash(INVALID_CATEGORY, 'danger')
            return _render_form(request.form)

        if not get_services().budgets.create_budget(data, current_user.id):
            flash('Budget already exists for this category and month', 'danger')
            return _render_form(request.form)

        flash('Budget created successfully!', 'success')
        return redirect(url_for('budgets.index', month=data.month, year=data.year))

    today = date.today()
    return _render_form({'month': today.month, 'year': today.year})


@bp.route('/<int:budget_id>/edit', methods=['GET', 'POST'])
@login_required
def edit(budget_id):
    service = get_services().budgets
    budget = service.get_by_id(budget_id, current_user.id)
    if budget is None:
        abort(404)

    if request.method == 'POST':
        try:
            data = parse_budget_form(request.form)
        except FormError as e:
            for message in e.errors:
                flash(message, 'danger')
            return _render_form(request.form, budget)

        if not _is_budget_category(data.category_id):
            flash(INVALID_CATEGORY, 'danger')
            return _render_form(request.form, budget)

        if not service.update_budget(budget_id, data, current_user.id):
            flash('Failed to update budget', 'danger')
            return _render_form(request.form, budget)

        flash('Budget updated successfully!', 'success')
        return redirect(url_for('budgets.index', month=data.month, year=data.year))

    return _render_form({
        'category_id': budget.category_id,
        'limit_amount': budget.limit_amount,
        'month': budget.month,
        'year': budget.year,
    }, budget)


@bp.route('/<int:budget_id>/delete', methods=['POST'])
@login_required
def delete(budget_id):
    if get_services().budgets.delete_budget(budget_id, current_user.id):
        return jsonify({'success': True, 'message': 'Budget deleted successfully!'})
    return jsonify({'success': False, 'message': 'Failed to delete budget'})
