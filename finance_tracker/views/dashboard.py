from flask import Blueprint, jsonify, render_template, request
from flask_login import current_user, login_required

from ..reports import category_chart, monthly_trend, resolve_period, summarize_expenses
from ..repository import TransactionFilter
from ..services import get_services

bp = Blueprint('dashboard', __name__)


@bp.route('/')
@bp.route('/dashboard')
@login_required
def index():
    snapshot = get_services().dashboard.get_dashboard(current_user.id)
    return render_template('dashboard.html', dashboard=snapshot)


@bp.route('/dashboard/chart-data')
@login_required
def chart_data():
    snapshot = get_services().dashboard.get_dashboard(current_user.id)
    return jsonify(category_chart(snapshot.expenses_by_category))


# Reports
@bp.route('/report')
@login_required
def report():
    return render_template('report.html')


@bp.route('/api/summary')
@login_required
def api_summary():
    # Params: range=month|year, start=YYYY-MM-DD, end=YYYY-MM-DD
    try:
        start_date, end_date = resolve_period(request.args.get('range', 'month'),
                                              request.args.get('start'),
                                              request.args.get('end'))
    except ValueError:
        return jsonify({'error': 'Dates must be in YYYY-MM-DD format'}), 400

    transactions = get_services().transactions.search(
        current_user.id, TransactionFilter(start_date=start_date, end_date=end_date))
    summary = summarize_expenses(transactions, start_date, end_date)
    summary.update(monthly_trend(transactions))
    return jsonify(summary)
