"""
Dashboard Routes

Public facility table and map.
"""

from flask import render_template, redirect, url_for, request, current_app
from ecobuddy.dashboard import dashboard_bp
from ecobuddy.models import FacilityStatus
from ecobuddy.services import (SearchQuery, search_page, page_window, clamp_page, all_located_facilities,
                               list_categories, list_towns)


def _listing_args(page_size):
    """Read page/search/sort arguments, falling back to defaults for bad values."""
    page = clamp_page(request.args.get('page', 1, type=int), page_size)
    sort_order = request.args.get('sortOrder', 'ASC').upper()
    if sort_order not in ('ASC', 'DESC'):
        sort_order = 'ASC'
    return page, request.args.get('search', '').strip(), sort_order


@dashboard_bp.route('/')
def index():
    """Redirect to the facility dashboard"""
    return redirect(url_for('dashboard.dashboard'))


@dashboard_bp.route('/dashboard')
def dashboard():
    """Paged facility table with filters, plus every located facility for the map"""
    page_size = current_app.config['FACILITY_PAGE_SIZE']
    page, search, sort_order = _listing_args(page_size)

    query = SearchQuery.from_params(search,
                                    request.args.get('category', ''),
                                    request.args.get('town', ''),
                                    sort_order=sort_order).paged(page, page_size)
    result = search_page(query)

    map_facilities = [f.to_dict() for f in all_located_facilities()]

    return render_template('dashboard/dashboard.html',
                           facilities=result.items,
                           total=result.total,
                           page=page,
                           total_pages=result.total_pages,
                           pages=page_window(page, result.total_pages, current_app.config['PAGE_WINDOW']),
                           search=search,
                           sort_order=sort_order,
                           category=query.category,
                           town=query.town,
                           categories=list_categories(),
                           towns=list_towns(),
                           statuses=FacilityStatus.values(),
                           map_facilities=map_facilities,
                           map_center=current_app.config['DEFAULT_MAP_CENTER'],
                           map_zoom=current_app.config['DEFAULT_MAP_ZOOM'])
