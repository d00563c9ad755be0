"""
Admin Routes

Facility management: list, add, edit and delete.
"""

from flask import render_template, request, redirect, url_for, flash, current_app
from ecobuddy.admin import admin_bp
from ecobuddy.admin.decorators import admin_required
from ecobuddy.context import RequestContext
from ecobuddy.errors import ValidationError
from ecobuddy.services import (SearchQuery, search_page, page_window, clamp_page, get_facility,
                               all_categories, clean_facility_fields, add_facility, update_facility,
                               delete_facility)


@admin_bp.route('/')
@admin_required
def admin_home():
    return redirect(url_for('admin.manage_facilities'))


@admin_bp.route('/facilities', methods=['GET', 'POST'])
@admin_required
def manage_facilities():
    """Manage facilities - list, search, add new facilities."""
    if request.method == 'POST':
        ctx = RequestContext.from_form().require_valid_token()
        try:
            values = clean_facility_fields(request.form)
        except ValidationError as e:
            flash(e.message, 'danger')
            return redirect(url_for('admin.manage_facilities'))

        facility = add_facility(values, contributor=ctx.username)
        flash(f'Facility "{facility.title}" added successfully.', 'success')
        return redirect(url_for('admin.manage_facilities'))

    search = request.args.get('search', '').strip()
    page_size = current_app.config['FACILITY_PAGE_SIZE']
    page = clamp_page(request.args.get('page', 1, type=int), page_size)
    result = search_page(SearchQuery(keyword=search).paged(page, page_size))

    return render_template('admin/facilities.html',
                           facilities=result.items,
                           total=result.total,
                           page=page,
                           total_pages=result.total_pages,
                           pages=page_window(page, result.total_pages, current_app.config['PAGE_WINDOW']),
                           search=search,
                           categories=all_categories())


@admin_bp.route('/facilities/<int:facility_id>/edit', methods=['GET', 'POST'])
@admin_required
def edit_facility(facility_id):
    """Edit an existing facility."""
    facility = get_facility(facility_id)

    if request.method == 'POST':
        RequestContext.from_form().require_valid_token()
        try:
            values = clean_facility_fields(request.form)
        except ValidationError as e:
            flash(e.message, 'danger')
            return redirect(url_for('admin.edit_facility', facility_id=facility_id))

        update_facility(facility_id, values)
        flash(f'Facility "{values["title"]}" updated successfully.', 'success')
        return redirect(url_for('admin.manage_facilities'))

    return render_template('admin/edit_facility.html', facility=facility, categories=all_categories())


@admin_bp.route('/facilities/<int:facility_id>/delete', methods=['POST'])
@admin_required
def remove_facility(facility_id):
    """Delete a facility."""
    RequestContext.from_form().require_valid_token()
    title = delete_facility(facility_id)
    flash(f'Facility "{title}" deleted successfully.', 'success')
    return redirect(url_for('admin.manage_facilities'))
