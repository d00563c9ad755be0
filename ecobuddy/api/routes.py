"""
API Routes

JSON endpoints for the live search dropdown, the dashboard map and the
status comment dropdown.
"""

import logging

from flask import jsonify, request, current_app
from ecobuddy.api import api_bp
from ecobuddy.context import RequestContext, issue_token
from ecobuddy.errors import ValidationError
from ecobuddy.models import FacilityStatus
from ecobuddy.services import (SearchQuery, search_facilities, get_facility, list_categories,
                               list_towns, update_comment)

logger = logging.getLogger(__name__)


@api_bp.route('/csrf-token')
def csrf_token():
    """Issue the session's anti-forgery token for AJAX callers"""
    return jsonify({'csrf_token': issue_token()})


@api_bp.route('/search')
def search():
    """Live search: keyword plus optional category and town filters.

    Query Parameters:
        q: keyword, may be empty
        category: category id or empty
        town: exact town name or empty

    The anti-forgery token travels in the X-CSRF-Token header. At most
    SEARCH_RESULT_LIMIT records are returned.
    """
    RequestContext.from_header().require_valid_token()

    query = SearchQuery.from_params(request.args.get('q', ''),
                                    request.args.get('category', ''),
                                    request.args.get('town', ''),
                                    limit=current_app.config['SEARCH_RESULT_LIMIT'])
    results = search_facilities(query)
    logger.debug('Search %r returned %d facilities', query, len(results))
    return jsonify([f.to_dict() for f in results])


@api_bp.route('/comments', methods=['POST'], provide_automatic_options=False)
def update_comments():
    """Set a facility's status comment from the allowed list"""
    RequestContext.from_form().require_valid_token()

    raw_id = request.form.get('facility_id')
    comment = request.form.get('comments')
    if raw_id is None or comment is None:
        raise ValidationError('Missing facility_id or comments.')
    try:
        facility_id = int(raw_id)
    except ValueError:
        raise ValidationError('facility_id must be an integer.')

    status = update_comment(facility_id, comment)
    return jsonify({
        'success': True,
        'message': 'Comment updated successfully.',
        'data': {
            'facility_id': facility_id,
            'comment': status.value
        }
    })


@api_bp.route('/facilities/<int:facility_id>')
def facility_detail(facility_id):
    return jsonify(get_facility(facility_id).to_dict())


@api_bp.route('/categories')
def categories():
    return jsonify([c.to_dict() for c in list_categories()])


@api_bp.route('/towns')
def towns():
    return jsonify(list_towns())


@api_bp.route('/statuses')
def statuses():
    return jsonify(FacilityStatus.values())
