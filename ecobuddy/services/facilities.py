"""
Facility Directory Service

Create, read, update and delete facilities, status comment updates, and the
category/town listings used by the filter dropdowns. Each write touches a
single row inside a single commit.
"""

import logging

from ecobuddy.errors import NotFoundError, ValidationError
from ecobuddy.extensions import db
from ecobuddy.models import Category, Facility, FacilityStatus
from ecobuddy.services.store import store_operation, fits_integer_column

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ('title', 'category', 'description')
TEXT_FIELDS = ('house_number', 'street_name', 'town', 'county', 'postcode')


def get_facility(facility_id):
    if not fits_integer_column(facility_id):
        raise NotFoundError(f'Facility {facility_id} not found.')
    with store_operation('loading facility %s' % facility_id):
        facility = db.session.get(Facility, facility_id)
    if facility is None:
        raise NotFoundError(f'Facility {facility_id} not found.')
    return facility


def all_located_facilities():
    """Every facility with coordinates, in id order, for the map."""
    with store_operation('loading map facilities'):
        return Facility.query.filter(Facility.lat.isnot(None), Facility.lng.isnot(None))\
            .order_by(Facility.id).all()


def list_categories():
    """Categories referenced by at least one facility, by name."""
    with store_operation('listing categories'):
        return Category.query.join(Facility, Facility.category == Category.id)\
            .distinct().order_by(Category.name).all()


def all_categories():
    with store_operation('listing all categories'):
        return Category.query.order_by(Category.name).all()


def list_towns():
    """Distinct non-empty towns, alphabetical."""
    with store_operation('listing towns'):
        rows = db.session.query(Facility.town)\
            .filter(Facility.town.isnot(None), Facility.town != '')\
            .distinct().order_by(Facility.town).all()
    return [row[0] for row in rows]


def clean_facility_fields(form):
    """Validate and normalise admin form input.

    Returns a dict of model attribute values. Raises ValidationError with a
    message suitable for flashing.
    """
    values = {}
    for name in ('title', 'description'):
        values[name] = (form.get(name) or '').strip()

    raw_category = (form.get('category') or '').strip()
    if not values['title'] or not raw_category or not values['description']:
        raise ValidationError('Title, category and description are required.')
    try:
        values['category'] = int(raw_category)
    except ValueError:
        raise ValidationError('Category must be a numeric id.')
    if not fits_integer_column(values['category']) or db.session.get(Category, values['category']) is None:
        raise ValidationError('Unknown category.')

    for name in TEXT_FIELDS:
        values[name] = (form.get(name) or '').strip() or None

    try:
        for name in ('lat', 'lng'):
            raw = (form.get(name) or '').strip()
            values[name] = float(raw) if raw else None
    except ValueError:
        raise ValidationError('Latitude and Longitude must be valid numbers.')
    return values


def add_facility(values, contributor=None):
    facility = Facility(contributor=contributor, **values)
    with store_operation('adding facility', write=True):
        db.session.add(facility)
        db.session.commit()
    logger.info('Facility %s "%s" added by %s', facility.id, facility.title, contributor)
    return facility


def update_facility(facility_id, values):
    facility = get_facility(facility_id)
    for name, value in values.items():
        setattr(facility, name, value)
    with store_operation('updating facility %s' % facility_id, write=True):
        db.session.commit()
    logger.info('Facility %s updated', facility_id)
    return facility


def delete_facility(facility_id):
    facility = get_facility(facility_id)
    title = facility.title
    with store_operation('deleting facility %s' % facility_id, write=True):
        db.session.delete(facility)
        db.session.commit()
    logger.info('Facility %s "%s" deleted', facility_id, title)
    return title


def update_comment(facility_id, comment):
    """Set the status comment of one facility.

    ``comment`` must be a FacilityStatus value. Raises NotFoundError when no
    row was updated.
    """
    status = FacilityStatus.parse(comment)
    if status is None:
        raise ValidationError('Invalid comment selected.')
    if not fits_integer_column(facility_id):
        raise NotFoundError('Failed to update comment (facility not found).')

    with store_operation('updating comment on facility %s' % facility_id, write=True):
        updated = Facility.query.filter_by(id=facility_id)\
            .update({Facility.comments: status.value}, synchronize_session='fetch')
        if not updated:
            db.session.rollback()
        else:
            db.session.commit()

    if not updated:
        raise NotFoundError('Failed to update comment (facility not found).')
    logger.info('Facility %s comment set to "%s"', facility_id, status.value)
    return status
