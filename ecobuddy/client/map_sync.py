"""
Map/Table Synchronisation

The map and the facility table never talk to each other. Each publishes a
selection event on the bus; ``MapTableSync`` turns either one into a single
``facility.highlighted`` event that both views consume.
"""

import logging
import math
from collections import defaultdict
from dataclasses import dataclass

logger = logging.getLogger(__name__)

PIN_SELECTED = 'pin.selected'
ROW_SELECTED = 'row.selected'
FACILITY_HIGHLIGHTED = 'facility.highlighted'
FACILITY_UPDATED = 'facility.updated'

DEFAULT_CENTER = (53.483959, -2.244644)
DEFAULT_ZOOM = 13
FLY_ZOOM = 16

ICON_DEFAULT = 'facility'
ICON_HIGHLIGHTED = 'highlighted'


class EventBus:
    def __init__(self):
        self._subscribers = defaultdict(list)

    def subscribe(self, topic, handler):
        self._subscribers[topic].append(handler)

    def unsubscribe(self, topic, handler):
        if handler in self._subscribers[topic]:
            self._subscribers[topic].remove(handler)

    def publish(self, topic, **payload):
        for handler in list(self._subscribers[topic]):
            handler(**payload)


def parse_coordinate(value):
    """Decimal degrees as float, or None when missing or not a number."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def popup_content(facility):
    """Fields shown in a pin's info popup."""
    address_parts = [facility.get(key) for key in ('houseNumber', 'streetName', 'town', 'county', 'postcode')]
    return {
        'title': facility.get('title'),
        'category': facility.get('category_name') or facility.get('category'),
        'description': facility.get('description'),
        'status': facility.get('comments') or 'No status',
        'address': ', '.join(str(p) for p in address_parts if p),
    }


@dataclass
class Pin:
    facility_id: int
    lat: float
    lng: float
    icon: str = ICON_DEFAULT


class MapView:
    """State of the map widget: pins, view centre and the open popup."""

    def __init__(self, bus, center=DEFAULT_CENTER, zoom=DEFAULT_ZOOM):
        self.bus = bus
        self.center = tuple(center)
        self.zoom = zoom
        self.pins = {}
        self.active_pin = None
        self.popup = None
        bus.subscribe(FACILITY_HIGHLIGHTED, self._on_highlighted)
        bus.subscribe(FACILITY_UPDATED, self._on_updated)

    def render(self, facilities):
        """Replace all pins; facilities without usable coordinates get none."""
        self.pins = {}
        self.active_pin = None
        self.popup = None
        for facility in facilities:
            lat = parse_coordinate(facility.get('lat'))
            lng = parse_coordinate(facility.get('lng'))
            if lat is None or lng is None:
                continue
            self.pins[facility['id']] = Pin(facility['id'], lat, lng)

    def click_pin(self, facility_id):
        self.bus.publish(PIN_SELECTED, facility_id=facility_id)

    def fly_to(self, lat, lng, zoom=FLY_ZOOM):
        self.center = (lat, lng)
        self.zoom = zoom

    def highlighted_pins(self):
        return [pin.facility_id for pin in self.pins.values() if pin.icon == ICON_HIGHLIGHTED]

    def _on_highlighted(self, facility, source):
        pin = self.pins.get(facility['id'])
        if pin is None:
            return
        if self.active_pin is not None and self.active_pin in self.pins:
            self.pins[self.active_pin].icon = ICON_DEFAULT
        pin.icon = ICON_HIGHLIGHTED
        self.active_pin = pin.facility_id
        self.fly_to(pin.lat, pin.lng)
        self.popup = {'facility_id': pin.facility_id, **popup_content(facility)}

    def _on_updated(self, facility):
        if self.popup is not None and self.popup['facility_id'] == facility['id']:
            self.popup = {'facility_id': facility['id'], **popup_content(facility)}


class TableView:
    """State of the facility table: which row is highlighted and scrolled to."""

    def __init__(self, bus, row_ids):
        self.bus = bus
        self.row_ids = list(row_ids)
        self.highlighted_row = None
        self.scrolled_to = None
        bus.subscribe(FACILITY_HIGHLIGHTED, self._on_highlighted)

    def click_row(self, facility_id):
        self.bus.publish(ROW_SELECTED, facility_id=facility_id)

    def _on_highlighted(self, facility, source):
        if facility['id'] not in self.row_ids:
            self.highlighted_row = None
            return
        self.highlighted_row = facility['id']
        self.scrolled_to = facility['id']


class MapTableSync:
    """Owns the in-memory facility collection and routes selections."""

    def __init__(self, bus, facilities, api=None):
        self.bus = bus
        self.api = api
        self.facilities = {f['id']: dict(f) for f in facilities}
        bus.subscribe(PIN_SELECTED, self._on_pin_selected)
        bus.subscribe(ROW_SELECTED, self._on_row_selected)

    def _on_pin_selected(self, facility_id):
        self._highlight(facility_id, 'pin')

    def _on_row_selected(self, facility_id):
        facility = self.facilities.get(facility_id)
        if facility is None:
            return
        # rows without coordinates have nothing to show on the map
        if parse_coordinate(facility.get('lat')) is None or parse_coordinate(facility.get('lng')) is None:
            return
        self._highlight(facility_id, 'row')

    def _highlight(self, facility_id, source):
        facility = self.facilities.get(facility_id)
        if facility is None:
            logger.debug('Selection for unknown facility %s ignored', facility_id)
            return
        self.bus.publish(FACILITY_HIGHLIGHTED, facility=facility, source=source)

    def apply_comment_update(self, facility_id, comment):
        """Record a new status so popups opened later show it."""
        facility = self.facilities.get(facility_id)
        if facility is None:
            return False
        facility['comments'] = comment
        self.bus.publish(FACILITY_UPDATED, facility=facility)
        return True

    def submit_comment(self, facility_id, comment):
        """Send the update to the server, then refresh the local copy."""
        result = self.api.update_comment(facility_id, comment)
        if result.get('success'):
            data = result.get('data', {})
            self.apply_comment_update(data.get('facility_id', facility_id), data.get('comment', comment))
        return result
