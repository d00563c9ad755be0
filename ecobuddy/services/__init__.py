"""
Services Package

Exports all services for easy importing.
"""

from ecobuddy.services.search import (SearchQuery, SearchPage, search_facilities, count_facilities,
                                      search_page, page_window, clamp_page)
from ecobuddy.services.facilities import (get_facility, all_located_facilities, list_categories,
                                          all_categories, list_towns, clean_facility_fields,
                                          add_facility, update_facility, delete_facility,
                                          update_comment)

__all__ = [
    'SearchQuery',
    'SearchPage',
    'search_facilities',
    'count_facilities',
    'search_page',
    'page_window',
    'clamp_page',
    'get_facility',
    'all_located_facilities',
    'list_categories',
    'all_categories',
    'list_towns',
    'clean_facility_fields',
    'add_facility',
    'update_facility',
    'delete_facility',
    'update_comment'
]
