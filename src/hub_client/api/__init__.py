# hub_client/api/__init__.py

from .hub_api import HubAPI
from .helpers.external_id import ExternalId

__all__ = ['HubAPI', 'ExternalId']
