import logging

from .notifications_api import NotificationsAPI
from .projects_api import ProjectsAPI
from .policy_rules_api import PolicyRulesAPI
from .components_api import ComponentsAPI

# Assume logger is configured in main.py
logger = logging.getLogger("hub-client")


class HubAPI(NotificationsAPI, ProjectsAPI, PolicyRulesAPI, ComponentsAPI):
    """
    Hub API client class for interacting with the Hub REST API.
    This class composes all the individual API parts into a single client.
    """
    pass
