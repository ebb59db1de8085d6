from typing import Any, Dict

import logging

from .helpers.api_base import APIBase

logger = logging.getLogger("hub-client")

POLICY_RULES_PATH = "/api/policy-rules"


class PolicyRulesAPI(APIBase):
    """Hub API Policy Rule Operations."""

    def get_policy_rule(self, rule_ref: str) -> Dict[str, Any]:
        """Fetches a policy rule given either its URL or its bare identifier."""
        if "/" in rule_ref:
            url = rule_ref
        else:
            url = f"{POLICY_RULES_PATH}/{rule_ref}"
        logger.debug("Fetching policy rule %s", url)
        return self._get_json(url)
