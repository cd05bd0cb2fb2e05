"""Theme customizer settings over the site's REST endpoint."""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from sydney_e2e.config import SITE_CONFIG, SiteConfig
from sydney_e2e.errors import CustomizerError

logger = logging.getLogger(__name__)


def set_customizer_setting(
    setting_key: str,
    setting_value: Any,
    site: SiteConfig = SITE_CONFIG,
    client: Optional[httpx.Client] = None,
) -> Dict[str, Any]:
    """Update one theme mod and return the endpoint's JSON reply.

    Raises:
        CustomizerError: the endpoint answered with a non-2xx status.
    """
    payload = {"setting_key": setting_key, "setting_value": setting_value}

    if client is None:
        with httpx.Client(timeout=30.0) as own_client:
            response = own_client.post(site.customizer_api_url, json=payload)
    else:
        response = client.post(site.customizer_api_url, json=payload)

    if not response.is_success:
        raise CustomizerError(
            setting_key=setting_key,
            status_code=response.status_code,
            body=response.text,
        )

    logger.info("Set customizer setting %s=%r", setting_key, setting_value)
    return response.json()
