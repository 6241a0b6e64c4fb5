"""
Pre-flight check of the SAS token carried by signed artifact URLs.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional
from urllib.parse import parse_qs, urlparse

from bcartifacts.bcartifacts_exceptions import ExpiredSasTokenError, InvalidSasTokenError
from bcartifacts.bcartifacts_logger import ArtifactLogger
from bcartifacts.bcartifacts_utils import UrlUtils

EXPIRY_WARNING_PERIOD = timedelta(days=14)


def _parse_expiry(value: str) -> datetime:
    expiry = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if expiry.tzinfo is None:
        expiry = expiry.replace(tzinfo=timezone.utc)
    return expiry


def validate_sas_token(
    url: str,
    logger: Optional[ArtifactLogger] = None,
    now: Optional[datetime] = None,
) -> None:
    """
    Validate the SAS token of url, if it has one.

    URLs without a signature (sig) are public and pass unchecked.

    Raises:
        InvalidSasTokenError: the URL is signed but has no readable expiry (se)
        ExpiredSasTokenError: the expiry is in the past
    """
    query = parse_qs(urlparse(url).query)
    if "sig" not in query:
        return

    expiry_values = query.get("se")
    if not expiry_values:
        raise InvalidSasTokenError(
            f"SAS token of {UrlUtils.redact(url)} has no expiry"
        )
    try:
        expiry = _parse_expiry(expiry_values[0])
    except ValueError as e:
        raise InvalidSasTokenError(
            f"SAS token of {UrlUtils.redact(url)} has an invalid expiry '{expiry_values[0]}'"
        ) from e

    if now is None:
        now = datetime.now(timezone.utc)
    if expiry <= now:
        raise ExpiredSasTokenError(
            f"SAS token of {UrlUtils.redact(url)} expired on {expiry:%Y-%m-%d}"
        )
    if logger is not None and expiry - now < EXPIRY_WARNING_PERIOD:
        logger.log(
            f"SAS token of {UrlUtils.redact(url)} expires on {expiry:%Y-%m-%d}",
            logging.WARNING,
        )
