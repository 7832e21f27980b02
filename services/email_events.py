"""SendGrid event webhook handling (delivery, engagement and failure events)."""

import logging
from typing import Any, Dict, Iterable, List, Union

logger = logging.getLogger(__name__)

INFO_EVENTS = {
    "delivered": "Email delivered to {email}",
    "open": "Email opened by {email}",
    "click": "Link clicked by {email}",
    "unsubscribe": "Recipient unsubscribed: {email}",
}

WARNING_EVENTS = {
    "bounce": "Email bounced for {email}, reason: {reason}",
    "dropped": "Email dropped for {email}, reason: {reason}",
    "spam_report": "Email reported as spam by {email}",
}


def process_email_event(event: Dict[str, Any]) -> None:
    """Log a single email event at a level matching its severity. Never raises."""
    try:
        event_type = event.get("event")
        fields = {"email": event.get("email"), "reason": event.get("reason")}

        if event_type in WARNING_EVENTS:
            logger.warning(WARNING_EVENTS[event_type].format(**fields))
        elif event_type in INFO_EVENTS:
            logger.info(INFO_EVENTS[event_type].format(**fields))
        else:
            logger.info(f"Unhandled email event: {event_type} for {fields['email']}")
    except Exception as e:
        logger.error(f"Failed to process email event: {e}")


def normalize_events(payload: Union[Dict[str, Any], List[Any]]) -> Iterable[Dict[str, Any]]:
    """SendGrid posts a list of events; single objects are accepted too."""
    events = payload if isinstance(payload, list) else [payload]
    return [event for event in events if isinstance(event, dict)]


def process_email_events(payload: Union[Dict[str, Any], List[Any]]) -> int:
    """Process every event in a webhook body. Returns the number handled."""
    events = normalize_events(payload)
    for event in events:
        process_email_event(event)
    return len(events)
