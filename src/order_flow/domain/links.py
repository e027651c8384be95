"""Naming convention linking message subscriptions to affordances.

A process model announces what a caller may do next by waiting for
messages named ``Message_<ResourceType>_<LinkName>``, for example
``Message_Payment_Settle``: resource type ``Payment``, link ``Settle``.
The resource type may itself contain underscores; the link name is
whatever follows the last one.
"""

from __future__ import annotations

from typing import NamedTuple

from .errors import MalformedSubscriptionNameError

MESSAGE_PREFIX = "Message_"
SEPARATOR = "_"


class SubscriptionName(NamedTuple):
    resource_type: str
    link_name: str


def parse_subscription_name(name: str) -> SubscriptionName:
    """Split a subscription name into resource type and link name.

    Raises:
        MalformedSubscriptionNameError: If the prefix is missing, or the
            resource type or link name is empty.
    """
    if not name.startswith(MESSAGE_PREFIX):
        raise MalformedSubscriptionNameError(name, f"missing {MESSAGE_PREFIX!r} prefix")

    rest = name[len(MESSAGE_PREFIX):]
    resource_type, sep, link_name = rest.rpartition(SEPARATOR)
    if not sep:
        raise MalformedSubscriptionNameError(name, "no link name separator")
    if not resource_type:
        raise MalformedSubscriptionNameError(name, "empty resource type")
    if not link_name:
        raise MalformedSubscriptionNameError(name, "empty link name")
    return SubscriptionName(resource_type, link_name)


def extract_link_name(name: str) -> str:
    """Link name of a subscription: whatever follows the last ``_``.

    Unlike ``parse_subscription_name`` this does not require a resource
    type, so ``Message_PAYMENT`` yields ``PAYMENT``.

    Raises:
        MalformedSubscriptionNameError: If the prefix is missing or the
            name ends with the separator.
    """
    if not name.startswith(MESSAGE_PREFIX):
        raise MalformedSubscriptionNameError(name, f"missing {MESSAGE_PREFIX!r} prefix")
    link_name = name.rpartition(SEPARATOR)[2]
    if not link_name:
        raise MalformedSubscriptionNameError(name, "empty link name")
    return link_name


def link_prefix(resource_type: str) -> str:
    """Prefix shared by all subscriptions of ``resource_type``.

    There is no separator after the resource type, so ``Pay`` also
    matches ``Message_Payment_Settle``.
    """
    return f"{MESSAGE_PREFIX}{resource_type}"
