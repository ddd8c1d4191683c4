"""AWS boto3 client that lists EC2 instances as flat InstanceRecords."""

from __future__ import annotations

import logging
from typing import Any, Iterable

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from ..exceptions import ProviderError
from .models import InstanceRecord

logger = logging.getLogger(__name__)

NAME_TAG = "Name"
INSTANCE_TAG = "opsworks:instance"
STACK_TAG = "opsworks:stack"


class AWSClient:
    """Lists every EC2 instance in one region, using a named credential profile."""

    def __init__(self, region: str, profile: str):
        self._region = region
        self._profile = profile
        try:
            session = boto3.Session(region_name=region, profile_name=profile)
            self._ec2 = session.client("ec2")
        except BotoCoreError as exc:
            raise ProviderError(str(exc)) from exc

    def fetch(self) -> list[InstanceRecord]:
        """Describe all instances and flatten reservations into records."""
        records: list[InstanceRecord] = []
        try:
            paginator = self._ec2.get_paginator("describe_instances")
            for page in paginator.paginate():
                for reservation in page.get("Reservations", []):
                    for raw in reservation.get("Instances", []):
                        records.append(_parse_instance(raw))
        except (ClientError, BotoCoreError) as exc:
            raise ProviderError(str(exc)) from exc

        logger.debug(
            "Fetched %d instances from %s (profile %s)",
            len(records), self._region, self._profile,
        )
        return records


def _first_tag(tags: Iterable[dict[str, str]], key: str) -> str | None:
    """Value of the first tag whose key equals ``key`` exactly."""
    for tag in tags:
        if tag.get("Key") == key:
            return tag.get("Value")
    return None


def _parse_instance(raw: dict[str, Any]) -> InstanceRecord:
    tags = raw.get("Tags") or []
    # EC2 reports PublicDnsName as "" for instances without a public address
    public_address = raw.get("PublicIpAddress") or raw.get("PublicDnsName") or None

    return InstanceRecord(
        display_name=_first_tag(tags, NAME_TAG),
        internal_hostname=_first_tag(tags, INSTANCE_TAG),
        group_name=_first_tag(tags, STACK_TAG),
        lifecycle_state=raw.get("State", {}).get("Name", ""),
        public_address=public_address,
        instance_id=raw.get("InstanceId"),
    )
