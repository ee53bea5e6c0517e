"""Instance domain and profile resource for the procdom SDK."""

from typing import List, Sequence
from urllib.parse import quote

from pydantic import ValidationError

from procdom.schemas.metrics import Instance, Profile

from ..exceptions import TransportError
from ..transport import Transport


class InstanceDomainResource:
    """
    Instance enumeration, single-instance lookups and profile management.

    Profiles are scoped to the owning session; the service never applies
    them to other sessions.
    """

    def __init__(self, transport: Transport, session_path: str):
        self._transport = transport
        self._base = session_path

    def _path(self, indom: str, suffix: str = "") -> str:
        return f"{self._base}/indoms/{quote(indom, safe='')}{suffix}"

    def get_indom(self, indom: str) -> List[Instance]:
        result = self._transport.request("GET", self._path(indom, "/instances"))
        instances = (result or {}).get("instances")
        if not isinstance(instances, list):
            raise TransportError(f"indom {indom} returned no instance list")
        try:
            return [Instance.model_validate(i) for i in instances]
        except ValidationError as e:
            raise TransportError(f"indom {indom} returned a malformed instance: {e}") from e

    def lookup_instance(self, indom: str, name: str) -> int:
        """Raises InstanceNotFoundError when no instance has this name."""
        result = self._transport.request("GET", self._path(indom, "/instances/lookup"), params={"name": name})
        try:
            return int((result or {})["id"])
        except (KeyError, TypeError, ValueError) as e:
            raise TransportError(f"instance lookup for {name!r} returned {result!r}") from e

    def instance_name(self, indom: str, inst: int) -> str:
        """Raises InstanceNotFoundError when no instance has this id."""
        result = self._transport.request("GET", self._path(indom, f"/instances/{int(inst)}"))
        name = (result or {}).get("name")
        if not isinstance(name, str):
            raise TransportError(f"instance name for {inst} returned {result!r}")
        return name

    def delete_profile(self, indom: str) -> None:
        self._transport.request("DELETE", self._path(indom, "/profile"))

    def add_profile(self, indom: str, instances: Sequence[int]) -> None:
        self._transport.request("POST", self._path(indom, "/profile"), json={"instances": [int(i) for i in instances]})

    def describe_profile(self, indom: str) -> Profile:
        result = self._transport.request("GET", self._path(indom, "/profile")) or {}
        try:
            return Profile.model_validate({"indom": indom, "instances": result.get("instances")})
        except ValidationError as e:
            raise TransportError(f"profile of indom {indom} is malformed: {e}") from e
