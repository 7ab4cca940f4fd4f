"""Per-call operation options and their resolution into query parameters."""

from collections.abc import Mapping
from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..exceptions import InvalidOption


class UpdatePolicy(str, Enum):
    ERROR = "error"
    LAST = "last"


POLICY_VALUES = frozenset(p.value for p in UpdatePolicy)


class OperationKind(str, Enum):
    REPLACE = "replace"
    UPDATE = "update"
    DELETE = "delete"


# Revision-match query parameter
REVISION_PARAM = "rev"


class ReadOptions(BaseModel):
    """Controls which attributes a fetched record exposes from ``get_all()``."""

    include_internals: bool = False
    ignore_hidden_attributes: bool = False
    hidden_attributes: list[str] = Field(default_factory=list)

    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class OperationOptions(BaseModel):
    """Options for replace/update/remove calls.

    ``None`` means "use the connection default" for every field.
    """

    policy: Optional[UpdatePolicy] = None
    wait_for_sync: Optional[bool] = Field(default=None, alias="waitForSync")
    keep_null: Optional[bool] = Field(default=None, alias="keepNull")

    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)

    @field_validator("policy", mode="before")
    @classmethod
    def _check_policy(cls, value: Any) -> Any:
        if value is None or isinstance(value, UpdatePolicy):
            return value
        if isinstance(value, str) and value in POLICY_VALUES:
            return value
        raise ValueError(
            f"Invalid update policy {value!r}, expected one of 'error', 'last' or None"
        )

    @classmethod
    def coerce(
        cls, value: Union["OperationOptions", Mapping[str, Any], str, bool, None]
    ) -> "OperationOptions":
        """Normalise the accepted option forms into an ``OperationOptions``.

        Besides an instance or a mapping, a bare value is accepted and taken
        as the policy, which keeps older call sites that passed the policy
        positionally working.
        """
        if value is None:
            return cls()
        if isinstance(value, cls):
            return value
        try:
            if isinstance(value, Mapping):
                return cls.model_validate(dict(value))
            return cls(policy=value)
        except ValidationError as exc:
            raise InvalidOption(str(exc)) from exc


OptionsArg = Union[OperationOptions, Mapping[str, Any], str, bool, None]


def resolve_operation_params(
    options: OptionsArg,
    connection: Any,
    kind: OperationKind,
    revision: Optional[str] = None,
    keep_null: bool = False,
) -> dict[str, Any]:
    """
    Build the query parameters for a replace/update/remove request.

    Explicit options win over the connection defaults (``<kind>_policy`` and
    ``wait_for_sync``); ``keepNull`` is only sent for operations that accept
    it and defaults to ``True``. A non-null ``revision`` is attached as the
    revision-match parameter.

    Raises:
        InvalidOption: If the policy is not one of the allowed values. Raised
            before anything is sent.
    """
    opts = OperationOptions.coerce(options)
    params: dict[str, Any] = {}

    policy = opts.policy.value if opts.policy is not None else None
    if policy is None:
        policy = connection.get_option(f"{kind.value}_policy")
        if policy is not None and policy not in POLICY_VALUES:
            raise InvalidOption(f"Invalid default {kind.value} policy {policy!r}")
    if policy is not None:
        params["policy"] = policy

    params["waitForSync"] = (
        opts.wait_for_sync
        if opts.wait_for_sync is not None
        else connection.get_option("wait_for_sync")
    )
    if keep_null:
        params["keepNull"] = opts.keep_null if opts.keep_null is not None else True

    if revision is not None:
        params[REVISION_PARAM] = revision
    return params
